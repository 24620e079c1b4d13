from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.audit import record_audit
from src.app.services.password_hasher import Argon2PasswordHasher
from src.app.services.security import generate_backup_codes, hash_token
from src.app.services.totp_service import TotpService
from src.app.services.unit_of_work import UnitOfWork
from .dtos import TwoFactorSetupResponse


class EnableTwoFactorUseCase:
    """
    Starts 2FA setup.

    Business Rules:
    - Current password required (INVALID_PASSWORD_CONFIRMATION)
    - Already enabled -> TWO_FACTOR_ALREADY_ENABLED
    - Secret is stored unconfirmed: two_factor_enabled stays False until
      ConfirmTwoFactorUseCase succeeds; calling again replaces the secret
    - 10 backup codes, stored as SHA-256 hashes
    """

    def __init__(self, uow: UnitOfWork, hasher: Argon2PasswordHasher, totp: TotpService):
        self.uow = uow
        self.hasher = hasher
        self.totp = totp

    async def execute(self, user_id: UUID, password: str) -> Result[TwoFactorSetupResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if not user.password_hash or not self.hasher.verify(password, user.password_hash):
                return Return.err(Error("INVALID_PASSWORD_CONFIRMATION", "Invalid password"))

            if user.two_factor_enabled:
                return Return.err(
                    Error("TWO_FACTOR_ALREADY_ENABLED", "Two-factor authentication is already enabled")
                )

            secret = self.totp.generate_secret()
            backup_codes = generate_backup_codes()

            user.two_factor_secret = secret
            user.backup_codes = [hash_token(code) for code in backup_codes]
            await self.uow.users.update(user)

            await record_audit(self.uow, "2fa_setup_started", user_id=user.id)
            await self.uow.commit()

            return Return.ok(
                TwoFactorSetupResponse(
                    secret=secret,
                    qr_code_url=self.totp.provisioning_uri(secret, user.email),
                    backup_codes=backup_codes,
                )
            )
