from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.audit import record_audit
from src.app.services.password_hasher import Argon2PasswordHasher
from src.app.services.totp_service import TotpService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common_dtos import SuccessResponse


class DisableTwoFactorUseCase:
    """
    Turns 2FA off.

    Requires both the current password and a valid TOTP code; clears the
    secret, the backup codes and the flag.
    """

    def __init__(self, uow: UnitOfWork, hasher: Argon2PasswordHasher, totp: TotpService):
        self.uow = uow
        self.hasher = hasher
        self.totp = totp

    async def execute(self, user_id: UUID, password: str, code: str) -> Result[SuccessResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if not user.two_factor_enabled:
                return Return.err(
                    Error("TWO_FACTOR_NOT_ENABLED", "Two-factor authentication is not enabled")
                )

            if not user.password_hash or not self.hasher.verify(password, user.password_hash):
                return Return.err(Error("INVALID_PASSWORD_CONFIRMATION", "Invalid password"))

            if not self.totp.verify(user.two_factor_secret, code):
                return Return.err(
                    Error("INVALID_TWO_FACTOR_CODE", "Invalid two-factor authentication code")
                )

            user.two_factor_enabled = False
            user.two_factor_secret = None
            user.backup_codes = None
            await self.uow.users.update(user)

            await record_audit(self.uow, "2fa_disabled", user_id=user.id)
            await self.uow.commit()

            return Return.ok(SuccessResponse())
