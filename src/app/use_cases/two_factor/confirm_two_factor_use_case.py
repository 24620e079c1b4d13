from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.audit import record_audit
from src.app.services.totp_service import TotpService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common_dtos import SuccessResponse


class ConfirmTwoFactorUseCase:
    """Turns 2FA on once the user proves their authenticator holds the stored secret."""

    def __init__(self, uow: UnitOfWork, totp: TotpService):
        self.uow = uow
        self.totp = totp

    async def execute(self, user_id: UUID, code: str) -> Result[SuccessResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if user.two_factor_enabled:
                return Return.err(
                    Error("TWO_FACTOR_ALREADY_ENABLED", "Two-factor authentication is already enabled")
                )

            if not user.two_factor_secret:
                return Return.err(
                    Error("TWO_FACTOR_SETUP_NOT_STARTED", "Two-factor setup has not been started")
                )

            if not self.totp.verify(user.two_factor_secret, code):
                return Return.err(
                    Error("INVALID_TWO_FACTOR_CODE", "Invalid two-factor authentication code")
                )

            user.two_factor_enabled = True
            await self.uow.users.update(user)

            await record_audit(self.uow, "2fa_enabled", user_id=user.id)
            await self.uow.commit()

            return Return.ok(SuccessResponse())
