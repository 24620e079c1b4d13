from libs.result import Error, Result, Return
from src.app.services.audit import record_audit
from src.app.services.password_hasher import Argon2PasswordHasher
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.validators import validate_password
from src.app.services.verification_codes import VerificationCodeService
from src.app.use_cases.common_dtos import SuccessResponse
from src.domain.entities import VerificationType


class ConfirmPasswordResetUseCase:
    """
    Confirm Password Reset Use Case

    Business Rules:
    - New password must satisfy the password policy (INVALID_PASSWORD)
    - Token: unknown -> CODE_NOT_FOUND, used -> CODE_ALREADY_USED,
      expired -> CODE_EXPIRED
    - Two concurrent confirms with the same token: exactly one succeeds
    - Every session of the user is revoked (forced re-login everywhere)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        sessions: SessionManager,
        hasher: Argon2PasswordHasher,
    ):
        self.uow = uow
        self.sessions = sessions
        self.hasher = hasher

    async def execute(self, token: str, new_password: str) -> Result[SuccessResponse]:
        password_errors = validate_password(new_password)
        if password_errors:
            return Return.err(Error("INVALID_PASSWORD", "; ".join(password_errors)))

        async with self.uow:
            consumed = await VerificationCodeService(self.uow).consume(
                token, VerificationType.password_reset
            )
            if consumed.is_err():
                return consumed

            code = consumed.value
            user = None
            if code.user_id is not None:
                user = await self.uow.users.get_by_id(code.user_id)
            if user is None:
                return Return.err(Error("CODE_NOT_FOUND", "Invalid reset token"))

            user.password_hash = self.hasher.hash(new_password)
            await self.uow.users.update(user)

            revoked = await self.sessions.revoke_all_sessions(user.id)

            await record_audit(
                self.uow,
                "password_reset_completed",
                user_id=user.id,
                metadata={"sessionsRevoked": revoked},
            )
            await self.uow.commit()

            return Return.ok(SuccessResponse())
