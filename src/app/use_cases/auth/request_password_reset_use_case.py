import logging
from datetime import timedelta

from libs.result import Result, Return
from src.app.services.audit import record_audit
from src.app.services.notifications import AuthNotifier, NotificationError, TaskScheduler
from src.app.services.security import generate_secure_token
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.validators import normalize_email
from src.app.services.verification_codes import VerificationCodeService
from src.app.use_cases.common_dtos import SuccessResponse
from src.domain.entities import UserStatus, VerificationType

logger = logging.getLogger(__name__)


class RequestPasswordResetUseCase:
    """
    Request Password Reset Use Case

    Generates a 256-bit reset token (1 hour) and emails a reset link.

    Security:
    - Always returns success, whether or not the email is registered
      (no email enumeration)
    - Only the token's SHA-256 is stored
    - The email is sent after the response via the scheduler, so response
      time does not depend on whether the account exists
    - Delivery failure is logged and does not change the response
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: AuthNotifier,
        schedule: TaskScheduler,
        reset_ttl: timedelta = timedelta(hours=1),
    ):
        self.uow = uow
        self.notifier = notifier
        self.schedule = schedule
        self.reset_ttl = reset_ttl

    async def execute(self, email: str) -> Result[SuccessResponse]:
        email = normalize_email(email)
        reset_token = None

        async with self.uow:
            user = await self.uow.users.get_by_email(email)
            if user is not None and user.status == UserStatus.active:
                reset_token = await VerificationCodeService(self.uow).issue(
                    VerificationType.password_reset,
                    self.reset_ttl,
                    user_id=user.id,
                    email=user.email,
                    code=generate_secure_token(),
                )
                await record_audit(self.uow, "password_reset_requested", user_id=user.id)
                await self.uow.commit()

        if reset_token is not None:
            self.schedule(self._deliver, email, reset_token)

        return Return.ok(SuccessResponse())

    async def _deliver(self, email: str, reset_token: str) -> None:
        try:
            await self.notifier.send_password_reset_email(email, reset_token)
        except NotificationError as exc:
            logger.warning(f"Password reset email to {email} not delivered: {exc}")
