import logging
from datetime import timedelta

from libs.result import Result, Return
from src.app.services.notifications import AuthNotifier, NotificationError, TaskScheduler
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.validators import normalize_email
from src.app.services.verification_codes import VerificationCodeService
from src.app.use_cases.common_dtos import SuccessResponse
from src.domain.entities import UserStatus, VerificationType

logger = logging.getLogger(__name__)


class ResendVerificationUseCase:
    """
    Issues a fresh email_verification code.

    Security:
    - Same response whether or not the email exists or is already verified
      (no email enumeration)
    - Older codes stay valid until they expire
    - The email is sent after the response via the scheduler
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: AuthNotifier,
        schedule: TaskScheduler,
        verification_ttl: timedelta = timedelta(hours=24),
    ):
        self.uow = uow
        self.notifier = notifier
        self.schedule = schedule
        self.verification_ttl = verification_ttl

    async def execute(self, email: str) -> Result[SuccessResponse]:
        email = normalize_email(email)
        code = None

        async with self.uow:
            user = await self.uow.users.get_by_email(email)
            if user is not None and user.status == UserStatus.active and not user.email_verified:
                code = await VerificationCodeService(self.uow).issue(
                    VerificationType.email_verification,
                    self.verification_ttl,
                    user_id=user.id,
                    email=user.email,
                )
                await self.uow.commit()

        if code is not None:
            self.schedule(self._deliver, email, code)

        return Return.ok(SuccessResponse())

    async def _deliver(self, email: str, code: str) -> None:
        try:
            await self.notifier.send_verification_email(email, code)
        except NotificationError as exc:
            logger.warning(f"Verification email to {email} not delivered: {exc}")
