import logging
from datetime import timedelta

from libs.result import Error, Result, Return
from src.app.services.notifications import AuthNotifier, NotificationError
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.validators import normalize_phone, validate_phone
from src.app.services.verification_codes import VerificationCodeService
from src.app.use_cases.common_dtos import SuccessResponse
from src.domain.entities import VerificationType

logger = logging.getLogger(__name__)


class SendPhoneCodeUseCase:
    """
    Texts a 6-digit phone_verification code (10 minutes).

    The code row is committed before sending, so an SMS outage leaves a
    usable-but-undelivered code and returns NOTIFICATION_UNAVAILABLE.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: AuthNotifier,
        code_ttl: timedelta = timedelta(minutes=10),
    ):
        self.uow = uow
        self.notifier = notifier
        self.code_ttl = code_ttl

    async def execute(self, phone: str) -> Result[SuccessResponse]:
        phone = normalize_phone(phone)
        if not validate_phone(phone):
            return Return.err(Error("INVALID_PHONE", "Invalid phone number format"))

        async with self.uow:
            user = await self.uow.users.get_by_phone(phone)
            code = await VerificationCodeService(self.uow).issue(
                VerificationType.phone_verification,
                self.code_ttl,
                user_id=user.id if user else None,
                phone=phone,
            )
            await self.uow.commit()

        try:
            await self.notifier.send_phone_code(
                phone, code, int(self.code_ttl.total_seconds() // 60)
            )
        except NotificationError as exc:
            logger.warning(f"Verification SMS to {phone} not delivered: {exc}")
            return Return.err(
                Error("NOTIFICATION_UNAVAILABLE", "Failed to send verification code")
            )

        return Return.ok(SuccessResponse())
