from libs.result import Error, Result, Return
from src.app.services.audit import record_audit
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.validators import normalize_phone, validate_phone
from src.app.services.verification_codes import VerificationCodeService
from src.app.use_cases.common_dtos import SuccessResponse
from src.domain.entities import VerificationType


class VerifyPhoneUseCase:
    """
    Consumes a phone_verification code scoped to the phone number.

    Marks the owning user's phone verified when one exists; a code for an
    unregistered number is still consumed.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, phone: str, code: str) -> Result[SuccessResponse]:
        phone = normalize_phone(phone)
        if not validate_phone(phone):
            return Return.err(Error("INVALID_PHONE", "Invalid phone number format"))

        async with self.uow:
            consumed = await VerificationCodeService(self.uow).consume(
                code, VerificationType.phone_verification, phone=phone
            )
            if consumed.is_err():
                return consumed

            record = consumed.value
            if record.user_id is not None:
                user = await self.uow.users.get_by_id(record.user_id)
            else:
                user = await self.uow.users.get_by_phone(phone)

            if user is not None and user.phone == phone:
                user.phone_verified = True
                await self.uow.users.update(user)
                await record_audit(self.uow, "phone_verified", user_id=user.id)

            await self.uow.commit()
            return Return.ok(SuccessResponse())
