from libs.result import Result, Return
from src.app.services.audit import record_audit
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.verification_codes import VerificationCodeService
from src.app.use_cases.common_dtos import SuccessResponse
from src.domain.entities import VerificationType


class VerifyEmailUseCase:
    """
    Consumes an email_verification code and marks the owner's email verified.

    Errors: CODE_NOT_FOUND, CODE_ALREADY_USED, CODE_EXPIRED
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str) -> Result[SuccessResponse]:
        async with self.uow:
            consumed = await VerificationCodeService(self.uow).consume(
                token, VerificationType.email_verification
            )
            if consumed.is_err():
                return consumed

            code = consumed.value
            user = None
            if code.user_id is not None:
                user = await self.uow.users.get_by_id(code.user_id)
            elif code.email:
                user = await self.uow.users.get_by_email(code.email)

            if user is not None:
                user.email_verified = True
                await self.uow.users.update(user)
                await record_audit(self.uow, "email_verified", user_id=user.id)

            await self.uow.commit()
            return Return.ok(SuccessResponse())
