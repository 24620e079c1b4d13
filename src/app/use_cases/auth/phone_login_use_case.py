from libs.result import Error, Result, Return
from src.app.services.audit import record_audit
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.validators import normalize_phone, validate_phone
from src.app.services.verification_codes import VerificationCodeService
from src.app.use_cases.common_dtos import AuthResponse
from src.domain.base import DuplicateRecordError
from src.domain.entities import User, UserStatus, VerificationType
from .dtos import PhoneLoginCommand
from .login_flow import start_session

CODE_FAILURES = {
    "CODE_NOT_FOUND": "Invalid verification code",
    "CODE_ALREADY_USED": "Verification code already used",
    "CODE_EXPIRED": "Verification code expired",
}


class PhoneLoginUseCase:
    """
    Signs in (or signs up) with a phone number and an SMS code.

    Business Rules:
    - Every code failure is INVALID_VERIFICATION_CODE (Unauthenticated)
    - First login creates the user with a placeholder email
      "<digits>@<placeholder domain>" and phone_verified=True
    - A suspended/deleted owner of the number cannot sign in
    """

    def __init__(
        self,
        uow: UnitOfWork,
        sessions: SessionManager,
        placeholder_email_domain: str = "phone.scribeai.com",
    ):
        self.uow = uow
        self.sessions = sessions
        self.placeholder_email_domain = placeholder_email_domain

    async def execute(self, command: PhoneLoginCommand) -> Result[AuthResponse]:
        phone = normalize_phone(command.phone)
        if not validate_phone(phone):
            return Return.err(Error("INVALID_PHONE", "Invalid phone number format"))

        async with self.uow:
            consumed = await VerificationCodeService(self.uow).consume(
                command.verification_code, VerificationType.phone_verification, phone=phone
            )
            if consumed.is_err():
                return Return.err(
                    Error("INVALID_VERIFICATION_CODE", CODE_FAILURES[consumed.error.code])
                )

            user = await self.uow.users.get_by_phone(phone)
            if user is not None and user.status != UserStatus.active:
                return Return.err(Error("ACCOUNT_INACTIVE", "Account is not active"))

            if user is None:
                digits = "".join(ch for ch in phone if ch.isdigit())
                try:
                    user = await self.uow.users.create(
                        User(
                            email=f"{digits}@{self.placeholder_email_domain}",
                            phone=phone,
                            phone_verified=True,
                        )
                    )
                except DuplicateRecordError:
                    return Return.err(
                        Error("PHONE_ALREADY_EXISTS", "User with this phone already exists")
                    )
                await record_audit(
                    self.uow, "user_registered", user_id=user.id, metadata={"method": "phone"}
                )
            else:
                user.phone_verified = True

            response = await start_session(
                self.uow, self.sessions, user, command.client, metadata={"method": "phone"}
            )

            await self.uow.commit()
            return Return.ok(response)
