"""
Register Use Case

Creates an email/password account and signs the user in.
"""

import logging
from datetime import timedelta

from libs.result import Error, Result, Return
from src.app.services.audit import record_audit
from src.app.services.notifications import AuthNotifier, NotificationError
from src.app.services.password_hasher import Argon2PasswordHasher
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.validators import (
    normalize_email,
    normalize_phone,
    validate_email,
    validate_password,
    validate_phone,
)
from src.app.services.verification_codes import VerificationCodeService
from src.app.use_cases.common_dtos import AuthResponse
from src.domain.base import DuplicateRecordError
from src.domain.entities import User, VerificationType
from .dtos import RegisterCommand
from .login_flow import start_session

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Register Use Case

    Business Logic:
    1. Validate email format, password policy and (optional) phone format
    2. Reject duplicate email / phone (EMAIL_ALREADY_EXISTS / PHONE_ALREADY_EXISTS)
    3. Hash password (argon2id) and create User with email_verified=False
    4. Issue an email_verification code (24h)
    5. Create Session, audit user_registered, commit
    6. Send verification email after commit; delivery failure is logged,
       the account stays created
    """

    def __init__(
        self,
        uow: UnitOfWork,
        sessions: SessionManager,
        hasher: Argon2PasswordHasher,
        notifier: AuthNotifier,
        verification_ttl: timedelta = timedelta(hours=24),
    ):
        self.uow = uow
        self.sessions = sessions
        self.hasher = hasher
        self.notifier = notifier
        self.verification_ttl = verification_ttl

    async def execute(self, command: RegisterCommand) -> Result[AuthResponse]:
        email = normalize_email(command.email)
        if not validate_email(email):
            return Return.err(Error("INVALID_EMAIL", "Invalid email format"))

        password_errors = validate_password(command.password)
        if password_errors:
            return Return.err(Error("INVALID_PASSWORD", "; ".join(password_errors)))

        phone = None
        if command.phone:
            phone = normalize_phone(command.phone)
            if not validate_phone(phone):
                return Return.err(Error("INVALID_PHONE", "Invalid phone number format"))

        async with self.uow:
            if await self.uow.users.get_by_email(email):
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "User with this email already exists")
                )

            if phone and await self.uow.users.get_by_phone(phone):
                return Return.err(
                    Error("PHONE_ALREADY_EXISTS", "User with this phone already exists")
                )

            try:
                user = await self.uow.users.create(
                    User(
                        email=email,
                        phone=phone,
                        password_hash=self.hasher.hash(command.password),
                        first_name=command.first_name,
                        last_name=command.last_name,
                        email_verified=False,
                    )
                )
            except DuplicateRecordError:
                # Lost a race with a concurrent registration
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "User with this email already exists")
                )

            code = await VerificationCodeService(self.uow).issue(
                VerificationType.email_verification,
                self.verification_ttl,
                user_id=user.id,
                email=user.email,
            )

            await record_audit(
                self.uow,
                "user_registered",
                user_id=user.id,
                metadata={"method": "email"},
                ip_address=command.client.ip_address,
                user_agent=command.client.user_agent,
            )
            response = await start_session(
                self.uow,
                self.sessions,
                user,
                command.client,
                metadata={"method": "email"},
                action=None,
            )

            await self.uow.commit()

        try:
            await self.notifier.send_verification_email(email, code)
        except NotificationError as exc:
            logger.warning(f"Verification email to {email} not delivered: {exc}")

        return Return.ok(response)
