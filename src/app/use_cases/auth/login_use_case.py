"""
Login Use Case

Email/password authentication, with TOTP (or a backup code) when 2FA is on.
"""

from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.audit import record_audit
from src.app.services.password_hasher import Argon2PasswordHasher
from src.app.services.security import hash_token
from src.app.services.session_manager import SessionManager
from src.app.services.totp_service import TotpService
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.validators import normalize_email
from src.app.use_cases.common_dtos import AuthResponse
from src.domain.entities import User, UserStatus
from .dtos import LoginCommand
from .login_flow import start_session


class LoginUseCase:
    """
    Use case for credential login.

    Business Rules:
    - Unknown email, inactive account and wrong password all return the same
      INVALID_CREDENTIALS; the real reason only goes to the audit log
    - Unknown accounts still pay for one password hash (no timing oracle)
    - 2FA enabled and no code supplied -> TWO_FACTOR_REQUIRED
    - A one-time backup code is accepted in place of the TOTP code and is
      removed once used
    - Failed attempts are audited and committed; no session is created
    """

    def __init__(
        self,
        uow: UnitOfWork,
        sessions: SessionManager,
        hasher: Argon2PasswordHasher,
        totp: TotpService,
    ):
        self.uow = uow
        self.sessions = sessions
        self.hasher = hasher
        self.totp = totp

    async def execute(self, command: LoginCommand) -> Result[AuthResponse]:
        email = normalize_email(command.email)
        invalid = Error("INVALID_CREDENTIALS", "Invalid email or password")

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None or user.status != UserStatus.active or not user.password_hash:
                self.hasher.verify_dummy(command.password)
                reason = "unknown_email" if user is None else "inactive_account"
                await self._record_failure(command, email, user, reason)
                return Return.err(invalid)

            if not self.hasher.verify(command.password, user.password_hash):
                await self._record_failure(command, email, user, "invalid_password")
                return Return.err(invalid)

            used_backup_code = False
            if user.two_factor_enabled:
                if not command.two_factor_code:
                    return Return.err(
                        Error("TWO_FACTOR_REQUIRED", "Two-factor authentication code required")
                    )

                if not self.totp.verify(user.two_factor_secret, command.two_factor_code):
                    used_backup_code = self._consume_backup_code(user, command.two_factor_code)
                    if not used_backup_code:
                        await self._record_failure(command, email, user, "invalid_2fa")
                        return Return.err(
                            Error("INVALID_TWO_FACTOR_CODE", "Invalid two-factor authentication code")
                        )

            metadata = {"method": "email"}
            if used_backup_code:
                metadata["backup_code"] = True

            response = await start_session(
                self.uow,
                self.sessions,
                user,
                command.client,
                metadata=metadata,
                remember_me=command.remember_me,
            )

            await self.uow.commit()
            return Return.ok(response)

    @staticmethod
    def _consume_backup_code(user: User, code: str) -> bool:
        code_hash = hash_token(code.strip().replace(" ", ""))
        if not user.backup_codes or code_hash not in user.backup_codes:
            return False
        # Reassign so the JSON column is flagged dirty
        user.backup_codes = [c for c in user.backup_codes if c != code_hash]
        return True

    async def _record_failure(
        self, command: LoginCommand, email: str, user: Optional[User], reason: str
    ) -> None:
        await record_audit(
            self.uow,
            "login_failed",
            user_id=user.id if user else None,
            metadata={"email": email, "reason": reason},
            ip_address=command.client.ip_address,
            user_agent=command.client.user_agent,
        )
        await self.uow.commit()
