from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.audit import record_audit
from src.app.services.password_hasher import Argon2PasswordHasher
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common_dtos import SuccessResponse
from src.domain.entities import UserStatus


class DeactivateAccountUseCase:
    """
    Closes the caller's account.

    Business Rules:
    - Password-based accounts must confirm with the current password
    - Status becomes deleted; the row is kept (no physical delete)
    - Every session is deleted in the same transaction, so outstanding
      bearer and refresh tokens stop working immediately
    - Social links and organization memberships are kept
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

    async def execute(self, user_id: UUID, password: Optional[str] = None) -> Result[SuccessResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if user.password_hash and not self.hasher.verify(password or "", user.password_hash):
                return Return.err(Error("INVALID_PASSWORD_CONFIRMATION", "Invalid password"))

            user.status = UserStatus.deleted
            await self.uow.users.update(user)

            revoked = await self.sessions.revoke_all_sessions(user.id)

            await record_audit(
                self.uow,
                "account_deactivated",
                user_id=user.id,
                metadata={"sessionsRevoked": revoked},
            )
            await self.uow.commit()

            return Return.ok(SuccessResponse())
