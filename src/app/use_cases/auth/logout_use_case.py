import logging

from src.app.services.audit import record_audit
from src.app.services.session_manager import AuthPrincipal, SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common_dtos import SuccessResponse
from .dtos import LogoutCommand

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """
    Revokes the caller's sessions.

    Business Rules:
    - all_devices: every session of the user
    - refresh_token: the user's session owning that refresh token
    - neither: the session the bearer token was issued for
    - Always reports success: a failed revoke must never stop a client from
      discarding its local tokens
    """

    def __init__(self, uow: UnitOfWork, sessions: SessionManager):
        self.uow = uow
        self.sessions = sessions

    async def execute(self, principal: AuthPrincipal, command: LogoutCommand) -> SuccessResponse:
        user_id = principal.user_id
        try:
            async with self.uow:
                if command.all_devices:
                    await self.sessions.revoke_all_sessions(user_id)
                elif command.refresh_token:
                    await self.sessions.revoke_session(command.refresh_token, user_id)
                else:
                    await self.sessions.revoke_session_by_id(principal.session_id, user_id)

                await record_audit(
                    self.uow,
                    "logout",
                    user_id=user_id,
                    metadata={"allDevices": command.all_devices},
                )
                await self.uow.commit()
        except Exception:
            logger.exception(f"Logout failed for user {user_id}")

        return SuccessResponse()
