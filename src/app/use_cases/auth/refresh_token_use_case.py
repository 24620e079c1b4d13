from libs.result import Result, Return
from src.app.services.audit import record_audit
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common_dtos import AuthResponse, to_user_profile


class RefreshTokenUseCase:
    """
    Rotates a refresh token.

    Business Rules:
    - Old session row is deleted, a new one created (single use)
    - Reusing a rotated, revoked or expired token -> INVALID_REFRESH_TOKEN
    - The new session keeps the old one's lifetime class (remember-me or not)
    """

    def __init__(self, uow: UnitOfWork, sessions: SessionManager):
        self.uow = uow
        self.sessions = sessions

    async def execute(self, refresh_token: str) -> Result[AuthResponse]:
        async with self.uow:
            result = await self.sessions.refresh_session(refresh_token)
            if result.is_err():
                return result

            issued = result.value
            user = await self.uow.users.get_by_id(issued.user_id)

            await record_audit(self.uow, "token_refresh", user_id=user.id)
            await self.uow.commit()

            return Return.ok(
                AuthResponse(
                    user=to_user_profile(user),
                    token=issued.token,
                    refresh_token=issued.refresh_token,
                    expires_at=issued.expires_at,
                )
            )
