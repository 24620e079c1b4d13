"""
Steps shared by every login-equivalent flow (register, password, phone,
social, SSO): open a session, stamp last_login_at, audit the success.
"""

from typing import Optional

from src.app.services.audit import record_audit
from src.app.services.device_info import get_device_info
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common_dtos import AuthResponse, ClientContext, to_user_profile
from src.domain.base import utcnow
from src.domain.entities import User


async def start_session(
    uow: UnitOfWork,
    sessions: SessionManager,
    user: User,
    client: ClientContext,
    metadata: dict,
    remember_me: bool = False,
    action: Optional[str] = "login_success",
) -> AuthResponse:
    """Must run inside the caller's `async with uow` block, before commit."""
    issued = await sessions.create_session(
        user.id,
        device_info=get_device_info(client.user_agent),
        ip_address=client.ip_address,
        remember_me=remember_me,
    )

    user.last_login_at = utcnow()
    user = await uow.users.update(user)

    if action:
        await record_audit(
            uow,
            action,
            user_id=user.id,
            metadata=metadata,
            ip_address=client.ip_address,
            user_agent=client.user_agent,
        )

    return AuthResponse(
        user=to_user_profile(user),
        token=issued.token,
        refresh_token=issued.refresh_token,
        expires_at=issued.expires_at,
    )
