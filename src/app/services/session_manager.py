"""
Session Manager

Issues bearer + refresh token pairs and validates, rotates and revokes them.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.security import generate_secure_token, hash_token
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Session, UserStatus


@dataclass
class IssuedSession:
    token: str
    refresh_token: str
    expires_at: datetime
    session_id: UUID
    user_id: UUID


@dataclass
class AuthPrincipal:
    """Who is calling, resolved from a bearer token."""

    user_id: UUID
    session_id: UUID
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None


class SessionManager:
    """
    Session lifecycle on top of the unit of work.

    Runs inside the caller's unit of work and never commits by itself.

    Business Rules:
    - Refresh tokens are 256-bit random values; only their SHA-256 is stored
    - Bearer tokens carry the session id, so deleting the row invalidates
      the bearer token on its next use
    - Token validity and account validity are independent gates: a
      suspended/deleted user is rejected even with a good token
    - Refresh is single-use rotation: old row deleted, new row created
    - Revocation is idempotent
    """

    def __init__(
        self,
        uow: UnitOfWork,
        tokens: TokenService,
        session_ttl: timedelta = timedelta(hours=24),
        remember_me_ttl: timedelta = timedelta(days=7),
    ):
        self.uow = uow
        self.tokens = tokens
        self.session_ttl = session_ttl
        self.remember_me_ttl = remember_me_ttl

    async def create_session(
        self,
        user_id: UUID,
        device_info: Optional[dict] = None,
        ip_address: Optional[str] = None,
        remember_me: bool = False,
    ) -> IssuedSession:
        ttl = self.remember_me_ttl if remember_me else self.session_ttl
        refresh_token = generate_secure_token()

        session = Session(
            user_id=user_id,
            token_hash=hash_token(refresh_token),
            device_info=device_info,
            ip_address=ip_address,
            expires_at=utcnow() + ttl,
        )
        session = await self.uow.sessions.create(session)

        return IssuedSession(
            token=self.tokens.issue(user_id, session.id),
            refresh_token=refresh_token,
            expires_at=session.expires_at,
            session_id=session.id,
            user_id=user_id,
        )

    async def validate_session(self, token: str) -> Result[AuthPrincipal]:
        invalid = Error("INVALID_TOKEN", "Invalid or expired token")

        # Signature and expiry first; nothing in the payload is trusted before this
        payload = self.tokens.verify(token)
        if payload is None:
            return Return.err(invalid)

        try:
            user_id = UUID(payload["user_id"])
            session_id = UUID(payload["sid"])
        except (KeyError, TypeError, ValueError):
            return Return.err(invalid)

        session = await self.uow.sessions.get_by_id(session_id)
        if session is None or session.user_id != user_id or session.expires_at <= utcnow():
            return Return.err(invalid)

        user = await self.uow.users.get_by_id(user_id)
        if user is None or user.status != UserStatus.active:
            return Return.err(invalid)

        return Return.ok(
            AuthPrincipal(
                user_id=user.id,
                session_id=session.id,
                email=user.email,
                first_name=user.first_name,
                last_name=user.last_name,
                avatar_url=user.avatar_url,
            )
        )

    async def refresh_session(self, refresh_token: str) -> Result[IssuedSession]:
        invalid = Error("INVALID_REFRESH_TOKEN", "Invalid refresh token")
        now = utcnow()

        session = await self.uow.sessions.get_by_token_hash(hash_token(refresh_token))
        if session is None or session.expires_at <= now:
            return Return.err(invalid)

        # Lost a concurrent rotation, or the token was already rotated
        if not await self.uow.sessions.delete_if_active(session.id, now):
            return Return.err(invalid)

        user = await self.uow.users.get_by_id(session.user_id)
        if user is None or user.status != UserStatus.active:
            return Return.err(invalid)

        remember_me = (session.expires_at - session.created_at) > self.session_ttl
        issued = await self.create_session(
            session.user_id,
            device_info=session.device_info,
            ip_address=session.ip_address,
            remember_me=remember_me,
        )
        return Return.ok(issued)

    async def revoke_session(self, refresh_token: str, user_id: UUID) -> int:
        """Only the owner can revoke a session; someone else's token matches nothing."""
        return await self.uow.sessions.delete_by_token_hash(hash_token(refresh_token), user_id)

    async def revoke_session_by_id(self, session_id: UUID, user_id: UUID) -> int:
        return await self.uow.sessions.delete_by_id(session_id, user_id)

    async def revoke_all_sessions(self, user_id: UUID) -> int:
        return await self.uow.sessions.delete_all_by_user_id(user_id)
