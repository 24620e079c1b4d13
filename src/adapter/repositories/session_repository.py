from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.session_repository import ISessionRepository
from src.domain.entities import Session


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        stmt = select(Session).where(Session.id == session_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_token_hash(self, token_hash: str) -> Optional[Session]:
        """Get session by refresh token hash (indexed, unique)"""
        stmt = select(Session).where(Session.token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, session_obj: Session) -> Session:
        """Create a new session"""
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def delete_if_active(self, session_id: UUID, now: datetime) -> bool:
        """
        Conditional delete used for refresh-token rotation.

        Under concurrent rotation the database serializes the two DELETEs;
        the second one matches zero rows.
        """
        stmt = delete(Session).where(Session.id == session_id, Session.expires_at > now)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_by_token_hash(self, token_hash: str, user_id: UUID) -> int:
        """Delete the session owning a refresh token hash, only if it belongs to user_id"""
        stmt = delete(Session).where(Session.token_hash == token_hash, Session.user_id == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_by_id(self, session_id: UUID, user_id: UUID) -> int:
        """Delete one session, only if it belongs to user_id"""
        stmt = delete(Session).where(Session.id == session_id, Session.user_id == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_all_by_user_id(self, user_id: UUID) -> int:
        """Delete all sessions of a user"""
        stmt = delete(Session).where(Session.user_id == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
