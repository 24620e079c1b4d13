from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import IUserRepository
from src.domain.base import DuplicateRecordError, utcnow
from src.domain.entities import User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)"""
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_phone(self, phone: str) -> Optional[User]:
        """Get user by phone number"""
        stmt = select(User).where(User.phone == phone)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, user: User) -> User:
        """Create a new user"""
        user.email = user.email.strip().lower()
        return await self._save(user)

    async def update(self, user: User) -> User:
        """Update existing user"""
        user.updated_at = utcnow()
        return await self._save(user)

    async def _save(self, user: User) -> User:
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateRecordError("User email or phone already in use") from exc
        await self.session.refresh(user)
        return user
