from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import Session


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[Session]:
        """Get session by SHA-256 of its refresh token"""
        pass

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """Create a new session"""
        pass

    @abstractmethod
    async def delete_if_active(self, session_id: UUID, now: datetime) -> bool:
        """
        Delete the session only if it still exists and is unexpired.

        Returns True for exactly one of any number of concurrent callers.
        """
        pass

    @abstractmethod
    async def delete_by_token_hash(self, token_hash: str, user_id: UUID) -> int:
        """Delete the user's session owning a refresh token hash. Returns row count."""
        pass

    @abstractmethod
    async def delete_by_id(self, session_id: UUID, user_id: UUID) -> int:
        """Delete one session of the user. Returns row count."""
        pass

    @abstractmethod
    async def delete_all_by_user_id(self, user_id: UUID) -> int:
        """Delete every session of a user. Returns row count."""
        pass
