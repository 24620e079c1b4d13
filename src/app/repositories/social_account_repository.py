from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import SocialAccount, SocialProvider


class ISocialAccountRepository(ABC):
    """SocialAccount repository interface - application layer"""

    @abstractmethod
    async def get_by_provider_user_id(
        self, provider: SocialProvider, provider_user_id: str
    ) -> Optional[SocialAccount]:
        """Get link by the provider's own user identifier"""
        pass

    @abstractmethod
    async def get_by_user_and_provider(
        self, user_id: UUID, provider: SocialProvider
    ) -> Optional[SocialAccount]:
        """Get a user's link to a given provider"""
        pass

    @abstractmethod
    async def create(self, account: SocialAccount) -> SocialAccount:
        """Create a new link. Raises DuplicateRecordError if already linked."""
        pass
