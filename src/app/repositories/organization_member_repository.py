from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import OrganizationMember


class IOrganizationMemberRepository(ABC):
    """OrganizationMember repository interface - application layer"""

    @abstractmethod
    async def get_by_organization_and_user(
        self, organization_id: UUID, user_id: UUID
    ) -> Optional[OrganizationMember]:
        """Get membership for a user in a specific organization"""
        pass

    @abstractmethod
    async def get_first_by_user_id(self, user_id: UUID) -> Optional[OrganizationMember]:
        """Earliest membership of a user, if any"""
        pass

    @abstractmethod
    async def create(self, member: OrganizationMember) -> OrganizationMember:
        """Create a new membership. Raises DuplicateRecordError if present."""
        pass
