from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import Organization


class IOrganizationRepository(ABC):
    """Organization repository interface - application layer"""

    @abstractmethod
    async def get_sso_enabled_by_domain(self, domain: str) -> Optional[Organization]:
        """Get the organization owning a domain, only if SSO is enabled"""
        pass

    @abstractmethod
    async def create(self, organization: Organization) -> Organization:
        """Create a new organization"""
        pass
