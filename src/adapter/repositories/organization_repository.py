from typing import Optional

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.organization_repository import IOrganizationRepository
from src.domain.entities import Organization


class OrganizationRepository(IOrganizationRepository):
    """Organization repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_sso_enabled_by_domain(self, domain: str) -> Optional[Organization]:
        stmt = select(Organization).where(
            func.lower(Organization.domain) == domain.strip().lower(),
            Organization.sso_enabled == True,  # noqa: E712
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, organization: Organization) -> Organization:
        self.session.add(organization)
        await self.session.flush()
        await self.session.refresh(organization)
        return organization
