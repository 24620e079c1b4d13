from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.organization_member_repository import (
    IOrganizationMemberRepository,
)
from src.domain.base import DuplicateRecordError
from src.domain.entities import OrganizationMember


class OrganizationMemberRepository(IOrganizationMemberRepository):
    """OrganizationMember repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_organization_and_user(
        self, organization_id: UUID, user_id: UUID
    ) -> Optional[OrganizationMember]:
        stmt = select(OrganizationMember).where(
            OrganizationMember.organization_id == organization_id,
            OrganizationMember.user_id == user_id,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_first_by_user_id(self, user_id: UUID) -> Optional[OrganizationMember]:
        stmt = (
            select(OrganizationMember)
            .where(OrganizationMember.user_id == user_id)
            .order_by(OrganizationMember.joined_at)
            .limit(1)
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def create(self, member: OrganizationMember) -> OrganizationMember:
        self.session.add(member)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateRecordError("User is already a member") from exc
        await self.session.refresh(member)
        return member
