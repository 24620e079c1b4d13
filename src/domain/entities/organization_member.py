"""
OrganizationMember Entity

Links a User to an Organization with a role.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import OrganizationRole


class OrganizationMember(SQLModel, table=True):
    """
    OrganizationMember entity.

    Business Rules:
    - (organization_id, user_id) must be unique
    - SSO-provisioned members join as role=member
    """

    __tablename__ = "organization_members"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    organization_id: UUID = Field(
        foreign_key="organizations.id", ondelete="CASCADE", index=True
    )
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    role: OrganizationRole = Field(default=OrganizationRole.member)

    joined_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_org_member_org_user", "organization_id", "user_id", unique=True),
    )
