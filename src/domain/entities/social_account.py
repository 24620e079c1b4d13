"""
SocialAccount Entity

Links a User to an external identity provider account.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import SocialProvider


class SocialAccount(SQLModel, table=True):
    """
    SocialAccount entity.

    Business Rules:
    - (user_id, provider) is unique: one link per provider per user
    - (provider, provider_user_id) is unique: an external account links once
    """

    __tablename__ = "social_accounts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", index=True)

    provider: SocialProvider = Field(nullable=False)
    provider_user_id: str = Field(max_length=255)
    provider_email: Optional[str] = Field(default=None, max_length=255)
    provider_data: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_social_account_user_provider", "user_id", "provider", unique=True),
        Index(
            "idx_social_account_provider_user",
            "provider",
            "provider_user_id",
            unique=True,
        ),
    )
