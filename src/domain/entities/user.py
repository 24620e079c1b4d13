"""
User Entity

Root identity record for every person using the product.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import UserStatus


class User(SQLModel, table=True):
    """
    User entity - root aggregate for sessions, social links and memberships.

    Business Rules:
    - Email is required, unique and stored lowercased
    - Phone is optional but unique when present
    - password_hash is an argon2id PHC string; None for social/phone/SSO-only users
    - Only status=active users can authenticate
    - two_factor_secret may be set while two_factor_enabled is False
      (setup started but not confirmed)
    - backup_codes holds SHA-256 hashes only
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    phone: Optional[str] = Field(default=None, unique=True, index=True, max_length=32)
    password_hash: Optional[str] = Field(default=None, max_length=255)

    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    avatar_url: Optional[str] = Field(default=None, max_length=1024)

    email_verified: bool = Field(default=False)
    phone_verified: bool = Field(default=False)

    two_factor_enabled: bool = Field(default=False)
    two_factor_secret: Optional[str] = Field(default=None, max_length=64)
    backup_codes: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))

    status: UserStatus = Field(default=UserStatus.active)

    # Timestamps
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_status", "status"),)
