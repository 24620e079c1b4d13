"""
VerificationCode Entity

Single-use, expiring secret bound to a user, email or phone.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import VerificationType


class VerificationCode(SQLModel, table=True):
    """
    VerificationCode entity.

    Business Rules:
    - code_hash is the SHA-256 of the code sent to the user
    - Never accepted once used_at is set
    - Never accepted after expires_at, used or not
    - Phone codes may exist before any user does (user_id is None)
    """

    __tablename__ = "verification_codes"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: Optional[UUID] = Field(
        default=None, foreign_key="users.id", ondelete="CASCADE", index=True
    )
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)

    code_hash: str = Field(max_length=64)
    type: VerificationType = Field(nullable=False)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_verification_code_lookup", "code_hash", "type"),
        Index("idx_verification_code_phone", "phone"),
    )
