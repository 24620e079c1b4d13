"""
Session Entity

A live authentication grant backed by a refresh token.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class Session(SQLModel, table=True):
    """
    Session entity - one row per issued refresh token.

    Business Rules:
    - Only the SHA-256 of the refresh token is stored
    - Valid only while expires_at > now
    - Rotation deletes the row and creates a new one
    - Logout deletes the row (or every row of the user)
    """

    __tablename__ = "user_sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", index=True)

    token_hash: str = Field(unique=True, max_length=64)
    device_info: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    ip_address: Optional[str] = Field(default=None, max_length=64)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_session_expires_at", "expires_at"),)
