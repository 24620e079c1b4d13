"""
AuditEvent Entity

Append-only log of authentication events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable record of what happened to an account.

    Business Rules:
    - Never updated or deleted
    - user_id is a plain column (no foreign key) so history survives the user
    - Failed logins are recorded here with their real reason; the API
      response never carries it
    """

    __tablename__ = "audit_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: Optional[UUID] = Field(default=None, index=True)
    action: str = Field(max_length=100)  # e.g. "login_success", "login_failed"
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    ip_address: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_user_action", "user_id", "action"),
    )
