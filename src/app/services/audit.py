from typing import Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent


async def record_audit(
    uow: UnitOfWork,
    action: str,
    user_id: Optional[UUID] = None,
    metadata: Optional[dict] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> None:
    """Append an audit row to the caller's transaction (committed with it)."""
    await uow.audit_events.create(
        AuditEvent(
            user_id=user_id,
            action=action,
            event_metadata=metadata or {},
            ip_address=ip_address,
            user_agent=user_agent[:512] if user_agent else None,
        )
    )
