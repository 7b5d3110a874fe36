"""Audit trail recording."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.identity import ActorContext
from payslip_engine.models import AuditEvent


class AuditService:
    """Writes audit events inside the caller's transaction.

    The event is flushed immediately, so a failing audit write fails the
    operation that triggered it and rolls back with it.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def record(
        self,
        action: str,
        table_name: str,
        record_id: UUID,
        actor: ActorContext,
        details: str | None = None,
    ) -> AuditEvent:
        """Record an audit event for a mutating action."""
        event = AuditEvent(
            action=action,
            table_name=table_name,
            record_id=record_id,
            actor_user_id=actor.user_id,
            ip_address=actor.ip_address,
            request_id=actor.request_id,
            details=details,
        )
        self.session.add(event)
        await self.session.flush()
        return event
