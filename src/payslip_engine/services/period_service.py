"""Attendance period registry."""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.errors import InvalidRangeError, NotFoundError
from payslip_engine.identity import ActorContext
from payslip_engine.models import AttendancePeriod, PayrollRecord, PayrollRun
from payslip_engine.services.audit_service import AuditService
from payslip_engine.services.parsing import parse_date, parse_uuid
from payslip_engine.services.state_machine import PeriodStateMachine, PeriodStatus

logger = logging.getLogger(__name__)


class PeriodService:
    """Creates and looks up attendance periods.

    Also owns the "is this period processed" predicate that gates every
    ledger write and every payroll run.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.audit = AuditService(session)

    async def create_period(
        self,
        start_date: str | date,
        end_date: str | date,
        actor: ActorContext,
    ) -> AttendancePeriod:
        """Create a period and its audit event in the caller's transaction."""
        start = parse_date(start_date, "start date")
        end = parse_date(end_date, "end date")
        if end < start:
            raise InvalidRangeError("End date must not be before start date")

        period = AttendancePeriod(
            start_date=start,
            end_date=end,
            created_by=actor.user_id,
            updated_by=actor.user_id,
        )
        self.session.add(period)
        await self.session.flush()

        await self.audit.record(
            action="create",
            table_name="attendance_period",
            record_id=period.id,
            actor=actor,
            details=f"Created attendance period {period.id} from {start} to {end}",
        )
        logger.info("Created attendance period %s (%s to %s)", period.id, start, end)
        return period

    async def find_period(self, period_id: str | UUID) -> AttendancePeriod:
        """Load a period, raising NotFoundError if absent."""
        parsed_id = parse_uuid(period_id, "period ID")
        period = await self.session.get(AttendancePeriod, parsed_id)
        if period is None:
            raise NotFoundError("Attendance period", parsed_id)
        return period

    async def is_processed(self, period_id: UUID) -> bool:
        """Check if payroll has run for the period.

        True once any payroll record exists. A run over a period with no
        employees writes no records, so its run row counts as well.
        """
        result = await self.session.execute(
            select(
                exists().where(PayrollRecord.period_id == period_id)
                | exists().where(PayrollRun.period_id == period_id)
            )
        )
        return bool(result.scalar())

    async def period_status(self, period_id: str | UUID) -> PeriodStatus:
        """Get open/frozen status of an existing period."""
        period = await self.find_period(period_id)
        return PeriodStateMachine.status_for(await self.is_processed(period.id))
