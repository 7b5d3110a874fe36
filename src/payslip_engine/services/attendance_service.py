"""Attendance ledger: attendance marks, overtime and reimbursement claims."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.calculators import is_weekend
from payslip_engine.errors import (
    BusinessRuleViolationError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
    PeriodFrozenError,
)
from payslip_engine.identity import ActorContext
from payslip_engine.models import (
    AttendanceMark,
    AttendancePeriod,
    OvertimeClaim,
    ReimbursementClaim,
)
from payslip_engine.services.audit_service import AuditService
from payslip_engine.services.employee_service import EmployeeService
from payslip_engine.services.locking_service import LockingService
from payslip_engine.services.parsing import (
    CENT_PLACES,
    parse_date,
    parse_decimal,
    parse_uuid,
)
from payslip_engine.services.period_service import PeriodService
from payslip_engine.services.state_machine import PeriodStateMachine

logger = logging.getLogger(__name__)

MAX_OVERTIME_HOURS = Decimal("3")

DUPLICATE_MARK_CONSTRAINT = "attendance_user_date_period_unique"


def is_duplicate_mark(error: IntegrityError) -> bool:
    """Whether an insert failed on the one-mark-per-day constraint."""
    message = str(error.orig)
    # PostgreSQL reports the constraint name, SQLite the table columns
    return (
        DUPLICATE_MARK_CONSTRAINT in message
        or "UNIQUE constraint failed: attendance." in message
    )


class AttendanceService:
    """Records ledger entries against open periods.

    Every submission follows the same order:
    parse inputs → resolve submitter → lock period (shared) → frozen gate →
    domain rule → persist → audit. The submitting actor is always the
    entry's owner and must exist in the user directory.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.audit = AuditService(session)
        self.periods = PeriodService(session)
        self.locking = LockingService(session)
        self.employees = EmployeeService(session)

    async def submit_attendance(
        self,
        attendance_date: str | date,
        period_id: str | UUID,
        actor: ActorContext,
    ) -> AttendanceMark:
        """Record one day of attendance for the actor."""
        day = parse_date(attendance_date)
        parsed_period_id = parse_uuid(period_id, "period ID")
        await self.employees.find_employee(actor.user_id)

        period = await self._open_period(parsed_period_id)

        if is_weekend(day):
            raise BusinessRuleViolationError("Cannot submit attendance on weekends")
        self._check_in_period(period, day)

        if await self._already_marked(actor.user_id, day, parsed_period_id):
            raise ConflictError("Attendance already submitted for this date")

        mark = AttendanceMark(
            user_id=actor.user_id,
            date=day,
            period_id=parsed_period_id,
            ip_address=actor.ip_address,
            created_by=actor.user_id,
            updated_by=actor.user_id,
        )
        self.session.add(mark)
        try:
            await self.session.flush()
        except IntegrityError as e:
            if not is_duplicate_mark(e):
                raise
            # Lost the race against a concurrent submission for the same day
            raise ConflictError("Attendance already submitted for this date") from e

        await self.audit.record(
            action="create",
            table_name="attendance",
            record_id=mark.id,
            actor=actor,
            details=f"Submitted attendance for user {actor.user_id} on {day}",
        )
        logger.info(
            "Attendance recorded for user %s on %s (period %s)",
            actor.user_id,
            day,
            parsed_period_id,
        )
        return mark

    async def submit_overtime(
        self,
        overtime_date: str | date,
        hours: str | float | Decimal,
        period_id: str | UUID,
        actor: ActorContext,
    ) -> OvertimeClaim:
        """Record an overtime claim. Several claims for one day are allowed."""
        day = parse_date(overtime_date)
        parsed_hours = parse_decimal(hours, "hours", CENT_PLACES)
        parsed_period_id = parse_uuid(period_id, "period ID")
        await self.employees.find_employee(actor.user_id)

        period = await self._open_period(parsed_period_id)

        if parsed_hours <= 0:
            raise InvalidInputError("Overtime hours must be positive")
        if parsed_hours > MAX_OVERTIME_HOURS:
            raise BusinessRuleViolationError(
                f"Overtime cannot exceed {MAX_OVERTIME_HOURS} hours per day"
            )
        self._check_in_period(period, day)

        claim = OvertimeClaim(
            user_id=actor.user_id,
            date=day,
            hours=parsed_hours,
            period_id=parsed_period_id,
            ip_address=actor.ip_address,
            created_by=actor.user_id,
            updated_by=actor.user_id,
        )
        self.session.add(claim)
        await self.session.flush()

        await self.audit.record(
            action="create",
            table_name="overtime",
            record_id=claim.id,
            actor=actor,
            details=(
                f"Submitted {parsed_hours} hours overtime for user "
                f"{actor.user_id} on {day}"
            ),
        )
        logger.info(
            "Overtime of %s hours recorded for user %s on %s (period %s)",
            parsed_hours,
            actor.user_id,
            day,
            parsed_period_id,
        )
        return claim

    async def submit_reimbursement(
        self,
        amount: str | float | Decimal,
        description: str,
        period_id: str | UUID,
        actor: ActorContext,
    ) -> ReimbursementClaim:
        """Record a reimbursement claim paid out with the period's payroll."""
        parsed_amount = parse_decimal(amount, "amount", CENT_PLACES)
        parsed_period_id = parse_uuid(period_id, "period ID")
        await self.employees.find_employee(actor.user_id)

        await self._open_period(parsed_period_id)

        if parsed_amount <= 0:
            raise InvalidInputError("Amount must be positive")
        description = (description or "").strip()
        if not description:
            raise InvalidInputError("Description is required")

        claim = ReimbursementClaim(
            user_id=actor.user_id,
            amount=parsed_amount,
            description=description,
            period_id=parsed_period_id,
            ip_address=actor.ip_address,
            created_by=actor.user_id,
            updated_by=actor.user_id,
        )
        self.session.add(claim)
        await self.session.flush()

        await self.audit.record(
            action="create",
            table_name="reimbursement",
            record_id=claim.id,
            actor=actor,
            details=(
                f"Submitted reimbursement of {parsed_amount} for user {actor.user_id}"
            ),
        )
        logger.info(
            "Reimbursement of %s recorded for user %s (period %s)",
            parsed_amount,
            actor.user_id,
            parsed_period_id,
        )
        return claim

    async def _open_period(self, period_id: UUID) -> AttendancePeriod:
        """Lock the period for the rest of the transaction and apply the gate."""
        period = await self.locking.lock_period_for_submission(period_id)
        if period is None:
            raise NotFoundError("Attendance period", period_id)

        status = PeriodStateMachine.status_for(await self.periods.is_processed(period_id))
        if not PeriodStateMachine.can_submit(status):
            logger.warning("Rejected submission for frozen period %s", period_id)
            raise PeriodFrozenError(period_id)
        return period

    async def _already_marked(self, user_id: UUID, day: date, period_id: UUID) -> bool:
        existing = await self.session.execute(
            select(AttendanceMark.id).where(
                AttendanceMark.user_id == user_id,
                AttendanceMark.date == day,
                AttendanceMark.period_id == period_id,
            )
        )
        return existing.first() is not None

    @staticmethod
    def _check_in_period(period: AttendancePeriod, day: date) -> None:
        if not period.contains(day):
            raise BusinessRuleViolationError(
                f"Date {day} is outside the period "
                f"{period.start_date} to {period.end_date}"
            )
