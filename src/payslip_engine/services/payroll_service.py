"""Payroll service - runs payroll for one attendance period."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.calculators import EmployeePayInputs, PayBreakdown, PayCalculator
from payslip_engine.errors import AlreadyProcessedError, NotFoundError
from payslip_engine.identity import ActorContext, Role
from payslip_engine.models import (
    AttendanceMark,
    Employee,
    OvertimeClaim,
    PayrollRecord,
    PayrollRun,
    ReimbursementClaim,
)
from payslip_engine.services.audit_service import AuditService
from payslip_engine.services.locking_service import LockingService
from payslip_engine.services.parsing import parse_uuid
from payslip_engine.services.period_service import PeriodService
from payslip_engine.services.state_machine import (
    InvalidTransitionError,
    PayrollRunStateMachine,
    PayrollRunStatus,
    PeriodStateMachine,
    PeriodStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class PayrollRunResult:
    """Outcome of a completed payroll run."""

    run: PayrollRun
    records: list[PayrollRecord]
    working_days: int

    @property
    def total_payroll(self) -> Decimal:
        return sum((r.total_pay for r in self.records), Decimal("0"))


class PayrollService:
    """Turns one period's ledger into one payroll record per employee.

    Steps, all inside the caller's transaction:
    1. Take the in-process period lock, then the period row lock
    2. Reject if the period is already processed
    3. Claim the period with a payroll_run row (unique per period)
    4. Compute and persist a record plus an audit event per employee
    5. Mark the run completed

    Any failure propagates unchanged and the caller's rollback discards the
    claim, the records and the audit events together, leaving the period open.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.audit = AuditService(session)
        self.periods = PeriodService(session)
        self.locking = LockingService(session)

    async def run_payroll(
        self,
        period_id: str | UUID,
        actor: ActorContext,
    ) -> PayrollRunResult:
        """Run payroll for a period. Succeeds at most once per period."""
        parsed_period_id = parse_uuid(period_id, "period ID")

        async with self.locking.period_guard(parsed_period_id):
            period = await self.locking.lock_period_for_run(parsed_period_id)
            if period is None:
                raise NotFoundError("Attendance period", parsed_period_id)

            status = PeriodStateMachine.status_for(
                await self.periods.is_processed(parsed_period_id)
            )
            try:
                PeriodStateMachine.validate_transition(status, PeriodStatus.FROZEN)
            except InvalidTransitionError as e:
                logger.warning(
                    "Rejected payroll re-run for processed period %s", parsed_period_id
                )
                raise AlreadyProcessedError(parsed_period_id) from e

            calculator = PayCalculator(period.start_date, period.end_date)
            run = await self.locking.claim_run(parsed_period_id, actor)

            try:
                employees = await self._load_employees()
                logger.info(
                    "Starting payroll for period %s: %d employees, %d working days",
                    parsed_period_id,
                    len(employees),
                    calculator.working_days,
                )

                records: list[PayrollRecord] = []
                for employee in employees:
                    inputs = await self._load_inputs(employee, parsed_period_id)
                    breakdown = calculator.calculate(inputs)
                    record = await self._persist_record(
                        run, breakdown, parsed_period_id, actor
                    )
                    records.append(record)
            except Exception:
                logger.exception("Payroll run for period %s aborted", parsed_period_id)
                raise

            result = PayrollRunResult(
                run=run,
                records=records,
                working_days=calculator.working_days,
            )
            self._complete_run(run, result)
            await self.session.flush()
            logger.info(
                "Completed payroll for period %s: %d records, total %s",
                parsed_period_id,
                len(records),
                result.total_payroll,
            )
            return result

    async def get_run(self, period_id: str | UUID) -> PayrollRun:
        """Load the payroll run for a period."""
        parsed_period_id = parse_uuid(period_id, "period ID")
        result = await self.session.execute(
            select(PayrollRun).where(PayrollRun.period_id == parsed_period_id)
        )
        run = result.scalar_one_or_none()
        if run is None:
            raise NotFoundError("Payroll run for period", parsed_period_id)
        return run

    async def _load_employees(self) -> list[Employee]:
        result = await self.session.execute(
            select(Employee)
            .where(Employee.role == Role.EMPLOYEE.value)
            .order_by(Employee.username)
        )
        return list(result.scalars().all())

    async def _load_inputs(
        self, employee: Employee, period_id: UUID
    ) -> EmployeePayInputs:
        """Aggregate one employee's ledger entries for the period."""
        attendance_count = await self.session.scalar(
            select(func.count(AttendanceMark.id)).where(
                AttendanceMark.user_id == employee.id,
                AttendanceMark.period_id == period_id,
            )
        )
        overtime_hours = await self.session.scalar(
            select(func.coalesce(func.sum(OvertimeClaim.hours), 0)).where(
                OvertimeClaim.user_id == employee.id,
                OvertimeClaim.period_id == period_id,
            )
        )
        reimbursement_total = await self.session.scalar(
            select(func.coalesce(func.sum(ReimbursementClaim.amount), 0)).where(
                ReimbursementClaim.user_id == employee.id,
                ReimbursementClaim.period_id == period_id,
            )
        )

        return EmployeePayInputs(
            employee_id=employee.id,
            monthly_salary=Decimal(str(employee.monthly_salary)),
            attendance_count=int(attendance_count or 0),
            overtime_hours=Decimal(str(overtime_hours or 0)),
            reimbursement_total=Decimal(str(reimbursement_total or 0)),
        )

    async def _persist_record(
        self,
        run: PayrollRun,
        breakdown: PayBreakdown,
        period_id: UUID,
        actor: ActorContext,
    ) -> PayrollRecord:
        record = PayrollRecord(
            period_id=period_id,
            user_id=breakdown.employee_id,
            payroll_run_id=run.id,
            base_salary=breakdown.base_salary,
            overtime_pay=breakdown.overtime_pay,
            reimbursement_amount=breakdown.reimbursement_amount,
            total_pay=breakdown.total_pay,
            created_by=actor.user_id,
            ip_address=actor.ip_address,
        )
        self.session.add(record)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise AlreadyProcessedError(period_id) from e

        await self.audit.record(
            action="create",
            table_name="payroll",
            record_id=record.id,
            actor=actor,
            details=(
                f"Processed payroll for user {breakdown.employee_id} "
                f"for period {period_id}"
            ),
        )
        return record

    @staticmethod
    def _complete_run(run: PayrollRun, result: PayrollRunResult) -> None:
        PayrollRunStateMachine.validate_transition(run.status, PayrollRunStatus.COMPLETED)
        run.status = PayrollRunStatus.COMPLETED.value
        run.employee_count = len(result.records)
        run.total_payroll = result.total_payroll
        run.completed_at = datetime.now(timezone.utc)
