"""Payslip and payroll summary views over computed payroll records."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.errors import NotFoundError
from payslip_engine.models import (
    AttendanceMark,
    AttendancePeriod,
    Employee,
    OvertimeClaim,
    PayrollRecord,
    ReimbursementClaim,
)
from payslip_engine.services.parsing import parse_uuid
from payslip_engine.services.period_service import PeriodService


@dataclass
class PayslipView:
    """One employee's pay for one period with the entries behind it."""

    period: AttendancePeriod
    user_id: UUID
    attendance: list[AttendanceMark]
    overtime: list[OvertimeClaim]
    reimbursements: list[ReimbursementClaim]
    base_salary: Decimal
    overtime_pay: Decimal
    reimbursement_amount: Decimal
    total_pay: Decimal

    @property
    def attendance_days(self) -> int:
        return len(self.attendance)

    @property
    def overtime_hours(self) -> Decimal:
        return sum((o.hours for o in self.overtime), Decimal("0"))


@dataclass(frozen=True)
class SummaryEntry:
    username: str
    total_pay: Decimal


@dataclass
class SummaryView:
    """Take-home pay of every employee for one period."""

    period_id: UUID
    entries: list[SummaryEntry] = field(default_factory=list)

    @property
    def total_payroll(self) -> Decimal:
        return sum((e.total_pay for e in self.entries), Decimal("0"))


class PayslipService:
    """Read-only views; no gate, no audit."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.periods = PeriodService(session)

    async def generate_payslip(
        self, period_id: str | UUID, user_id: UUID
    ) -> PayslipView:
        """Assemble a payslip; requires payroll to have run for the user."""
        parsed_period_id = parse_uuid(period_id, "period ID")

        result = await self.session.execute(
            select(PayrollRecord).where(
                PayrollRecord.period_id == parsed_period_id,
                PayrollRecord.user_id == user_id,
            )
        )
        record = result.scalar_one_or_none()
        if record is None:
            raise NotFoundError(f"Payroll for user {user_id} in period", parsed_period_id)

        period = await self.periods.find_period(parsed_period_id)

        attendance = await self._entries(AttendanceMark, user_id, parsed_period_id)
        overtime = await self._entries(OvertimeClaim, user_id, parsed_period_id)
        reimbursements = await self._entries(ReimbursementClaim, user_id, parsed_period_id)

        return PayslipView(
            period=period,
            user_id=user_id,
            attendance=attendance,
            overtime=overtime,
            reimbursements=reimbursements,
            base_salary=record.base_salary,
            overtime_pay=record.overtime_pay,
            reimbursement_amount=record.reimbursement_amount,
            total_pay=record.total_pay,
        )

    async def generate_payroll_summary(self, period_id: str | UUID) -> SummaryView:
        """Summarize every payroll record of a period by username."""
        period = await self.periods.find_period(period_id)

        result = await self.session.execute(
            select(PayrollRecord, Employee.username)
            .outerjoin(Employee, Employee.id == PayrollRecord.user_id)
            .where(PayrollRecord.period_id == period.id)
            .order_by(Employee.username)
        )

        summary = SummaryView(period_id=period.id)
        for record, username in result.all():
            if username is None:
                raise NotFoundError("User", record.user_id)
            summary.entries.append(
                SummaryEntry(username=username, total_pay=record.total_pay)
            )
        return summary

    async def _entries(self, model, user_id: UUID, period_id: UUID) -> list:
        result = await self.session.execute(
            select(model)
            .where(model.user_id == user_id, model.period_id == period_id)
            .order_by(model.created_at)
        )
        return list(result.scalars().all())
