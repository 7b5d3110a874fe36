"""Tests for running payroll over a period."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from payslip_engine.errors import AlreadyProcessedError, InvalidRangeError, NotFoundError
from payslip_engine.identity import Role
from payslip_engine.models import AuditEvent, PayrollRecord, PayrollRun
from payslip_engine.services.attendance_service import AttendanceService
from payslip_engine.services.audit_service import AuditService
from payslip_engine.services.payroll_service import PayrollService
from payslip_engine.services.period_service import PeriodService
from payslip_engine.services.state_machine import InvalidTransitionError

from tests.conftest import PERIOD_END, PERIOD_START, actor_for, make_employee


async def count(session, model, *where) -> int:
    return await session.scalar(select(func.count(model.id)).where(*where))


async def attend(session, actor, period, days):
    service = AttendanceService(session)
    for day in days:
        await service.submit_attendance(date(2024, 7, day), period.id, actor)


class TestRunPayroll:
    async def test_full_attendance_pays_monthly_salary(
        self, session, period, employee, employee_actor, admin
    ):
        weekdays = [d for d in range(1, 27) if date(2024, 7, d).weekday() < 5]
        await attend(session, employee_actor, period, weekdays)

        result = await PayrollService(session).run_payroll(period.id, admin)

        assert result.working_days == 20
        assert len(result.records) == 1
        record = result.records[0]
        assert record.user_id == employee.id
        assert record.base_salary == Decimal("4000000.00")
        assert record.total_pay == Decimal("4000000.00")
        assert result.total_payroll == Decimal("4000000.00")

    async def test_aggregates_ledger_entries(
        self, session, period, employee, employee_actor, admin
    ):
        await attend(session, employee_actor, period, [1, 2, 3])
        ledger = AttendanceService(session)
        await ledger.submit_overtime("2024-07-02", "1.5", period.id, employee_actor)
        await ledger.submit_overtime("2024-07-03", "0.5", period.id, employee_actor)
        await ledger.submit_reimbursement(
            "100000", "Hotel", period.id, employee_actor
        )
        await ledger.submit_reimbursement(
            "50000.50", "Taxi", period.id, employee_actor
        )

        result = await PayrollService(session).run_payroll(period.id, admin)

        record = result.records[0]
        assert record.base_salary == Decimal("600000.00")
        assert record.overtime_pay == Decimal("100000.00")
        assert record.reimbursement_amount == Decimal("150000.50")
        assert record.total_pay == Decimal("850000.50")

    async def test_employee_without_entries_gets_zero_record(
        self, session, period, employee, admin
    ):
        result = await PayrollService(session).run_payroll(period.id, admin)

        assert len(result.records) == 1
        assert result.records[0].total_pay == Decimal("0.00")

    async def test_admins_are_not_paid(self, session, period, employee, admin):
        await make_employee(session, "boss", Decimal("0"), role=Role.ADMIN)

        result = await PayrollService(session).run_payroll(period.id, admin)

        assert [r.user_id for r in result.records] == [employee.id]

    async def test_one_record_per_employee(self, session, period, employee, admin):
        bob = await make_employee(session, "bob", Decimal("3000000"))
        await attend(session, actor_for(bob), period, [1])

        result = await PayrollService(session).run_payroll(period.id, admin)

        assert {r.user_id for r in result.records} == {employee.id, bob.id}
        assert await count(session, PayrollRecord) == 2

    async def test_run_marked_completed(self, session, period, employee, admin):
        result = await PayrollService(session).run_payroll(period.id, admin)

        run = await PayrollService(session).get_run(period.id)
        assert run is result.run
        assert run.status == "completed"
        assert run.employee_count == 1
        assert run.created_by == admin.user_id
        assert run.completed_at is not None
        assert all(r.payroll_run_id == run.id for r in result.records)

    async def test_audit_event_per_record(self, session, period, employee, admin):
        result = await PayrollService(session).run_payroll(period.id, admin)

        events = (
            await session.execute(
                select(AuditEvent).where(AuditEvent.table_name == "payroll")
            )
        ).scalars().all()
        assert len(events) == 1
        assert events[0].record_id == result.records[0].id
        assert events[0].actor_user_id == admin.user_id
        assert events[0].details == (
            f"Processed payroll for user {employee.id} for period {period.id}"
        )

    async def test_rerun_rejected_without_writes(
        self, session, period, employee, admin
    ):
        service = PayrollService(session)
        await service.run_payroll(period.id, admin)
        audit_count = await count(session, AuditEvent)

        with pytest.raises(AlreadyProcessedError) as excinfo:
            await service.run_payroll(period.id, admin)

        assert isinstance(excinfo.value.__cause__, InvalidTransitionError)
        assert await count(session, PayrollRecord) == 1
        assert await count(session, PayrollRun) == 1
        assert await count(session, AuditEvent) == audit_count

    async def test_period_without_employees_is_frozen(self, session, period, admin):
        result = await PayrollService(session).run_payroll(period.id, admin)

        assert result.records == []
        assert result.total_payroll == Decimal("0")
        assert await PeriodService(session).is_processed(period.id) is True
        with pytest.raises(AlreadyProcessedError):
            await PayrollService(session).run_payroll(period.id, admin)

    async def test_unknown_period(self, session, admin):
        with pytest.raises(NotFoundError):
            await PayrollService(session).run_payroll(uuid4(), admin)

    async def test_zero_working_days_rejected(self, session, employee, admin):
        weekend = await PeriodService(session).create_period(
            "2024-07-06", "2024-07-07", admin
        )

        with pytest.raises(InvalidRangeError):
            await PayrollService(session).run_payroll(weekend.id, admin)

        assert await PeriodService(session).is_processed(weekend.id) is False

    async def test_get_run_before_payroll(self, session, period):
        with pytest.raises(NotFoundError):
            await PayrollService(session).get_run(period.id)


class TestRunPayrollAtomicity:
    """A failed run leaves nothing behind once the caller rolls back."""

    async def test_failure_rolls_back_everything(
        self, session, period, employee, admin, monkeypatch
    ):
        await make_employee(session, "bob")
        period_id = period.id
        await session.commit()

        real_record = AuditService.record
        payroll_events = 0

        async def failing_record(self, action, table_name, record_id, actor, details=None):
            nonlocal payroll_events
            if table_name == "payroll":
                payroll_events += 1
                if payroll_events == 2:
                    raise RuntimeError("audit store unavailable")
            return await real_record(self, action, table_name, record_id, actor, details)

        monkeypatch.setattr(AuditService, "record", failing_record)

        with pytest.raises(RuntimeError):
            await PayrollService(session).run_payroll(period_id, admin)
        await session.rollback()

        assert await count(session, PayrollRecord) == 0
        assert await count(session, PayrollRun) == 0
        assert await count(session, AuditEvent, AuditEvent.table_name == "payroll") == 0
        assert await PeriodService(session).is_processed(period_id) is False

class TestRunPayrollAcrossSessions:
    """Each request runs in its own session; a period is still paid once."""

    async def test_second_session_rejected(self, session_factory, admin):
        async with session_factory() as setup:
            alice = await make_employee(setup, "alice")
            bob = await make_employee(setup, "bob")
            period = await PeriodService(setup).create_period(
                PERIOD_START, PERIOD_END, admin
            )
            await attend(setup, actor_for(alice), period, [1, 2])
            await attend(setup, actor_for(bob), period, [3])
            period_id = period.id
            await setup.commit()

        async with session_factory() as first:
            result = await PayrollService(first).run_payroll(period_id, admin)
            await first.commit()
        assert len(result.records) == 2

        async with session_factory() as second:
            with pytest.raises(AlreadyProcessedError):
                await PayrollService(second).run_payroll(period_id, admin)
            await second.rollback()

        async with session_factory() as check:
            assert await count(check, PayrollRun, PayrollRun.period_id == period_id) == 1
            per_user = (
                await check.execute(
                    select(PayrollRecord.user_id, func.count(PayrollRecord.id))
                    .where(PayrollRecord.period_id == period_id)
                    .group_by(PayrollRecord.user_id)
                )
            ).all()
            assert dict(per_user) == {alice.id: 1, bob.id: 1}
