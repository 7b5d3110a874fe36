"""Tests for attendance period creation and status."""

from datetime import date
from uuid import uuid4

import pytest
from sqlalchemy import select

from payslip_engine.errors import InvalidInputError, InvalidRangeError, NotFoundError
from payslip_engine.models import AttendancePeriod, AuditEvent
from payslip_engine.services.payroll_service import PayrollService
from payslip_engine.services.period_service import PeriodService
from payslip_engine.services.state_machine import PeriodStatus

from tests.conftest import PERIOD_END, PERIOD_START


class TestCreatePeriod:
    async def test_create_from_strings(self, session, admin):
        period = await PeriodService(session).create_period(
            "2024-07-01", "2024-07-26", admin
        )

        assert period.id is not None
        assert period.start_date == PERIOD_START
        assert period.end_date == PERIOD_END
        assert period.created_by == admin.user_id

    async def test_single_day_period(self, session, admin):
        day = date(2024, 7, 3)
        period = await PeriodService(session).create_period(day, day, admin)

        assert period.start_date == period.end_date == day

    async def test_end_before_start_rejected(self, session, admin):
        with pytest.raises(InvalidRangeError):
            await PeriodService(session).create_period("2024-07-26", "2024-07-01", admin)

        periods = (await session.execute(select(AttendancePeriod))).scalars().all()
        assert periods == []

    @pytest.mark.parametrize("bad", ["2024/07/01", "01-07-2024", "2024-02-30", ""])
    async def test_malformed_date_rejected(self, session, admin, bad):
        with pytest.raises(InvalidInputError):
            await PeriodService(session).create_period(bad, "2024-07-26", admin)

    async def test_records_audit_event(self, session, admin):
        period = await PeriodService(session).create_period(
            PERIOD_START, PERIOD_END, admin
        )

        events = (await session.execute(select(AuditEvent))).scalars().all()
        assert len(events) == 1
        event = events[0]
        assert event.action == "create"
        assert event.table_name == "attendance_period"
        assert event.record_id == period.id
        assert event.actor_user_id == admin.user_id
        assert event.ip_address == "10.0.0.1"
        assert event.request_id == "req-admin"
        assert event.details == (
            f"Created attendance period {period.id} from 2024-07-01 to 2024-07-26"
        )

    async def test_overlapping_periods_allowed(self, session, admin, period):
        other = await PeriodService(session).create_period(
            "2024-07-15", "2024-08-15", admin
        )
        assert other.id != period.id


class TestFindPeriod:
    async def test_find_existing(self, session, period):
        found = await PeriodService(session).find_period(str(period.id))
        assert found is period

    async def test_missing_period(self, session):
        with pytest.raises(NotFoundError):
            await PeriodService(session).find_period(uuid4())

    async def test_malformed_id(self, session):
        with pytest.raises(InvalidInputError):
            await PeriodService(session).find_period("not-a-uuid")


class TestPeriodStatus:
    async def test_new_period_is_open(self, session, period):
        service = PeriodService(session)

        assert await service.is_processed(period.id) is False
        assert await service.period_status(period.id) == PeriodStatus.OPEN

    async def test_frozen_after_payroll(self, session, period, employee, admin):
        await PayrollService(session).run_payroll(period.id, admin)

        service = PeriodService(session)
        assert await service.is_processed(period.id) is True
        assert await service.period_status(period.id) == PeriodStatus.FROZEN
