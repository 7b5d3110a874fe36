"""Pytest fixtures for payslip engine tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from payslip_engine.api.app import create_app
from payslip_engine.api.dependencies import get_db_session
from payslip_engine.database import make_session_factory
from payslip_engine.identity import ActorContext, Role
from payslip_engine.models import AttendancePeriod, Base, Employee
from payslip_engine.services.period_service import PeriodService

# In-memory SQLite, one database per test. Row locks are no-ops here;
# the unique constraints still enforce one run per period.
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Monday 2024-07-01 through Friday 2024-07-26: 20 working days
PERIOD_START = date(2024, 7, 1)
PERIOD_END = date(2024, 7, 26)
SATURDAY = date(2024, 7, 6)

MONTHLY_SALARY = Decimal("4000000")


@pytest.fixture
async def engine():
    """Create test database engine with a fresh schema."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def admin() -> ActorContext:
    return ActorContext(
        user_id=uuid4(),
        role=Role.ADMIN,
        ip_address="10.0.0.1",
        request_id="req-admin",
    )


async def make_employee(
    session: AsyncSession,
    username: str,
    monthly_salary: Decimal = MONTHLY_SALARY,
    role: Role = Role.EMPLOYEE,
) -> Employee:
    """Insert a user row directly, bypassing registration rules."""
    employee = Employee(username=username, role=role.value, monthly_salary=monthly_salary)
    session.add(employee)
    await session.flush()
    return employee


def actor_for(employee: Employee, ip_address: str = "10.0.0.2") -> ActorContext:
    return ActorContext(
        user_id=employee.id,
        role=Role(employee.role),
        ip_address=ip_address,
    )


@pytest.fixture
async def employee(session) -> Employee:
    return await make_employee(session, "alice")


@pytest.fixture
def employee_actor(employee) -> ActorContext:
    return actor_for(employee)


@pytest.fixture
async def period(session, admin) -> AttendancePeriod:
    return await PeriodService(session).create_period(PERIOD_START, PERIOD_END, admin)


# ===== API =====


def admin_headers(user_id=None) -> dict[str, str]:
    return {"X-User-ID": str(user_id or uuid4()), "X-User-Role": "admin"}


def employee_headers(user_id) -> dict[str, str]:
    return {"X-User-ID": str(user_id), "X-User-Role": "employee"}


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app, with sessions from the test engine."""
    app = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
