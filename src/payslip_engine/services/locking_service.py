"""Period locking for payroll runs and ledger submissions."""

from __future__ import annotations

import asyncio
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.errors import AlreadyProcessedError
from payslip_engine.identity import ActorContext
from payslip_engine.models import AttendancePeriod, PayrollRun
from payslip_engine.services.state_machine import PayrollRunStatus

# Live locks only; an entry disappears once no coroutine holds a reference.
_period_locks: weakref.WeakValueDictionary[UUID, asyncio.Lock] = (
    weakref.WeakValueDictionary()
)


def get_period_lock(period_id: UUID) -> asyncio.Lock:
    """Return the in-process lock serializing payroll runs for a period."""
    lock = _period_locks.get(period_id)
    if lock is None:
        lock = asyncio.Lock()
        _period_locks[period_id] = lock
    return lock


class LockingService:
    """Serializes payroll runs against each other and against submissions.

    Three layers, outermost first:
    1. An in-process asyncio lock per period (one run at a time per worker)
    2. Row locks on the period: runs take FOR UPDATE, submissions FOR SHARE,
       so a submission commits before the run reads the ledger or waits and
       then sees the period frozen
    3. The payroll_run claim row, unique per period, which rejects a second
       run across workers even where row locks are unavailable
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def period_guard(self, period_id: UUID) -> AsyncIterator[None]:
        """Hold the in-process run lock for a period."""
        lock = get_period_lock(period_id)
        async with lock:
            yield

    async def lock_period_for_run(self, period_id: UUID) -> AttendancePeriod | None:
        """Load a period with an exclusive row lock."""
        result = await self.session.execute(
            select(AttendancePeriod)
            .where(AttendancePeriod.id == period_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def lock_period_for_submission(
        self, period_id: UUID
    ) -> AttendancePeriod | None:
        """Load a period with a shared row lock."""
        result = await self.session.execute(
            select(AttendancePeriod)
            .where(AttendancePeriod.id == period_id)
            .with_for_update(read=True)
        )
        return result.scalar_one_or_none()

    async def claim_run(self, period_id: UUID, actor: ActorContext) -> PayrollRun:
        """Insert the started run row for a period.

        Raises:
            AlreadyProcessedError: If another run already claimed the period
        """
        run = PayrollRun(
            period_id=period_id,
            status=PayrollRunStatus.STARTED.value,
            created_by=actor.user_id,
            ip_address=actor.ip_address,
        )
        self.session.add(run)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise AlreadyProcessedError(period_id) from e
        return run
