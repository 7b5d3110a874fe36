"""Period and payroll run state machines with transition validation."""

from __future__ import annotations

from enum import Enum


class PeriodStatus(str, Enum):
    """Attendance period status values.

    A period is frozen as soon as it holds any payroll record.
    """

    OPEN = "open"
    FROZEN = "frozen"


class PayrollRunStatus(str, Enum):
    """Payroll run status values."""

    STARTED = "started"
    COMPLETED = "completed"


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class PeriodStateMachine:
    """State machine for attendance periods.

    Allowed transitions:
    - open → frozen (payroll run completes)

    Frozen is terminal; there is no way back to open.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PeriodStatus.OPEN: [PeriodStatus.FROZEN],
        PeriodStatus.FROZEN: [],  # Terminal state
    }

    # Statuses where attendance, overtime and reimbursements are accepted
    SUBMISSIONS_ALLOWED = {PeriodStatus.OPEN}

    @classmethod
    def status_for(cls, is_processed: bool) -> PeriodStatus:
        return PeriodStatus.FROZEN if is_processed else PeriodStatus.OPEN

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        return to_status in cls.VALID_TRANSITIONS.get(from_status, [])

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def can_submit(cls, status: str) -> bool:
        """Check if ledger submissions are accepted in this status."""
        return status in cls.SUBMISSIONS_ALLOWED


class PayrollRunStateMachine:
    """State machine for payroll runs.

    Allowed transitions:
    - started → completed

    A run that fails is rolled back together with its claim row, so no
    failed state is ever persisted.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayrollRunStatus.STARTED: [PayrollRunStatus.COMPLETED],
        PayrollRunStatus.COMPLETED: [],
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        return to_status in cls.VALID_TRANSITIONS.get(from_status, [])

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)
