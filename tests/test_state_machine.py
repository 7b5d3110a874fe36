"""Tests for period and payroll run state machines."""

import pytest

from payslip_engine.services.state_machine import (
    InvalidTransitionError,
    PayrollRunStateMachine,
    PayrollRunStatus,
    PeriodStateMachine,
    PeriodStatus,
)


class TestPeriodStateMachine:
    """Test period status transitions."""

    def test_open_can_freeze(self):
        assert PeriodStateMachine.can_transition("open", "frozen") is True

    def test_frozen_is_terminal(self):
        assert PeriodStateMachine.can_transition("frozen", "open") is False
        assert PeriodStateMachine.can_transition("frozen", "frozen") is False

    def test_unknown_status_has_no_transitions(self):
        assert PeriodStateMachine.can_transition("archived", "open") is False

    def test_validate_transition_raises(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            PeriodStateMachine.validate_transition("frozen", "open")

        assert exc_info.value.from_status == "frozen"
        assert exc_info.value.to_status == "open"
        assert "Invalid transition" in str(exc_info.value)

    def test_status_follows_processed_flag(self):
        assert PeriodStateMachine.status_for(False) == PeriodStatus.OPEN
        assert PeriodStateMachine.status_for(True) == PeriodStatus.FROZEN

    def test_submissions_only_while_open(self):
        assert PeriodStateMachine.can_submit(PeriodStatus.OPEN) is True
        assert PeriodStateMachine.can_submit(PeriodStatus.FROZEN) is False


class TestPayrollRunStateMachine:
    def test_started_can_complete(self):
        assert (
            PayrollRunStateMachine.can_transition(
                PayrollRunStatus.STARTED, PayrollRunStatus.COMPLETED
            )
            is True
        )

    def test_completed_is_terminal(self):
        assert PayrollRunStateMachine.can_transition("completed", "started") is False

    def test_validate_transition_raises_on_backwards(self):
        with pytest.raises(InvalidTransitionError):
            PayrollRunStateMachine.validate_transition("completed", "started")

    def test_status_values_match_stored_strings(self):
        assert PayrollRunStatus.STARTED.value == "started"
        assert PayrollRunStatus.COMPLETED == "completed"
