"""Payslip engine services."""

from payslip_engine.services.state_machine import (
    InvalidTransitionError,
    PayrollRunStateMachine,
    PayrollRunStatus,
    PeriodStateMachine,
    PeriodStatus,
)
from payslip_engine.services.audit_service import AuditService
from payslip_engine.services.locking_service import LockingService
from payslip_engine.services.period_service import PeriodService
from payslip_engine.services.attendance_service import AttendanceService
from payslip_engine.services.payroll_service import PayrollRunResult, PayrollService
from payslip_engine.services.payslip_service import (
    PayslipService,
    PayslipView,
    SummaryEntry,
    SummaryView,
)
from payslip_engine.services.employee_service import EmployeeService

__all__ = [
    "InvalidTransitionError",
    "PayrollRunStateMachine",
    "PayrollRunStatus",
    "PeriodStateMachine",
    "PeriodStatus",
    "AuditService",
    "LockingService",
    "PeriodService",
    "AttendanceService",
    "PayrollRunResult",
    "PayrollService",
    "PayslipService",
    "PayslipView",
    "SummaryEntry",
    "SummaryView",
    "EmployeeService",
]
