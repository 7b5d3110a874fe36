"""ORM models."""

from payslip_engine.models.base import Base, IdMixin, TimestampMixin
from payslip_engine.models.attendance import (
    AttendanceMark,
    AttendancePeriod,
    OvertimeClaim,
    ReimbursementClaim,
)
from payslip_engine.models.employee import Employee
from payslip_engine.models.payroll import AuditEvent, PayrollRecord, PayrollRun

__all__ = [
    "Base",
    "IdMixin",
    "TimestampMixin",
    "AttendancePeriod",
    "AttendanceMark",
    "OvertimeClaim",
    "ReimbursementClaim",
    "Employee",
    "PayrollRun",
    "PayrollRecord",
    "AuditEvent",
]
