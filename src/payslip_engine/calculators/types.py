"""Type definitions for the pay calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True)
class EmployeePayInputs:
    """Ledger aggregates for one employee in one period."""

    employee_id: UUID
    monthly_salary: Decimal
    attendance_count: int
    overtime_hours: Decimal = Decimal("0")
    reimbursement_total: Decimal = Decimal("0")


@dataclass(frozen=True)
class PayBreakdown:
    """Computed pay figures for one employee.

    All money values are quantized to cents; ``total_pay`` is the sum of
    the three rounded components.
    """

    employee_id: UUID
    salary_per_hour: Decimal
    base_salary: Decimal
    overtime_pay: Decimal
    reimbursement_amount: Decimal
    total_pay: Decimal
