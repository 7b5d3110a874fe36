"""Payroll calculation."""

from payslip_engine.calculators.pay_calculator import (
    HOURS_PER_DAY,
    OVERTIME_MULTIPLIER,
    PayCalculator,
    count_working_days,
    is_weekend,
    quantize_money,
)
from payslip_engine.calculators.types import EmployeePayInputs, PayBreakdown

__all__ = [
    "HOURS_PER_DAY",
    "OVERTIME_MULTIPLIER",
    "PayCalculator",
    "count_working_days",
    "is_weekend",
    "quantize_money",
    "EmployeePayInputs",
    "PayBreakdown",
]
