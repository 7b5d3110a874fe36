"""Pay calculation for the fixed hourly-equivalent salary model.

Pipeline per employee:
1) working days = weekdays in [start, end], inclusive
2) hourly rate = monthly salary / (working days * 8)
3) base salary = hourly rate * attended days * 8
4) overtime pay = hourly rate * 2 * overtime hours
5) total = base + overtime + reimbursements
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from payslip_engine.calculators.types import EmployeePayInputs, PayBreakdown
from payslip_engine.errors import InvalidRangeError

HOURS_PER_DAY = 8
OVERTIME_MULTIPLIER = Decimal("2")
CENTS = Decimal("0.01")

# date.weekday(): Monday=0 .. Sunday=6
WEEKEND_DAYS = frozenset({5, 6})


def is_weekend(day: date) -> bool:
    return day.weekday() in WEEKEND_DAYS


def count_working_days(start: date, end: date) -> int:
    """Count Monday-Friday days between start and end, inclusive."""
    count = 0
    day = start
    while day <= end:
        if not is_weekend(day):
            count += 1
        day += timedelta(days=1)
    return count


def quantize_money(amount: Decimal) -> Decimal:
    """Round a money amount to cents."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


class PayCalculator:
    """Computes pay for every employee of one period.

    The working-hour denominator is fixed per period, so it is resolved
    once at construction and reused for each employee.
    """

    def __init__(self, period_start: date, period_end: date):
        self.period_start = period_start
        self.period_end = period_end
        self.working_days = count_working_days(period_start, period_end)
        if self.working_days == 0:
            raise InvalidRangeError(
                f"Period {period_start} to {period_end} contains no working days"
            )
        self.total_working_hours = Decimal(self.working_days * HOURS_PER_DAY)

    def salary_per_hour(self, monthly_salary: Decimal) -> Decimal:
        return Decimal(monthly_salary) / self.total_working_hours

    def calculate(self, inputs: EmployeePayInputs) -> PayBreakdown:
        """Calculate one employee's pay breakdown."""
        rate = self.salary_per_hour(inputs.monthly_salary)

        base_salary = quantize_money(rate * inputs.attendance_count * HOURS_PER_DAY)
        overtime_pay = quantize_money(
            rate * OVERTIME_MULTIPLIER * Decimal(inputs.overtime_hours)
        )
        reimbursement = quantize_money(Decimal(inputs.reimbursement_total))

        return PayBreakdown(
            employee_id=inputs.employee_id,
            salary_per_hour=rate,
            base_salary=base_salary,
            overtime_pay=overtime_pay,
            reimbursement_amount=reimbursement,
            total_pay=base_salary + overtime_pay + reimbursement,
        )
