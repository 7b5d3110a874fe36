"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


# ============================================================================
# Errors
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None


# ============================================================================
# Period schemas
# ============================================================================


class PeriodCreate(BaseModel):
    """Dates are parsed by the service so format errors map to INVALID_INPUT."""

    start_date: str
    end_date: str


class PeriodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    start_date: date
    end_date: date
    status: str | None = None
    created_by: UUID | None = None
    created_at: datetime


# ============================================================================
# Ledger schemas
# ============================================================================


class AttendanceCreate(BaseModel):
    date: str
    period_id: str


class OvertimeCreate(BaseModel):
    date: str
    hours: Decimal
    period_id: str


class ReimbursementCreate(BaseModel):
    amount: Decimal
    description: str = ""
    period_id: str


class AttendanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    date: date
    period_id: UUID
    created_at: datetime


class OvertimeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    date: date
    hours: Decimal
    period_id: UUID
    created_at: datetime


class ReimbursementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    amount: Decimal
    description: str
    period_id: UUID
    created_at: datetime


# ============================================================================
# Payroll schemas
# ============================================================================


class PayrollRunResponse(BaseModel):
    """Schema for a completed payroll run."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    period_id: UUID
    status: str
    employee_count: int
    total_payroll: Decimal
    created_by: UUID
    completed_at: datetime | None = None


class PayslipResponse(BaseModel):
    period: PeriodResponse
    attendance: list[AttendanceResponse]
    overtime: list[OvertimeResponse]
    reimbursements: list[ReimbursementResponse]
    attendance_days: int
    overtime_hours: Decimal
    base_salary: Decimal
    overtime_pay: Decimal
    reimbursement_amount: Decimal
    total_pay: Decimal


class SummaryEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    username: str
    total_pay: Decimal


class PayrollSummaryResponse(BaseModel):
    period_id: UUID
    summary: list[SummaryEntryResponse]
    total_payroll: Decimal


# ============================================================================
# Employee schemas
# ============================================================================


class EmployeeCreate(BaseModel):
    username: str
    role: str
    monthly_salary: Decimal | None = None


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    role: str
    monthly_salary: Decimal
    created_at: datetime
