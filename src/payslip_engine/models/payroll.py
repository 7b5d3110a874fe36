"""Payroll run, payroll record, and audit models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from payslip_engine.models.base import Base, IdMixin, TimestampMixin


# ===== Payroll Runs =====


class PayrollRun(Base, IdMixin, TimestampMixin):
    """Claim marker for one period's payroll run.

    The unique period_id makes the insert a compare-and-swap: only one run
    per period can ever be started.
    """

    __tablename__ = "payroll_run"

    period_id: Mapped[UUID] = mapped_column(
        ForeignKey("attendance_period.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="started")
    employee_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_payroll: Mapped[Decimal] = mapped_column(
        Numeric(16, 2), nullable=False, default=Decimal("0")
    )
    created_by: Mapped[UUID] = mapped_column(nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        UniqueConstraint("period_id", name="payroll_run_period_unique"),
        CheckConstraint(
            "status IN ('started', 'completed')",
            name="payroll_run_status_check",
        ),
    )


# ===== Payroll Records =====


class PayrollRecord(Base, IdMixin, TimestampMixin):
    """Computed pay for one employee in one period. Never updated."""

    __tablename__ = "payroll"

    period_id: Mapped[UUID] = mapped_column(
        ForeignKey("attendance_period.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    payroll_run_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("payroll_run.id", ondelete="CASCADE"), nullable=True
    )
    base_salary: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    overtime_pay: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    reimbursement_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    total_pay: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    created_by: Mapped[UUID] = mapped_column(nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)

    __table_args__ = (
        UniqueConstraint("period_id", "user_id", name="payroll_period_user_unique"),
    )


# ===== Audit =====


class AuditEvent(Base, IdMixin, TimestampMixin):
    """Audit trail entry, one per mutating operation."""

    __tablename__ = "audit_log"

    action: Mapped[str] = mapped_column(String(100), nullable=False)
    table_name: Mapped[str] = mapped_column(String(50), nullable=False)
    record_id: Mapped[UUID] = mapped_column(nullable=False)
    actor_user_id: Mapped[UUID] = mapped_column(nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    request_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
