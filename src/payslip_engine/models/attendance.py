"""Attendance period and ledger entry models."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from payslip_engine.models.base import AuditColumnsMixin, Base, IdMixin


# ===== Periods =====


class AttendancePeriod(Base, IdMixin, AuditColumnsMixin):
    """Date range over which ledger entries accumulate before one payroll run."""

    __tablename__ = "attendance_period"

    start_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    end_date: Mapped[dt.date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="attendance_period_dates_check"),
    )

    def contains(self, day: dt.date) -> bool:
        """Check if a date falls inside this period (inclusive)."""
        return self.start_date <= day <= self.end_date


# ===== Ledger entries =====


class AttendanceMark(Base, IdMixin, AuditColumnsMixin):
    """One day of attendance for one user."""

    __tablename__ = "attendance"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    period_id: Mapped[UUID] = mapped_column(
        ForeignKey("attendance_period.id", ondelete="CASCADE"), nullable=False
    )
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "user_id", "date", "period_id", name="attendance_user_date_period_unique"
        ),
        Index("ix_attendance_user_period", "user_id", "period_id"),
    )


class OvertimeClaim(Base, IdMixin, AuditColumnsMixin):
    """Overtime hours claimed for one day; several claims per day are allowed."""

    __tablename__ = "overtime"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    hours: Mapped[Decimal] = mapped_column(Numeric(4, 2), nullable=False)
    period_id: Mapped[UUID] = mapped_column(
        ForeignKey("attendance_period.id", ondelete="CASCADE"), nullable=False
    )
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)

    __table_args__ = (
        CheckConstraint("hours > 0 AND hours <= 3", name="overtime_hours_check"),
        Index("ix_overtime_user_period", "user_id", "period_id"),
    )


class ReimbursementClaim(Base, IdMixin, AuditColumnsMixin):
    """Expense reimbursement paid out with the period's payroll."""

    __tablename__ = "reimbursement"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    period_id: Mapped[UUID] = mapped_column(
        ForeignKey("attendance_period.id", ondelete="CASCADE"), nullable=False
    )
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)

    __table_args__ = (
        CheckConstraint("amount > 0", name="reimbursement_amount_check"),
        Index("ix_reimbursement_user_period", "user_id", "period_id"),
    )
