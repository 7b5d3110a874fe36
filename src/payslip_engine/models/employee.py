"""Employee model (owned by the identity subsystem, read by payroll)."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import CheckConstraint, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from payslip_engine.models.base import AuditColumnsMixin, Base, IdMixin


class Employee(Base, IdMixin, AuditColumnsMixin):
    """A user of the system; only role=employee is paid."""

    __tablename__ = "app_user"

    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    monthly_salary: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )

    __table_args__ = (
        CheckConstraint("role IN ('employee', 'admin')", name="app_user_role_check"),
        CheckConstraint("monthly_salary >= 0", name="app_user_salary_check"),
    )

    def __repr__(self) -> str:
        return f"<Employee {self.username} ({self.role})>"
