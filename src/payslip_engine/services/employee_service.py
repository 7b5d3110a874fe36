"""Employee directory: registration and lookup."""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.errors import ConflictError, InvalidInputError, NotFoundError
from payslip_engine.identity import ActorContext, Role
from payslip_engine.models import Employee
from payslip_engine.services.audit_service import AuditService
from payslip_engine.services.parsing import CENT_PLACES, parse_decimal, parse_uuid

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9]+$")
MAX_USERNAME_LENGTH = 50


class EmployeeService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.audit = AuditService(session)

    async def register_employee(
        self,
        username: str,
        role: str,
        monthly_salary: str | float | Decimal | None,
        actor: ActorContext,
    ) -> Employee:
        """Register a user; employees need a positive monthly salary."""
        username = (username or "").strip()
        if not username:
            raise InvalidInputError("Username is required")
        if len(username) > MAX_USERNAME_LENGTH or not USERNAME_PATTERN.match(username):
            raise InvalidInputError("Username must be alphanumeric")

        try:
            parsed_role = Role((role or "").strip().lower())
        except ValueError as e:
            raise InvalidInputError("Role must be employee or admin") from e

        if parsed_role == Role.EMPLOYEE:
            if monthly_salary is None:
                raise InvalidInputError("Monthly salary is required for employees")
            salary = parse_decimal(monthly_salary, "monthly salary", CENT_PLACES)
            if salary <= 0:
                raise InvalidInputError("Monthly salary must be positive")
        else:
            salary = Decimal("0")

        existing = await self.session.execute(
            select(Employee.id).where(Employee.username == username)
        )
        if existing.first() is not None:
            raise ConflictError("Username already exists")

        employee = Employee(
            username=username,
            role=parsed_role.value,
            monthly_salary=salary,
            created_by=actor.user_id,
            updated_by=actor.user_id,
        )
        self.session.add(employee)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError("Username already exists") from e

        await self.audit.record(
            action="create",
            table_name="user",
            record_id=employee.id,
            actor=actor,
            details=f"Registered user {username} with role {parsed_role.value}",
        )
        logger.info("Registered %s %s", parsed_role.value, username)
        return employee

    async def find_employee(self, employee_id: str | UUID) -> Employee:
        parsed_id = parse_uuid(employee_id, "user ID")
        employee = await self.session.get(Employee, parsed_id)
        if employee is None:
            raise NotFoundError("User", parsed_id)
        return employee
