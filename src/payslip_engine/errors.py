"""Domain errors raised by payslip engine services.

Every error is terminal for the operation that raised it. Services never
catch and translate these; the API layer maps them to HTTP responses.
"""

from __future__ import annotations


class PayslipError(Exception):
    """Base class for all domain errors."""

    code = "PAYSLIP_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInputError(PayslipError):
    """A field is malformed or missing."""

    code = "INVALID_INPUT"


class InvalidRangeError(PayslipError):
    """A date range is semantically impossible."""

    code = "INVALID_RANGE"


class NotFoundError(PayslipError):
    """A referenced entity does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: object):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class BusinessRuleViolationError(PayslipError):
    """Input is well-formed but breaks a payroll rule."""

    code = "BUSINESS_RULE_VIOLATION"


class ConflictError(PayslipError):
    """The submission duplicates an existing record."""

    code = "CONFLICT"


class PeriodFrozenError(PayslipError):
    """A ledger mutation was attempted after payroll ran for the period."""

    code = "PERIOD_FROZEN"

    def __init__(self, period_id: object):
        self.period_id = period_id
        super().__init__(f"Payroll already processed for period {period_id}")


class AlreadyProcessedError(PayslipError):
    """Payroll was already run for the period."""

    code = "ALREADY_PROCESSED"

    def __init__(self, period_id: object):
        self.period_id = period_id
        super().__init__(f"Payroll already processed for period {period_id}")
