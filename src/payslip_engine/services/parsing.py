"""Input parsing shared by the service layer."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from uuid import UUID

from payslip_engine.errors import InvalidInputError

DATE_FORMAT = "%Y-%m-%d"

# Hours and money columns are stored to the cent
CENT_PLACES = 2


def parse_date(value: str | date, field: str = "date") -> date:
    """Parse a YYYY-MM-DD calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidInputError(f"Invalid {field} format, expected YYYY-MM-DD") from e


def parse_uuid(value: str | UUID, field: str = "id") -> UUID:
    """Parse an identifier token."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError as e:
        raise InvalidInputError(f"Invalid {field}") from e


def parse_decimal(
    value: str | int | float | Decimal, field: str, places: int | None = None
) -> Decimal:
    """Parse a numeric input as Decimal, rejecting NaN and infinities.

    With ``places`` set, inputs finer than that many decimal places are
    rejected instead of being rounded by the column.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid {field}")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise InvalidInputError(f"Invalid {field}") from e
    if not number.is_finite():
        raise InvalidInputError(f"Invalid {field}")
    if places is not None and number.normalize().as_tuple().exponent < -places:
        raise InvalidInputError(
            f"{field.capitalize()} allows at most {places} decimal places"
        )
    return number
