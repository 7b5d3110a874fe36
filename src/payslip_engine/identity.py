"""Actor identity handed to services by the request layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class Role(str, Enum):
    """User roles known to the payroll core."""

    EMPLOYEE = "employee"
    ADMIN = "admin"


@dataclass(frozen=True)
class ActorContext:
    """Verified caller identity plus request metadata.

    Produced by the authentication layer; services trust ``user_id`` and
    ``role`` as-is and never parse identity from free-form strings.
    """

    user_id: UUID
    role: Role
    ip_address: str | None = None
    request_id: str | None = None
