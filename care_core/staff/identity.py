# care_core/staff/identity.py
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from care_core.common.exceptions import UnauthorizedError
from care_core.staff.models import PRIVILEGED_ROLES


@dataclass(frozen=True)
class Actor:
    """
    Already-authenticated caller identity, passed explicitly into every service.
    """
    staff_id: UUID
    role: str

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES

    @classmethod
    def for_staff(cls, staff) -> "Actor":
        return cls(staff_id=staff.id, role=staff.role)


def require_privileged(actor: Actor, message: str | None = None) -> None:
    """
    Supervisor/admin gate (role equality only).
    """
    if actor is None or actor.role not in PRIVILEGED_ROLES:
        raise UnauthorizedError(message or "Only supervisors and admins can perform this action.")
