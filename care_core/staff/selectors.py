# care_core/staff/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from care_core.staff.models import StaffMember, StaffRole


def find_staff(*, staff_id: UUID) -> StaffMember | None:
    return StaffMember.objects.filter(id=staff_id).first()


def active_caregivers() -> QuerySet[StaffMember]:
    """
    Stable input order (oldest first) so auto-assign tie-breaks are deterministic.
    """
    return StaffMember.objects.filter(
        role=StaffRole.CAREGIVER,
        is_active=True,
    ).order_by("created_at", "id")
