# care_core/staff/services.py
from __future__ import annotations

from django.db import transaction

from care_core.staff.models import StaffMember, StaffRole


class StaffService:
    """
    Minimal write helpers. Full user management lives in the request layer.
    """

    @staticmethod
    @transaction.atomic
    def create_staff(
        *,
        full_name: str,
        role: str = StaffRole.CAREGIVER,
        email: str = "",
        specialties: list[str] | None = None,
        weekly_slots: int | None = None,
        weekly_schedule: dict | None = None,
        years_experience: int = 0,
        is_active: bool = True,
    ) -> StaffMember:
        return StaffMember.objects.create(
            full_name=full_name,
            role=role,
            email=email or "",
            specialties=list(specialties or []),
            weekly_slots=weekly_slots,
            weekly_schedule=weekly_schedule or {},
            years_experience=years_experience,
            is_active=is_active,
        )

    @staticmethod
    @transaction.atomic
    def deactivate(*, staff: StaffMember) -> StaffMember:
        if staff.is_active:
            staff.is_active = False
            staff.save(update_fields=["is_active", "updated_at"])
        return staff
