# care_core/staff/models.py
from django.db import models

from care_core.common.models import BaseModel


class StaffRole(models.TextChoices):
    CAREGIVER = "caregiver", "Caregiver"
    SUPERVISOR = "supervisor", "Supervisor"
    ADMIN = "admin", "Admin"


PRIVILEGED_ROLES = frozenset({StaffRole.SUPERVISOR, StaffRole.ADMIN})


class StaffMember(BaseModel):
    """
    Clinical staff identity as seen by the workflow engine.
    Authentication happens upstream; this record only carries role + matching profile.
    Never hard-deleted here: `is_active` is the soft flag.
    """
    full_name = models.CharField(max_length=255)
    email = models.EmailField(blank=True)

    role = models.CharField(
        max_length=16,
        choices=StaffRole.choices,
        default=StaffRole.CAREGIVER,
        db_index=True,
    )

    specialties = models.JSONField(default=list, blank=True)  # e.g. ["Pain Management"]

    # availability: weekly capacity slots + optional schedule descriptor
    weekly_slots = models.PositiveIntegerField(null=True, blank=True)
    weekly_schedule = models.JSONField(default=dict, blank=True)

    years_experience = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "staff_staff_member"
        indexes = [
            models.Index(fields=["role", "is_active"]),
        ]

    def __str__(self) -> str:
        return f"{self.full_name} ({self.role})"

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES
