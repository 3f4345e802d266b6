# care_core/patients/models.py
from django.db import models

from care_core.common.models import BaseModel
from care_core.staff.models import StaffMember


class CaseStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    PAUSED = "paused", "Paused"
    CLOSED = "closed", "Closed"


class Patient(BaseModel):
    """
    Patient record. The workflow engine only reads the matching profile and
    moves the current-assignment pointer; history lives in assignments.Assignment.
    """
    full_name = models.CharField(max_length=255)
    mrn = models.CharField(max_length=64, blank=True)

    diagnoses = models.JSONField(default=list, blank=True)
    tags = models.JSONField(default=list, blank=True)

    case_status = models.CharField(
        max_length=16,
        choices=CaseStatus.choices,
        default=CaseStatus.ACTIVE,
        db_index=True,
    )

    # current-assignment pointer (denormalized from the latest Assignment)
    assigned_caregiver = models.ForeignKey(
        StaffMember,
        on_delete=models.PROTECT,
        related_name="assigned_patients",
        null=True,
        blank=True,
    )
    supervisor = models.ForeignKey(
        StaffMember,
        on_delete=models.PROTECT,
        related_name="supervised_patients",
        null=True,
        blank=True,
    )

    # bumped on every pointer move; compare-and-swap guard for concurrent assigns
    assignment_version = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "patients_patient"
        indexes = [
            models.Index(fields=["assigned_caregiver", "case_status"]),
            models.Index(fields=["full_name"]),
        ]

    def __str__(self) -> str:
        return f"{self.full_name} ({self.mrn})" if self.mrn else self.full_name

    @property
    def needs(self) -> list[str]:
        """Tags + diagnoses, the items matched against caregiver specialties."""
        return [*(self.tags or []), *(self.diagnoses or [])]
