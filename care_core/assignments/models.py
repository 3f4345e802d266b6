# care_core/assignments/models.py
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from care_core.common.models import BaseModel
from care_core.patients.models import Patient
from care_core.staff.models import StaffMember


class AssignmentMethod(models.TextChoices):
    AUTO = "auto", "Automatic"
    MANUAL = "manual", "Manual"


class Assignment(BaseModel):
    """
    One assignment EVENT (assign, reassign or unassign), never mutated.
    The ordered set of rows for a patient is its full assignment history;
    caregiver=None marks an unassignment.
    """
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="assignments")
    caregiver = models.ForeignKey(
        StaffMember,
        on_delete=models.PROTECT,
        related_name="assignments",
        null=True,
        blank=True,
    )
    supervisor = models.ForeignKey(
        StaffMember,
        on_delete=models.PROTECT,
        related_name="authorized_assignments",
        null=True,
        blank=True,
    )
    previous_caregiver = models.ForeignKey(
        StaffMember,
        on_delete=models.PROTECT,
        related_name="released_assignments",
        null=True,
        blank=True,
    )

    method = models.CharField(max_length=16, choices=AssignmentMethod.choices, db_index=True)
    rationale = models.TextField(blank=True, default="")

    score = models.FloatField(null=True, blank=True)
    score_breakdown = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)

    # position in the patient's history; equals Patient.assignment_version after the write
    sequence = models.PositiveIntegerField()

    class Meta:
        db_table = "assignments_assignment"
        constraints = [
            models.UniqueConstraint(
                fields=["patient", "sequence"],
                name="uq_assignment_patient_sequence",
            ),
        ]
        indexes = [
            models.Index(fields=["patient", "created_at"]),
            models.Index(fields=["caregiver", "created_at"]),
            models.Index(fields=["supervisor", "created_at"]),
            models.Index(fields=["method", "created_at"]),
        ]

    def __str__(self) -> str:
        target = self.caregiver_id or "unassigned"
        return f"{self.patient_id} -> {target} ({self.method}, #{self.sequence})"

    @property
    def is_unassignment(self) -> bool:
        return self.caregiver_id is None

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Assignment records are immutable.")
        return super().save(*args, **kwargs)
