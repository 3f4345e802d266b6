# care_core/clinical_docs/models.py
from __future__ import annotations

from django.db import models

from care_core.common.models import BaseModel
from care_core.patients.models import Patient
from care_core.staff.models import StaffMember


class DocumentKind(models.TextChoices):
    PLAN = "plan", "Therapy plan"
    REPORT = "report", "Progress report"


class ReviewStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    SUBMITTED = "submitted", "Submitted"
    APPROVED = "approved", "Approved"
    NEEDS_REVISION = "needs_revision", "Needs revision"


class ReviewableDocument(BaseModel):
    """
    Therapy plan or progress report moving through supervisor review:

        draft -> submitted -> approved
                          \\-> needs_revision -> submitted (resubmit loop)

    `content` is opaque to the workflow (goals/activities for plans,
    narrative/metrics for reports).
    """
    kind = models.CharField(max_length=16, choices=DocumentKind.choices, db_index=True)

    author = models.ForeignKey(StaffMember, on_delete=models.PROTECT, related_name="authored_documents")
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="documents")

    status = models.CharField(
        max_length=16,
        choices=ReviewStatus.choices,
        default=ReviewStatus.DRAFT,
        db_index=True,
    )

    content = models.JSONField(default=dict, blank=True)

    submitted_at = models.DateTimeField(null=True, blank=True, db_index=True)
    reviewed_at = models.DateTimeField(null=True, blank=True, db_index=True)
    reviewed_by = models.ForeignKey(
        StaffMember,
        on_delete=models.PROTECT,
        related_name="reviewed_documents",
        null=True,
        blank=True,
    )
    reviewer_comments = models.TextField(blank=True, default="")

    class Meta:
        db_table = "clinical_docs_reviewable_document"
        indexes = [
            models.Index(fields=["status", "updated_at"]),
            models.Index(fields=["author", "updated_at"]),
            models.Index(fields=["patient", "updated_at"]),
            models.Index(fields=["kind", "status"]),
        ]

    def __str__(self) -> str:
        return f"{self.kind} {self.status} ({self.patient_id})"
