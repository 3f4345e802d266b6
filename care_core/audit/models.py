# care_core/audit/models.py
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from care_core.common.models import BaseModel
from care_core.staff.models import StaffMember


class AuditAction(models.TextChoices):
    CREATE = "create", "Create"
    UPDATE = "update", "Update"
    DELETE = "delete", "Delete"
    ASSIGN_PATIENT = "assign_patient", "Assign patient"
    REASSIGN_PATIENT = "reassign_patient", "Reassign patient"
    UNASSIGN_PATIENT = "unassign_patient", "Unassign patient"
    SUBMIT_PLAN = "submit_plan", "Submit plan"
    APPROVE_PLAN = "approve_plan", "Approve plan"
    REVISE_PLAN = "revise_plan", "Request plan revision"
    SUBMIT_REPORT = "submit_report", "Submit report"
    REVIEW_REPORT = "review_report", "Review report"
    RATE_CAREGIVER = "rate_caregiver", "Rate caregiver"
    CHANGE_ROLE = "change_role", "Change role"


class AuditEntityType(models.TextChoices):
    STAFF_MEMBER = "StaffMember", "Staff member"
    PATIENT = "Patient", "Patient"
    ASSIGNMENT = "Assignment", "Assignment"
    THERAPY_PLAN = "TherapyPlan", "Therapy plan"
    PROGRESS_REPORT = "ProgressReport", "Progress report"
    CLINICAL_RATING = "ClinicalRating", "Clinical rating"


class AuditSeverity(models.TextChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"
    CRITICAL = "critical", "Critical"


class AuditEvent(BaseModel):
    """
    Immutable audit record: who did what to which entity.
    Append-only; nothing in the core updates or deletes rows.
    """
    action = models.CharField(max_length=32, choices=AuditAction.choices, db_index=True)
    entity_type = models.CharField(max_length=32, choices=AuditEntityType.choices, db_index=True)
    entity_id = models.UUIDField(db_index=True)

    actor = models.ForeignKey(
        StaffMember,
        on_delete=models.PROTECT,
        related_name="audit_events",
        null=True,
        blank=True,
    )

    severity = models.CharField(
        max_length=16,
        choices=AuditSeverity.choices,
        default=AuditSeverity.MEDIUM,
    )

    occurred_at = models.DateTimeField(auto_now_add=True, db_index=True)
    metadata = models.JSONField(default=dict, encoder=DjangoJSONEncoder)

    class Meta:
        db_table = "audit_audit_event"
        indexes = [
            models.Index(fields=["entity_type", "entity_id"]),
            models.Index(fields=["actor", "occurred_at"]),
            models.Index(fields=["action", "occurred_at"]),
        ]
