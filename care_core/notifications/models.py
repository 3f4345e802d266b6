# care_core/notifications/models.py
from __future__ import annotations

from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import RegexValidator
from django.db import models
from django.utils import timezone

from care_core.common.models import BaseModel
from care_core.staff.models import StaffMember

TITLE_MAX_LENGTH = 100
MESSAGE_MAX_LENGTH = 500


class NotificationType(models.TextChoices):
    PLAN_SUBMITTED = "plan_submitted", "Plan submitted"
    PLAN_APPROVED = "plan_approved", "Plan approved"
    PLAN_NEEDS_REVISION = "plan_needs_revision", "Plan needs revision"
    SESSION_REMINDER = "session_reminder", "Session reminder"
    REPORT_DUE = "report_due", "Report due"
    REPORT_SUBMITTED = "report_submitted", "Report submitted"
    REPORT_APPROVED = "report_approved", "Report approved"
    REPORT_NEEDS_REVISION = "report_needs_revision", "Report needs revision"
    ASSIGNMENT_CHANGED = "assignment_changed", "Assignment changed"
    RATING_RECEIVED = "rating_received", "Rating received"
    SYSTEM_ALERT = "system_alert", "System alert"


class NotificationPriority(models.TextChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"
    URGENT = "urgent", "Urgent"


class Notification(BaseModel):
    """
    In-app alert for one recipient. Created only as a side effect of workflow
    transitions; mutated only by mark-read; removed by the cleanup sweep.
    """
    recipient = models.ForeignKey(
        StaffMember,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    sender = models.ForeignKey(
        StaffMember,
        on_delete=models.SET_NULL,
        related_name="sent_notifications",
        null=True,
        blank=True,
    )

    type = models.CharField(max_length=32, choices=NotificationType.choices, db_index=True)
    title = models.CharField(max_length=TITLE_MAX_LENGTH)
    message = models.CharField(max_length=MESSAGE_MAX_LENGTH)

    priority = models.CharField(
        max_length=16,
        choices=NotificationPriority.choices,
        default=NotificationPriority.MEDIUM,
    )

    # {"entity_type": ..., "entity_id": ..., "data": {...}}
    payload = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    action_url = models.CharField(
        max_length=255,
        blank=True,
        default="",
        validators=[RegexValidator(r"^/[a-zA-Z0-9\-_/?=&]*$", "Invalid action URL format")],
    )

    is_read = models.BooleanField(default=False, db_index=True)
    read_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True, db_index=True)

    class Meta:
        db_table = "notifications_notification"
        indexes = [
            models.Index(fields=["recipient", "is_read", "created_at"]),
            models.Index(fields=["type", "created_at"]),
        ]

    def mark_read(self) -> None:
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
