# care_core/notifications/services.py
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from care_core.common.exceptions import NotFoundError
from care_core.notifications.models import (
    MESSAGE_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Notification,
    NotificationPriority,
    NotificationType,
)

logger = logging.getLogger(__name__)


def _preview(text: str | None) -> str:
    limit = getattr(settings, "CARE_NOTIFICATION_MESSAGE_PREVIEW", 100)
    text = text or ""
    return text[:limit] + ("..." if len(text) > limit else "")


def _payload(entity_type: str, entity_id: Any, **data) -> dict:
    return {
        "entity_type": entity_type,
        "entity_id": str(entity_id) if entity_id is not None else None,
        "data": data,
    }


class NotificationService:
    """
    Notification dispatcher.

    `notify` never raises on store failure: it logs and returns None, so a lost
    notification can never make a successful assignment or review look failed.
    The typed helpers are message templates around `notify`.
    """

    @staticmethod
    def notify(
        *,
        recipient_id: UUID,
        type: str,
        title: str,
        message: str,
        priority: str = NotificationPriority.MEDIUM,
        payload: dict | None = None,
        sender_id: UUID | None = None,
        action_url: str = "",
        expires_at: datetime | None = None,
    ) -> Notification | None:
        try:
            with transaction.atomic():
                return Notification.objects.create(
                    recipient_id=recipient_id,
                    sender_id=sender_id,
                    type=type,
                    title=title[:TITLE_MAX_LENGTH],
                    message=message[:MESSAGE_MAX_LENGTH],
                    priority=priority,
                    payload=payload or {},
                    action_url=action_url or "",
                    expires_at=expires_at,
                )
        except Exception:
            logger.exception(
                "Failed to create notification type=%s recipient=%s",
                type,
                recipient_id,
            )
            return None

    # -------------------------
    # Assignment
    # -------------------------
    @staticmethod
    def assignment_changed(
        *,
        caregiver_id: UUID,
        patient,
        action: str = "assigned",
        sender_id: UUID | None = None,
    ) -> Notification | None:
        return NotificationService.notify(
            recipient_id=caregiver_id,
            sender_id=sender_id,
            type=NotificationType.ASSIGNMENT_CHANGED,
            title=f"Patient {'Assigned' if action == 'assigned' else 'Reassigned'}",
            message=f"You have been {action} to patient: {patient.full_name}",
            payload=_payload("Patient", patient.id, patient_name=patient.full_name, action=action),
            action_url=f"/patients/{patient.id}",
        )

    # -------------------------
    # Therapy plans
    # -------------------------
    @staticmethod
    def plan_submitted(*, document, supervisor_id: UUID) -> Notification | None:
        author = document.author
        return NotificationService.notify(
            recipient_id=supervisor_id,
            sender_id=author.id,
            type=NotificationType.PLAN_SUBMITTED,
            title="New Therapy Plan Submitted",
            message=f"{author.full_name} has submitted a therapy plan for {document.patient.full_name}",
            payload=_payload(
                "TherapyPlan",
                document.id,
                patient_name=document.patient.full_name,
                caregiver_name=author.full_name,
            ),
            action_url=f"/therapy-plans/{document.id}",
        )

    @staticmethod
    def plan_approved(*, document, reviewer) -> Notification | None:
        return NotificationService.notify(
            recipient_id=document.author_id,
            sender_id=reviewer.id,
            type=NotificationType.PLAN_APPROVED,
            title="Therapy Plan Approved",
            message=(
                f"Your therapy plan for {document.patient.full_name} "
                f"has been approved by {reviewer.full_name}"
            ),
            payload=_payload(
                "TherapyPlan",
                document.id,
                patient_name=document.patient.full_name,
                supervisor_name=reviewer.full_name,
            ),
            action_url=f"/therapy-plans/{document.id}",
        )

    @staticmethod
    def plan_needs_revision(*, document, reviewer, comments: str) -> Notification | None:
        return NotificationService.notify(
            recipient_id=document.author_id,
            sender_id=reviewer.id,
            type=NotificationType.PLAN_NEEDS_REVISION,
            title="Therapy Plan Needs Revision",
            message=(
                f"Your therapy plan for {document.patient.full_name} needs revision. "
                f"Comments: {_preview(comments)}"
            ),
            priority=NotificationPriority.HIGH,
            payload=_payload(
                "TherapyPlan",
                document.id,
                patient_name=document.patient.full_name,
                supervisor_name=reviewer.full_name,
                comments=comments,
            ),
            action_url=f"/therapy-plans/{document.id}",
        )

    # -------------------------
    # Progress reports
    # -------------------------
    @staticmethod
    def report_due(*, caregiver_id: UUID, patient, session_count: int) -> Notification | None:
        expiry_days = getattr(settings, "CARE_REPORT_DUE_EXPIRY_DAYS", 7)
        return NotificationService.notify(
            recipient_id=caregiver_id,
            type=NotificationType.REPORT_DUE,
            title="Progress Report Due",
            message=f"Progress report is due for {patient.full_name} after {session_count} sessions",
            priority=NotificationPriority.HIGH,
            payload=_payload(
                "Patient",
                patient.id,
                patient_name=patient.full_name,
                session_count=session_count,
            ),
            action_url=f"/progress-reports/new?patient={patient.id}",
            expires_at=timezone.now() + timedelta(days=expiry_days),
        )

    @staticmethod
    def report_submitted(*, document, supervisor_id: UUID) -> Notification | None:
        author = document.author
        return NotificationService.notify(
            recipient_id=supervisor_id,
            sender_id=author.id,
            type=NotificationType.REPORT_SUBMITTED,
            title="Progress Report Submitted",
            message=f"{author.full_name} has submitted a progress report for {document.patient.full_name}",
            payload=_payload(
                "ProgressReport",
                document.id,
                patient_name=document.patient.full_name,
                caregiver_name=author.full_name,
            ),
            action_url=f"/progress-reports/{document.id}",
        )

    @staticmethod
    def report_reviewed(*, document, reviewer, approved: bool, comments: str | None) -> Notification | None:
        if approved:
            type_, title = NotificationType.REPORT_APPROVED, "Progress Report Approved"
            message = f"Your progress report for {document.patient.full_name} has been approved"
            priority = NotificationPriority.MEDIUM
        else:
            type_, title = NotificationType.REPORT_NEEDS_REVISION, "Progress Report Needs Revision"
            message = (
                f"Your progress report for {document.patient.full_name} needs revision. "
                f"Comments: {_preview(comments)}"
            )
            priority = NotificationPriority.HIGH

        return NotificationService.notify(
            recipient_id=document.author_id,
            sender_id=reviewer.id,
            type=type_,
            title=title,
            message=message,
            priority=priority,
            payload=_payload(
                "ProgressReport",
                document.id,
                patient_name=document.patient.full_name,
                supervisor_name=reviewer.full_name,
                comments=comments,
            ),
            action_url=f"/progress-reports/{document.id}",
        )

    # -------------------------
    # Ratings + system
    # -------------------------
    @staticmethod
    def rating_received(
        *,
        caregiver_id: UUID,
        rater,
        rating_id: UUID,
        overall_score: float,
    ) -> Notification | None:
        return NotificationService.notify(
            recipient_id=caregiver_id,
            sender_id=rater.id,
            type=NotificationType.RATING_RECEIVED,
            title="Clinical Rating Received",
            message=f"You received a clinical rating ({overall_score}/5) from {rater.full_name}",
            payload=_payload(
                "ClinicalRating",
                rating_id,
                supervisor_name=rater.full_name,
                overall_score=overall_score,
            ),
            action_url=f"/evaluations/{rating_id}",
        )

    @staticmethod
    def system_alert(
        *,
        recipient_id: UUID,
        title: str,
        message: str,
        priority: str = NotificationPriority.MEDIUM,
    ) -> Notification | None:
        return NotificationService.notify(
            recipient_id=recipient_id,
            type=NotificationType.SYSTEM_ALERT,
            title=title,
            message=message,
            priority=priority,
            payload={"entity_type": "System", "entity_id": None, "data": {"alert_type": "system"}},
        )

    # -------------------------
    # Lifecycle
    # -------------------------
    @staticmethod
    @transaction.atomic
    def mark_read(*, notification_id: UUID, recipient_id: UUID) -> Notification:
        notification = Notification.objects.filter(id=notification_id, recipient_id=recipient_id).first()
        if notification is None:
            raise NotFoundError("Notification not found.")

        if not notification.is_read:
            notification.mark_read()
            notification.save(update_fields=["is_read", "read_at", "updated_at"])
        return notification

    @staticmethod
    @transaction.atomic
    def mark_all_read(*, recipient_id: UUID) -> int:
        return Notification.objects.filter(recipient_id=recipient_id, is_read=False).update(
            is_read=True,
            read_at=timezone.now(),
            updated_at=timezone.now(),
        )

    @staticmethod
    @transaction.atomic
    def delete_old(*, days_old: int | None = None) -> int:
        """
        Cleanup sweep: read notifications older than the retention window,
        plus anything past its expiry. Returns the number of rows removed.
        """
        if days_old is None:
            days_old = getattr(settings, "CARE_NOTIFICATION_RETENTION_DAYS", 90)

        ts = timezone.now()
        cutoff = ts - timedelta(days=days_old)
        deleted, _ = Notification.objects.filter(
            Q(is_read=True, created_at__lt=cutoff) | Q(expires_at__lt=ts)
        ).delete()

        if deleted:
            logger.info("Notification cleanup removed %s rows (older than %s days)", deleted, days_old)
        return deleted
