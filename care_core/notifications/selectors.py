# care_core/notifications/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from care_core.notifications.models import Notification


def notifications_for(
    *,
    recipient_id: UUID,
    unread_only: bool = False,
    type: str | None = None,
) -> QuerySet[Notification]:
    qs = Notification.objects.filter(recipient_id=recipient_id)
    if unread_only:
        qs = qs.filter(is_read=False)
    if type:
        qs = qs.filter(type=type)
    return qs.select_related("sender").order_by("-created_at")


def unread_count(*, recipient_id: UUID) -> int:
    return Notification.objects.filter(recipient_id=recipient_id, is_read=False).count()
