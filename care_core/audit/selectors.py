# care_core/audit/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from care_core.audit.models import AuditEvent


def list_audit_events(
    *,
    entity_type: str | None = None,
    entity_id: UUID | None = None,
    action: str | None = None,
    actor_id: UUID | None = None,
) -> QuerySet[AuditEvent]:
    qs = AuditEvent.objects.all()

    if entity_type:
        qs = qs.filter(entity_type=entity_type)
    if entity_id:
        qs = qs.filter(entity_id=entity_id)
    if action:
        qs = qs.filter(action=action)
    if actor_id is not None:
        qs = qs.filter(actor_id=actor_id)

    return qs.order_by("-occurred_at")
