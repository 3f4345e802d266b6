# care_core/audit/services.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from django.db import transaction

from care_core.audit.models import AuditEvent, AuditSeverity

logger = logging.getLogger(__name__)


class AuditService:
    """
    Central audit writer (append-only).

    Writes are best-effort: a failure is logged and swallowed so it can never
    fail or roll back the operation being audited. Each write runs in its own
    savepoint so a DB error does not poison the caller's transaction.
    """

    @staticmethod
    def record(
        *,
        actor_id: UUID | None,
        action: str,
        entity_type: str,
        entity_id: UUID,
        metadata: Optional[Dict[str, Any]] = None,
        severity: str = AuditSeverity.MEDIUM,
    ) -> AuditEvent | None:
        try:
            with transaction.atomic():
                return AuditEvent.objects.create(
                    actor_id=actor_id,
                    action=action,
                    entity_type=entity_type,
                    entity_id=entity_id,
                    severity=severity,
                    metadata=metadata or {},
                )
        except Exception:
            logger.exception(
                "Failed to record audit event action=%s entity=%s:%s actor=%s",
                action,
                entity_type,
                entity_id,
                actor_id,
            )
            return None
