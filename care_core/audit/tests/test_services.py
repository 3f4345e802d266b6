import uuid
from unittest import mock

import pytest
from django.db import DatabaseError

from care_core.audit.models import AuditAction, AuditEntityType, AuditEvent, AuditSeverity
from care_core.audit.selectors import list_audit_events
from care_core.audit.services import AuditService


pytestmark = pytest.mark.django_db


def test_record_persists_event_with_json_safe_metadata(supervisor):
    entity_id = uuid.uuid4()
    event = AuditService.record(
        actor_id=supervisor.id,
        action=AuditAction.CHANGE_ROLE,
        entity_type=AuditEntityType.STAFF_MEMBER,
        entity_id=entity_id,
        metadata={"before": {"role": "caregiver"}, "after": {"role": "supervisor"}, "target": entity_id},
        severity=AuditSeverity.HIGH,
    )

    event.refresh_from_db()
    assert event.actor_id == supervisor.id
    assert event.entity_id == entity_id
    assert event.severity == AuditSeverity.HIGH
    assert event.occurred_at is not None
    assert event.metadata["target"] == str(entity_id)
    assert event.metadata["after"] == {"role": "supervisor"}


def test_record_without_actor():
    event = AuditService.record(
        actor_id=None,
        action=AuditAction.DELETE,
        entity_type=AuditEntityType.PATIENT,
        entity_id=uuid.uuid4(),
    )
    assert event.actor_id is None
    assert event.metadata == {}
    assert event.severity == AuditSeverity.MEDIUM


def test_record_failure_is_swallowed_and_logged(supervisor, caplog):
    with mock.patch.object(AuditEvent.objects, "create", side_effect=DatabaseError("read-only replica")):
        result = AuditService.record(
            actor_id=supervisor.id,
            action=AuditAction.UPDATE,
            entity_type=AuditEntityType.PATIENT,
            entity_id=uuid.uuid4(),
        )

    assert result is None
    assert "Failed to record audit event action=update" in caplog.text
    assert caplog.records[-1].levelname == "ERROR"


def test_list_audit_events_filters(supervisor, admin):
    patient_id, plan_id = uuid.uuid4(), uuid.uuid4()
    AuditService.record(
        actor_id=supervisor.id, action=AuditAction.UPDATE, entity_type=AuditEntityType.PATIENT, entity_id=patient_id
    )
    AuditService.record(
        actor_id=admin.id, action=AuditAction.DELETE, entity_type=AuditEntityType.PATIENT, entity_id=patient_id
    )
    AuditService.record(
        actor_id=supervisor.id,
        action=AuditAction.APPROVE_PLAN,
        entity_type=AuditEntityType.THERAPY_PLAN,
        entity_id=plan_id,
    )

    assert list_audit_events().count() == 3
    assert list_audit_events(entity_type=AuditEntityType.PATIENT, entity_id=patient_id).count() == 2
    assert list_audit_events(actor_id=admin.id).get().action == AuditAction.DELETE
    assert list_audit_events(action=AuditAction.APPROVE_PLAN).get().entity_id == plan_id
