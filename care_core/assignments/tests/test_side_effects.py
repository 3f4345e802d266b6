from unittest import mock

import pytest
from django.db import DatabaseError

from care_core.assignments.integrations import notify_assignment_changed
from care_core.assignments.services import AssignmentService
from care_core.audit.models import AuditEvent
from care_core.notifications.models import Notification, NotificationType


pytestmark = pytest.mark.django_db


def test_audit_failure_does_not_fail_assignment(patient, caregiver, supervisor_actor, caplog):
    with mock.patch.object(AuditEvent.objects, "create", side_effect=DatabaseError("audit table locked")):
        assignment = AssignmentService.manual_assign(
            patient_id=patient.id, caregiver_id=caregiver.id, actor=supervisor_actor
        )

    patient.refresh_from_db()
    assert patient.assigned_caregiver_id == caregiver.id
    assert assignment.pk is not None
    assert AuditEvent.objects.count() == 0
    assert "Failed to record audit event" in caplog.text


def test_notification_failure_does_not_fail_unassign(patient, caregiver, supervisor_actor, caplog):
    to_x = AssignmentService.manual_assign(patient_id=patient.id, caregiver_id=caregiver.id, actor=supervisor_actor)

    with mock.patch.object(Notification.objects, "create", side_effect=DatabaseError("disk full")):
        removed = AssignmentService.unassign(assignment_id=to_x.id, actor=supervisor_actor)

    patient.refresh_from_db()
    assert patient.assigned_caregiver_id is None
    assert removed.is_unassignment
    assert Notification.objects.count() == 0
    assert "Failed to create notification" in caplog.text

    # the audit entry written in the same transaction survived the failed notification
    assert AuditEvent.objects.filter(entity_id=removed.id).exists()


def test_notify_assignment_changed_tells_new_caregiver(patient, caregiver, caregiver2, supervisor, supervisor_actor):
    first = AssignmentService.manual_assign(patient_id=patient.id, caregiver_id=caregiver.id, actor=supervisor_actor)
    n = notify_assignment_changed(assignment=first)
    assert n.recipient_id == caregiver.id
    assert n.sender_id == supervisor.id
    assert n.type == NotificationType.ASSIGNMENT_CHANGED
    assert n.title == "Patient Assigned"
    assert n.message == "You have been assigned to patient: Pat Patient"
    assert n.action_url == f"/patients/{patient.id}"

    second = AssignmentService.manual_assign(patient_id=patient.id, caregiver_id=caregiver2.id, actor=supervisor_actor)
    n = notify_assignment_changed(assignment=second)
    assert n.recipient_id == caregiver2.id
    assert n.title == "Patient Reassigned"
    assert n.payload["data"]["action"] == "reassigned"


def test_notify_assignment_changed_skips_unassignment(patient, caregiver, supervisor_actor):
    to_x = AssignmentService.manual_assign(patient_id=patient.id, caregiver_id=caregiver.id, actor=supervisor_actor)
    removed = AssignmentService.unassign(assignment_id=to_x.id, actor=supervisor_actor)

    assert notify_assignment_changed(assignment=removed) is None
