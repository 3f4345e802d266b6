import uuid

import pytest

from care_core.assignments.models import Assignment, AssignmentMethod
from care_core.assignments.selectors import assignment_history, current_assignment
from care_core.assignments.services import DEFAULT_MANUAL_RATIONALE, AssignmentService
from care_core.audit.models import AuditAction, AuditEvent
from care_core.common.exceptions import (
    AlreadyAssignedError,
    ConcurrentModificationError,
    InvalidCaregiverError,
    NotFoundError,
    UnauthorizedError,
)
from care_core.patients.models import Patient
from care_core.staff.identity import Actor
from care_core.staff.models import StaffRole
from care_core.staff.services import StaffService


pytestmark = pytest.mark.django_db


def test_first_assignment_is_assign_then_reassign(patient, caregiver, caregiver2, supervisor, supervisor_actor):
    first = AssignmentService.manual_assign(
        patient_id=patient.id,
        caregiver_id=caregiver.id,
        actor=supervisor_actor,
        reason="Matches pain specialty",
    )
    assert first.method == AssignmentMethod.MANUAL
    assert first.rationale == "Matches pain specialty"
    assert first.previous_caregiver_id is None
    assert first.score is None
    assert first.supervisor_id == supervisor.id

    second = AssignmentService.manual_assign(
        patient_id=patient.id,
        caregiver_id=caregiver2.id,
        actor=supervisor_actor,
    )
    assert second.previous_caregiver_id == caregiver.id
    assert second.rationale == DEFAULT_MANUAL_RATIONALE

    actions = {e.entity_id: e.action for e in AuditEvent.objects.all()}
    assert actions[first.id] == AuditAction.ASSIGN_PATIENT
    assert actions[second.id] == AuditAction.REASSIGN_PATIENT

    patient.refresh_from_db()
    assert patient.assigned_caregiver_id == caregiver2.id
    assert current_assignment(patient_id=patient.id).id == second.id


def test_admin_can_assign(patient, caregiver, admin):
    assignment = AssignmentService.manual_assign(
        patient_id=patient.id,
        caregiver_id=caregiver.id,
        actor=Actor.for_staff(admin),
    )
    assert assignment.supervisor_id == admin.id


def test_same_caregiver_is_rejected_without_new_record(patient, caregiver, supervisor_actor):
    AssignmentService.manual_assign(patient_id=patient.id, caregiver_id=caregiver.id, actor=supervisor_actor)

    with pytest.raises(AlreadyAssignedError):
        AssignmentService.manual_assign(patient_id=patient.id, caregiver_id=caregiver.id, actor=supervisor_actor)

    assert assignment_history(patient_id=patient.id).count() == 1


def test_unknown_patient(caregiver, supervisor_actor):
    with pytest.raises(NotFoundError):
        AssignmentService.manual_assign(patient_id=uuid.uuid4(), caregiver_id=caregiver.id, actor=supervisor_actor)


@pytest.mark.parametrize("kind", ["missing", "supervisor", "inactive"])
def test_invalid_caregiver(kind, patient, make_staff, supervisor, supervisor_actor):
    if kind == "missing":
        caregiver_id = uuid.uuid4()
    elif kind == "supervisor":
        caregiver_id = supervisor.id
    else:
        staff = make_staff(role=StaffRole.CAREGIVER)
        StaffService.deactivate(staff=staff)
        caregiver_id = staff.id

    with pytest.raises(InvalidCaregiverError):
        AssignmentService.manual_assign(patient_id=patient.id, caregiver_id=caregiver_id, actor=supervisor_actor)
    assert Assignment.objects.count() == 0


def test_caregiver_cannot_assign(patient, caregiver, caregiver2, caregiver_actor):
    with pytest.raises(UnauthorizedError):
        AssignmentService.manual_assign(patient_id=patient.id, caregiver_id=caregiver2.id, actor=caregiver_actor)


def test_authorizer_is_checked_against_the_store(patient, caregiver, supervisor, supervisor_actor):
    StaffService.deactivate(staff=supervisor)
    with pytest.raises(UnauthorizedError):
        AssignmentService.manual_assign(patient_id=patient.id, caregiver_id=caregiver.id, actor=supervisor_actor)

    ghost = Actor(staff_id=uuid.uuid4(), role=StaffRole.SUPERVISOR)
    with pytest.raises(UnauthorizedError):
        AssignmentService.manual_assign(patient_id=patient.id, caregiver_id=caregiver.id, actor=ghost)


def test_stale_patient_loses_the_race(patient, caregiver, caregiver2, supervisor_actor, monkeypatch):
    stale = Patient.objects.get(id=patient.id)
    AssignmentService.manual_assign(patient_id=patient.id, caregiver_id=caregiver.id, actor=supervisor_actor)

    # second writer read the patient before the first one landed
    monkeypatch.setattr(AssignmentService, "_get_patient", staticmethod(lambda patient_id: stale))
    with pytest.raises(ConcurrentModificationError):
        AssignmentService.manual_assign(patient_id=patient.id, caregiver_id=caregiver2.id, actor=supervisor_actor)

    patient.refresh_from_db()
    assert patient.assigned_caregiver_id == caregiver.id
    assert assignment_history(patient_id=patient.id).count() == 1


def test_assignment_rows_are_immutable(patient, caregiver, supervisor_actor):
    assignment = AssignmentService.manual_assign(
        patient_id=patient.id, caregiver_id=caregiver.id, actor=supervisor_actor
    )
    assignment.rationale = "rewritten"
    with pytest.raises(ValueError):
        assignment.save()
