# care_core/assignments/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from django.db import transaction

from care_core.assignments.models import Assignment, AssignmentMethod
from care_core.assignments.scoring import CaregiverScore, build_rationale, score_caregiver
from care_core.audit.models import AuditAction, AuditEntityType
from care_core.audit.services import AuditService
from care_core.common.exceptions import (
    AlreadyAssignedError,
    ConflictError,
    InvalidCaregiverError,
    NoCandidatesError,
    NoSuitableMatchError,
    NotFoundError,
    UnauthorizedError,
)
from care_core.notifications.services import NotificationService
from care_core.patients.models import Patient
from care_core.patients.selectors import active_caseload_count
from care_core.patients.services import PatientService
from care_core.staff.identity import Actor, require_privileged
from care_core.staff.models import StaffMember, StaffRole
from care_core.staff.selectors import active_caregivers, find_staff

logger = logging.getLogger(__name__)

DEFAULT_MANUAL_RATIONALE = "Manual assignment by supervisor"


@dataclass(frozen=True)
class AutoAssignResult:
    assignment: Assignment
    score: float
    rationale: str


class AssignmentService:
    """
    Assignment write-model operations.

    Notes:
    - Every operation appends one Assignment row; rows are never updated.
    - The patient pointer moves via compare-and-swap on Patient.assignment_version,
      so two racing writers cannot both land (the loser gets ConcurrentModificationError
      and its Assignment insert rolls back with the transaction).
    - Audit/notification side effects run after the primary write and never raise.
    - Notifying the new caregiver after auto/manual assign is the caller's job
      (see care_core.assignments.integrations).
    """

    # -------------------------
    # Internal helpers
    # -------------------------
    @staticmethod
    def _get_patient(patient_id: UUID) -> Patient:
        patient = Patient.objects.filter(id=patient_id).first()
        if patient is None:
            raise NotFoundError("Patient not found.")
        return patient

    @staticmethod
    def _get_authorizer(actor: Actor, message: str) -> StaffMember:
        """
        Load the acting supervisor/admin from the store. The role on `actor` alone
        is not trusted: the record must exist, be active and be privileged.
        """
        require_privileged(actor, message)
        authorizer = find_staff(staff_id=actor.staff_id)
        if authorizer is None or not authorizer.is_active or not authorizer.is_privileged:
            raise UnauthorizedError(message)
        return authorizer

    @staticmethod
    def _append(
        *,
        patient: Patient,
        caregiver_id: UUID | None,
        supervisor_id: UUID | None,
        method: str,
        rationale: str,
        previous_caregiver_id: UUID | None,
        score: float | None = None,
        score_breakdown: dict | None = None,
        keep_patient_supervisor: bool = False,
    ) -> Assignment:
        """
        Move the pointer (CAS) and append the matching history row.
        Must run inside the caller's transaction.
        """
        sequence = PatientService.move_assignment_pointer(
            patient=patient,
            caregiver_id=caregiver_id,
            supervisor_id=patient.supervisor_id if keep_patient_supervisor else supervisor_id,
        )
        return Assignment.objects.create(
            patient=patient,
            caregiver_id=caregiver_id,
            supervisor_id=supervisor_id,
            previous_caregiver_id=previous_caregiver_id,
            method=method,
            rationale=rationale,
            score=score,
            score_breakdown=score_breakdown,
            sequence=sequence,
        )

    @staticmethod
    def rank_candidates(patient: Patient) -> list[CaregiverScore]:
        """
        Score every active caregiver against the patient, best first.
        Stable: equal totals keep input order.
        """
        scored = [
            score_caregiver(patient, caregiver, active_caseload_count(caregiver_id=caregiver.id))
            for caregiver in active_caregivers()
        ]
        return sorted(scored, key=lambda s: s.total, reverse=True)

    # -------------------------
    # Auto-assign
    # -------------------------
    @staticmethod
    @transaction.atomic
    def auto_assign(*, patient_id: UUID, actor: Actor) -> AutoAssignResult:
        authorizer = AssignmentService._get_authorizer(actor, "Only supervisors and admins can assign patients.")
        patient = AssignmentService._get_patient(patient_id)

        ranked = AssignmentService.rank_candidates(patient)
        if not ranked:
            raise NoCandidatesError()

        best = ranked[0]
        if best.total <= 0:
            raise NoSuitableMatchError()

        rationale = build_rationale(best, patient)
        previous_caregiver_id = patient.assigned_caregiver_id

        assignment = AssignmentService._append(
            patient=patient,
            caregiver_id=best.caregiver.id,
            supervisor_id=authorizer.id,
            method=AssignmentMethod.AUTO,
            rationale=rationale,
            previous_caregiver_id=previous_caregiver_id,
            score=best.total,
            score_breakdown=best.breakdown.as_dict(),
        )

        logger.info(
            "Auto-assigned patient=%s caregiver=%s score=%.2f",
            patient.id,
            best.caregiver.id,
            best.total,
        )

        AuditService.record(
            actor_id=authorizer.id,
            action=AuditAction.ASSIGN_PATIENT,
            entity_type=AuditEntityType.ASSIGNMENT,
            entity_id=assignment.id,
            metadata={
                "patient_id": patient.id,
                "caregiver_id": best.caregiver.id,
                "previous_caregiver_id": previous_caregiver_id,
                "method": AssignmentMethod.AUTO,
                "score": best.total,
            },
        )

        return AutoAssignResult(assignment=assignment, score=best.total, rationale=rationale)

    # -------------------------
    # Manual assign / reassign
    # -------------------------
    @staticmethod
    @transaction.atomic
    def manual_assign(
        *,
        patient_id: UUID,
        caregiver_id: UUID,
        actor: Actor,
        reason: str | None = None,
    ) -> Assignment:
        patient = AssignmentService._get_patient(patient_id)

        caregiver = find_staff(staff_id=caregiver_id)
        if caregiver is None or caregiver.role != StaffRole.CAREGIVER or not caregiver.is_active:
            raise InvalidCaregiverError("Invalid caregiver.")

        authorizer = AssignmentService._get_authorizer(actor, "Only supervisors and admins can assign patients.")

        # no-op rejection: would only add a meaningless history row
        if patient.assigned_caregiver_id == caregiver.id:
            raise AlreadyAssignedError()

        previous_caregiver_id = patient.assigned_caregiver_id

        assignment = AssignmentService._append(
            patient=patient,
            caregiver_id=caregiver.id,
            supervisor_id=authorizer.id,
            method=AssignmentMethod.MANUAL,
            rationale=reason or DEFAULT_MANUAL_RATIONALE,
            previous_caregiver_id=previous_caregiver_id,
        )

        action = AuditAction.REASSIGN_PATIENT if previous_caregiver_id else AuditAction.ASSIGN_PATIENT
        logger.info(
            "%s patient=%s caregiver=%s previous=%s",
            action,
            patient.id,
            caregiver.id,
            previous_caregiver_id,
        )

        AuditService.record(
            actor_id=authorizer.id,
            action=action,
            entity_type=AuditEntityType.ASSIGNMENT,
            entity_id=assignment.id,
            metadata={
                "patient_id": patient.id,
                "caregiver_id": caregiver.id,
                "previous_caregiver_id": previous_caregiver_id,
                "method": AssignmentMethod.MANUAL,
                "reason": reason,
            },
        )
        return assignment

    # -------------------------
    # Unassign
    # -------------------------
    @staticmethod
    @transaction.atomic
    def unassign(
        *,
        assignment_id: UUID,
        actor: Actor,
        reason: str | None = None,
    ) -> Assignment:
        authorizer = AssignmentService._get_authorizer(actor, "Only supervisors and admins can unassign patients.")

        source = Assignment.objects.select_related("patient", "caregiver").filter(id=assignment_id).first()
        if source is None:
            raise NotFoundError("Assignment not found.")

        patient = source.patient
        displaced: StaffMember | None = source.caregiver

        # only the assignment that is still current can be undone
        if displaced is None or patient.assigned_caregiver_id != displaced.id:
            raise ConflictError("Assignment is no longer the patient's current assignment.")

        unassignment = AssignmentService._append(
            patient=patient,
            caregiver_id=None,
            supervisor_id=authorizer.id,
            method=AssignmentMethod.MANUAL,
            rationale=f"Unassigned by supervisor: {reason or 'No reason provided'}",
            previous_caregiver_id=displaced.id,
            keep_patient_supervisor=True,
        )

        logger.info("Unassigned patient=%s caregiver=%s", patient.id, displaced.id)

        AuditService.record(
            actor_id=authorizer.id,
            action=AuditAction.UNASSIGN_PATIENT,
            entity_type=AuditEntityType.ASSIGNMENT,
            entity_id=unassignment.id,
            metadata={
                "patient_id": patient.id,
                "previous_caregiver_id": displaced.id,
                "source_assignment_id": source.id,
                "reason": reason,
            },
        )
        NotificationService.system_alert(
            recipient_id=displaced.id,
            title="Patient Unassigned",
            message=f"Patient {patient.full_name} has been unassigned from your caseload",
        )
        return unassignment
