# care_core/patients/services.py
from __future__ import annotations

from uuid import UUID

from django.db import transaction
from django.utils.timezone import now

from care_core.common.exceptions import ConcurrentModificationError
from care_core.patients.models import CaseStatus, Patient


class PatientService:
    @staticmethod
    @transaction.atomic
    def create_patient(
        *,
        full_name: str,
        mrn: str = "",
        diagnoses: list[str] | None = None,
        tags: list[str] | None = None,
        case_status: str = CaseStatus.ACTIVE,
    ) -> Patient:
        return Patient.objects.create(
            full_name=full_name,
            mrn=mrn or "",
            diagnoses=list(diagnoses or []),
            tags=list(tags or []),
            case_status=case_status,
        )

    @staticmethod
    def move_assignment_pointer(
        *,
        patient: Patient,
        caregiver_id: UUID | None,
        supervisor_id: UUID | None,
    ) -> int:
        """
        Compare-and-swap on assignment_version. Returns the new version.

        Raises ConcurrentModificationError when another writer moved the pointer
        since `patient` was loaded; the caller's transaction then rolls back.
        """
        expected = patient.assignment_version
        updated = Patient.objects.filter(
            id=patient.id,
            assignment_version=expected,
        ).update(
            assigned_caregiver_id=caregiver_id,
            supervisor_id=supervisor_id,
            assignment_version=expected + 1,
            updated_at=now(),
        )
        if updated != 1:
            raise ConcurrentModificationError(
                "Patient assignment changed while this request was in flight."
            )

        patient.assigned_caregiver_id = caregiver_id
        patient.supervisor_id = supervisor_id
        patient.assignment_version = expected + 1
        return patient.assignment_version
