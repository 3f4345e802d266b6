# care_core/patients/selectors.py
from __future__ import annotations

from uuid import UUID

from care_core.patients.models import CaseStatus, Patient


def find_patient(*, patient_id: UUID) -> Patient | None:
    return Patient.objects.filter(id=patient_id).first()


def active_caseload_count(*, caregiver_id: UUID) -> int:
    """
    Live count of active-status patients currently pointing at this caregiver.
    """
    return Patient.objects.filter(
        assigned_caregiver_id=caregiver_id,
        case_status=CaseStatus.ACTIVE,
    ).count()
