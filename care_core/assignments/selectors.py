# care_core/assignments/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from care_core.assignments.models import Assignment


def assignment_history(*, patient_id: UUID) -> QuerySet[Assignment]:
    """
    Full history for a patient, oldest first.
    """
    return (
        Assignment.objects.filter(patient_id=patient_id)
        .select_related("caregiver", "supervisor", "previous_caregiver")
        .order_by("sequence")
    )


def current_assignment(*, patient_id: UUID) -> Assignment | None:
    return Assignment.objects.filter(patient_id=patient_id).order_by("-sequence").first()
