# care_core/assignments/integrations.py
from __future__ import annotations

from care_core.assignments.models import Assignment
from care_core.notifications.services import NotificationService


def notify_assignment_changed(*, assignment: Assignment):
    """
    Caller-side follow-up to auto/manual assign: tell the new caregiver.
    Unassignment rows have nobody to tell here (unassign notifies the displaced caregiver itself).
    """
    if assignment.caregiver_id is None:
        return None

    action = "reassigned" if assignment.previous_caregiver_id else "assigned"
    return NotificationService.assignment_changed(
        caregiver_id=assignment.caregiver_id,
        patient=assignment.patient,
        action=action,
        sender_id=assignment.supervisor_id,
    )
