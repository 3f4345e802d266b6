# care_core/common/exceptions.py
"""
Error taxonomy for the workflow engine.

Every service failure is one of these kinds. They subclass DRF's APIException so
a request layer can hand them to DRF's exception handling untouched: status_code
carries the HTTP equivalent and default_code identifies the kind.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import APIException, PermissionDenied


class CareError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request failed."
    default_code = "error"

    def __init__(self, detail=None, code=None):
        super().__init__(detail=detail or self.default_detail, code=code or self.default_code)


class NotFoundError(CareError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class InvalidInputError(CareError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "invalid_input"


class InvalidCaregiverError(InvalidInputError):
    default_detail = "Invalid caregiver."
    default_code = "invalid_caregiver"


class UnauthorizedError(PermissionDenied):
    """
    Actor is authenticated upstream but lacks the role for this action.
    """
    default_detail = "You do not have permission to perform this action."
    default_code = "unauthorized"


class ConflictError(CareError):
    """
    409 Conflict. Use when business rules block an action.
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict."
    default_code = "conflict"


class AlreadyAssignedError(ConflictError):
    default_detail = "Patient is already assigned to this caregiver."
    default_code = "already_assigned"


class InvalidTransitionError(ConflictError):
    default_detail = "Transition not allowed from the current status."
    default_code = "invalid_transition"


class ConcurrentModificationError(ConflictError):
    default_detail = "Record was modified concurrently; reload and retry."
    default_code = "concurrent_modification"


class NoCandidatesError(CareError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "No available caregivers found."
    default_code = "no_candidates"


class NoSuitableMatchError(CareError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "No suitable caregiver found for this patient."
    default_code = "no_suitable_match"
