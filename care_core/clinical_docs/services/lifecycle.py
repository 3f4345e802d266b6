# care_core/clinical_docs/services/lifecycle.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction
from django.utils.timezone import now

from care_core.audit.models import AuditAction, AuditEntityType
from care_core.audit.services import AuditService
from care_core.clinical_docs.models import DocumentKind, ReviewableDocument, ReviewStatus
from care_core.clinical_docs.selectors import find_document
from care_core.common.exceptions import (
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
    UnauthorizedError,
)
from care_core.notifications.services import NotificationService
from care_core.patients.selectors import find_patient
from care_core.staff.identity import Actor, require_privileged
from care_core.staff.models import StaffMember
from care_core.staff.selectors import find_staff

logger = logging.getLogger(__name__)

EDITABLE_STATUSES = frozenset({ReviewStatus.DRAFT, ReviewStatus.NEEDS_REVISION})
SUBMITTABLE_STATUSES = EDITABLE_STATUSES
REVIEW_DECISIONS = frozenset({ReviewStatus.APPROVED, ReviewStatus.NEEDS_REVISION})

_ENTITY_TYPES = {
    DocumentKind.PLAN: AuditEntityType.THERAPY_PLAN,
    DocumentKind.REPORT: AuditEntityType.PROGRESS_REPORT,
}


def _get_document(document_id: UUID) -> ReviewableDocument:
    doc = find_document(document_id=document_id)
    if doc is None:
        raise NotFoundError("Document not found.")
    return doc


def _get_staff(actor: Actor) -> StaffMember:
    staff = find_staff(staff_id=actor.staff_id)
    if staff is None or not staff.is_active:
        raise UnauthorizedError("Actor is not an active staff member.")
    return staff


def _require_author_or_privileged(doc: ReviewableDocument, actor: Actor) -> None:
    if actor.staff_id != doc.author_id and not actor.is_privileged:
        raise UnauthorizedError("Only the author or a supervisor can change this document.")


def _transition(doc: ReviewableDocument, *, expected: frozenset, **changes) -> ReviewableDocument:
    """
    Conditional write: lands only if the status is still one of `expected`.
    No lock is held; a concurrent transition that won first makes this one fail.
    """
    changes.setdefault("updated_at", now())
    updated = ReviewableDocument.objects.filter(id=doc.id, status__in=list(expected)).update(**changes)
    if updated != 1:
        raise InvalidTransitionError("Document status changed concurrently; reload and retry.")

    for field, value in changes.items():
        setattr(doc, field, value)
    return doc


@transaction.atomic
def create_draft(
    *,
    kind: str,
    patient_id: UUID,
    actor: Actor,
    content: dict | None = None,
) -> ReviewableDocument:
    if kind not in DocumentKind.values:
        raise InvalidInputError(f"Unknown document kind: {kind!r}.")
    if content is not None and not isinstance(content, dict):
        raise InvalidInputError("Document content must be an object.")

    author = _get_staff(actor)
    patient = find_patient(patient_id=patient_id)
    if patient is None:
        raise NotFoundError("Patient not found.")

    doc = ReviewableDocument.objects.create(
        kind=kind,
        author=author,
        patient=patient,
        status=ReviewStatus.DRAFT,
        content=content or {},
    )

    AuditService.record(
        actor_id=author.id,
        action=AuditAction.CREATE,
        entity_type=_ENTITY_TYPES[doc.kind],
        entity_id=doc.id,
        metadata={"patient_id": patient.id, "status": doc.status},
    )
    return doc


@transaction.atomic
def update_content(
    *,
    document_id: UUID,
    actor: Actor,
    content: dict,
) -> ReviewableDocument:
    """
    Edit a draft, or rework a document sent back with needs_revision.
    """
    if not isinstance(content, dict):
        raise InvalidInputError("Document content must be an object.")

    doc = _get_document(document_id)
    _require_author_or_privileged(doc, actor)

    if doc.status not in EDITABLE_STATUSES:
        raise InvalidTransitionError(f"Only DRAFT or NEEDS_REVISION can be edited (current={doc.status}).")

    doc = _transition(doc, expected=EDITABLE_STATUSES, content=content)

    AuditService.record(
        actor_id=actor.staff_id,
        action=AuditAction.UPDATE,
        entity_type=_ENTITY_TYPES[doc.kind],
        entity_id=doc.id,
        metadata={"status": doc.status, "updated_fields": sorted(content.keys())},
    )
    return doc


@transaction.atomic
def submit(*, document_id: UUID, actor: Actor) -> ReviewableDocument:
    """
    DRAFT/NEEDS_REVISION -> SUBMITTED. Stamps submitted_at and clears the
    previous review round. Notifies the patient's supervisor.
    """
    doc = _get_document(document_id)
    _require_author_or_privileged(doc, actor)

    if doc.status not in SUBMITTABLE_STATUSES:
        raise InvalidTransitionError(
            f"Only DRAFT or NEEDS_REVISION can be submitted (current={doc.status})."
        )

    previous_status = doc.status
    doc = _transition(
        doc,
        expected=SUBMITTABLE_STATUSES,
        status=ReviewStatus.SUBMITTED,
        submitted_at=now(),
        reviewed_at=None,
        reviewed_by_id=None,
        reviewer_comments="",
    )
    logger.info("Document submitted id=%s kind=%s author=%s", doc.id, doc.kind, doc.author_id)

    is_plan = doc.kind == DocumentKind.PLAN
    AuditService.record(
        actor_id=actor.staff_id,
        action=AuditAction.SUBMIT_PLAN if is_plan else AuditAction.SUBMIT_REPORT,
        entity_type=_ENTITY_TYPES[doc.kind],
        entity_id=doc.id,
        metadata={"before": {"status": previous_status}, "after": {"status": doc.status}},
    )

    supervisor_id = doc.patient.supervisor_id
    if supervisor_id is None:
        logger.debug("No supervisor on patient=%s; skipping submit notification", doc.patient_id)
    elif is_plan:
        NotificationService.plan_submitted(document=doc, supervisor_id=supervisor_id)
    else:
        NotificationService.report_submitted(document=doc, supervisor_id=supervisor_id)

    return doc


@transaction.atomic
def review(
    *,
    document_id: UUID,
    actor: Actor,
    decision: str,
    comments: str | None = None,
) -> ReviewableDocument:
    """
    SUBMITTED -> APPROVED | NEEDS_REVISION.
    Comments are required for NEEDS_REVISION and optional for APPROVED.
    """
    require_privileged(actor, "Only supervisors and admins can review documents.")
    reviewer = _get_staff(actor)

    doc = _get_document(document_id)
    if doc.status != ReviewStatus.SUBMITTED:
        raise InvalidTransitionError(f"Only SUBMITTED can be reviewed (current={doc.status}).")

    if decision not in REVIEW_DECISIONS:
        raise InvalidInputError("Decision must be 'approved' or 'needs_revision'.")

    comments = (comments or "").strip()
    if decision == ReviewStatus.NEEDS_REVISION and not comments:
        raise InvalidInputError("Comments are required when requesting a revision.")

    doc = _transition(
        doc,
        expected=frozenset({ReviewStatus.SUBMITTED}),
        status=decision,
        reviewed_at=now(),
        reviewed_by_id=reviewer.id,
        reviewer_comments=comments,
    )
    logger.info("Document reviewed id=%s decision=%s reviewer=%s", doc.id, decision, reviewer.id)

    approved = decision == ReviewStatus.APPROVED
    if doc.kind == DocumentKind.PLAN:
        action = AuditAction.APPROVE_PLAN if approved else AuditAction.REVISE_PLAN
    else:
        action = AuditAction.REVIEW_REPORT

    AuditService.record(
        actor_id=reviewer.id,
        action=action,
        entity_type=_ENTITY_TYPES[doc.kind],
        entity_id=doc.id,
        metadata={
            "before": {"status": ReviewStatus.SUBMITTED},
            "after": {"status": doc.status},
            "reason": comments or None,
        },
    )

    if doc.kind == DocumentKind.REPORT:
        NotificationService.report_reviewed(document=doc, reviewer=reviewer, approved=approved, comments=comments)
    elif approved:
        NotificationService.plan_approved(document=doc, reviewer=reviewer)
    else:
        NotificationService.plan_needs_revision(document=doc, reviewer=reviewer, comments=comments)

    return doc
