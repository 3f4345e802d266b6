# care_core/clinical_docs/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from care_core.clinical_docs.models import ReviewableDocument


def find_document(*, document_id: UUID) -> ReviewableDocument | None:
    return (
        ReviewableDocument.objects.select_related("author", "patient", "reviewed_by")
        .filter(id=document_id)
        .first()
    )


def documents_for(
    *,
    patient_id: UUID | None = None,
    author_id: UUID | None = None,
    kind: str | None = None,
    status: str | None = None,
) -> QuerySet[ReviewableDocument]:
    qs = ReviewableDocument.objects.select_related("author", "patient")
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if author_id:
        qs = qs.filter(author_id=author_id)
    if kind:
        qs = qs.filter(kind=kind)
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("-updated_at")
