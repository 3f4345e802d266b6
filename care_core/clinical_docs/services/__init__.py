"""
ReviewableDocument review workflow.

Implemented in:
- care_core.clinical_docs.services.lifecycle
"""

from care_core.clinical_docs.services.lifecycle import (  # noqa: F401
    create_draft,
    review,
    submit,
    update_content,
)
