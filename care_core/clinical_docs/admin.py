# care_core/clinical_docs/admin.py
from django.contrib import admin

from care_core.clinical_docs.models import ReviewableDocument


@admin.register(ReviewableDocument)
class ReviewableDocumentAdmin(admin.ModelAdmin):
    list_display = ("kind", "status", "patient", "author", "submitted_at", "reviewed_at")
    list_filter = ("kind", "status")
    search_fields = ("patient__full_name", "author__full_name")
    readonly_fields = ("status", "submitted_at", "reviewed_at", "reviewed_by", "reviewer_comments")
