# care_core/assignments/admin.py
from django.contrib import admin

from care_core.assignments.models import Assignment


@admin.register(Assignment)
class AssignmentAdmin(admin.ModelAdmin):
    list_display = ("patient", "caregiver", "previous_caregiver", "supervisor", "method", "score", "sequence", "created_at")
    list_filter = ("method",)
    search_fields = ("patient__full_name", "caregiver__full_name", "rationale")
    ordering = ("-created_at",)

    def has_change_permission(self, request, obj=None):
        return False
