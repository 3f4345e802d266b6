# care_core/audit/admin.py
from django.contrib import admin

from care_core.audit.models import AuditEvent


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = (
        "action",
        "entity_type",
        "entity_id",
        "actor",
        "severity",
        "occurred_at",
    )
    list_filter = ("action", "entity_type", "severity")
    search_fields = ("action", "entity_type", "entity_id")
    readonly_fields = ("occurred_at",)
    ordering = ("-occurred_at",)
