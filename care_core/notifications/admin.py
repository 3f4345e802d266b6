# care_core/notifications/admin.py
from django.contrib import admin

from care_core.notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("title", "type", "recipient", "priority", "is_read", "created_at")
    list_filter = ("type", "priority", "is_read")
    search_fields = ("title", "message")
    ordering = ("-created_at",)
