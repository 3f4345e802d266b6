# care_core/staff/admin.py
from django.contrib import admin

from care_core.staff.models import StaffMember


@admin.register(StaffMember)
class StaffMemberAdmin(admin.ModelAdmin):
    list_display = ("full_name", "role", "years_experience", "weekly_slots", "is_active", "created_at")
    list_filter = ("role", "is_active")
    search_fields = ("full_name", "email")
