# care_core/patients/admin.py
from django.contrib import admin

from care_core.patients.models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("full_name", "mrn", "case_status", "assigned_caregiver", "supervisor", "created_at")
    list_filter = ("case_status",)
    search_fields = ("full_name", "mrn")
    readonly_fields = ("assigned_caregiver", "supervisor", "assignment_version")
