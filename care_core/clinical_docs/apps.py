# care_core/clinical_docs/apps.py
from django.apps import AppConfig


class ClinicalDocsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "care_core.clinical_docs"
