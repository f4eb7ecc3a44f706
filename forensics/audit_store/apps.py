"""
Forensic Audit Store - App Configuration
=========================================
Append-only history backing replay datasets.
"""

from django.apps import AppConfig


class ForensicAuditStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "forensics.audit_store"
    label = "forensics_audit_store"
    verbose_name = "Forensic Audit Store"
