"""
Forensic Audit Store
====================
Append-only persistence for entity positions, zone audit entries and
geo events. Imports are deferred to avoid circular dependencies with
Django app loading.
"""
