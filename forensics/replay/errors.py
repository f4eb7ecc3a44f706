"""
Forensic Replay — Errors
==========================
Error types for the replay layer.

A missing dataset is NOT an error: queries return None / [] and log.
These exceptions are reserved for contract violations by the caller.
"""


class ReplayError(Exception):
    """Base error for all replay operations."""
    pass


class ReplaySourceError(ReplayError):
    """An ingestion bundle could not be decoded into a dataset."""

    def __init__(self, section: str, index, detail: str):
        self.section = section
        self.index = index
        self.detail = detail
        location = section if index is None else f"{section}[{index}]"
        super().__init__(
            f"Invalid replay source — {location}: {detail}"
        )


class ReplayWriteForbiddenError(ReplayError, PermissionError):
    """Attempt to mutate or delete a historical record."""

    def __init__(self, message: str = None):
        super().__init__(
            message or "Forensic replay is read-only. "
            "History cannot be edited."
        )
