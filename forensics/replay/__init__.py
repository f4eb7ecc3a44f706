"""
Forensic Replay Engine — Public API
=====================================
Dataset = truth archive.
Replay Engine = time machine.
Time machine must never change history.
"""

from forensics.replay.engine import ReplayEngine
from forensics.replay.errors import (
    ReplayError,
    ReplaySourceError,
    ReplayWriteForbiddenError,
)
from forensics.replay.frame import ReplayFrame
from forensics.replay.source import ReplayDataSource

__all__ = [
    "ReplayEngine",
    "ReplayError",
    "ReplaySourceError",
    "ReplayWriteForbiddenError",
    "ReplayFrame",
    "ReplayDataSource",
]
