"""
Forensic Replay — Explicit Clock Protocol
===========================================
Doctrine: NO datetime.now() inside replay logic.
Historical time is always passed in explicitly. Only the playback tick
loop needs real elapsed time, and it receives it through an injectable
monotonic clock.
"""

from __future__ import annotations

import time
from typing import Protocol


class MonotonicClock(Protocol):
    """Injectable monotonic time source (seconds, arbitrary origin)."""

    def monotonic(self) -> float:
        ...  # pragma: no cover


class SystemClock:
    """Production clock — the process monotonic timer."""

    def monotonic(self) -> float:
        return time.monotonic()
