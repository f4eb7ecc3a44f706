"""
Forensic Replay Time — Public API
===================================
Monotonic clock protocol and temporal helpers.
Doctrine: NO datetime.now() in replay logic.
"""

from forensics.time.clock import (
    MonotonicClock,
    SystemClock,
)
from forensics.time.temporal import (
    TimeWindow,
    clamp_to_window,
    ensure_utc,
    iter_steps,
    parse_timestamp,
    serialize_timestamp,
)

__all__ = [
    "MonotonicClock",
    "SystemClock",
    "TimeWindow",
    "clamp_to_window",
    "ensure_utc",
    "iter_steps",
    "parse_timestamp",
    "serialize_timestamp",
]
