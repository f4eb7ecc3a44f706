"""
Forensic Replay — Temporal Helpers
====================================
Pure functions for replay time arithmetic.
All functions take explicit datetime arguments — no hidden clock access.

Every timestamp crossing a replay boundary must be timezone-aware.
Naive datetimes are rejected, never guessed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterator


# ══════════════════════════════════════════════════════════════
# NORMALISATION & SERIALISATION
# ══════════════════════════════════════════════════════════════

def ensure_utc(dt: datetime) -> datetime:
    """Return `dt` converted to UTC. Raises ValueError for naive datetimes."""
    if not isinstance(dt, datetime):
        raise ValueError(f"Expected datetime, got {type(dt).__name__}.")
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        raise ValueError(
            f"Replay timestamps must be timezone-aware, got naive {dt!r}."
        )
    return dt.astimezone(timezone.utc)


def serialize_timestamp(dt: datetime) -> str:
    """
    Canonical string form of a timestamp.

    UTC, microsecond precision, 'Z' suffix. Two datetimes share a
    serialized form iff they denote the same instant.
    """
    utc = ensure_utc(dt)
    return utc.isoformat(timespec="microseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp (a trailing 'Z' is accepted).

    Raises ValueError for malformed or naive values.
    """
    if not isinstance(value, str) or not value:
        raise ValueError(f"Timestamp must be a non-empty string, got {value!r}.")
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


# ══════════════════════════════════════════════════════════════
# TIME WINDOW (closed interval [start, end])
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TimeWindow:
    """
    A closed time interval [start, end].

    Invariant: start <= end (enforced at construction).
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        ensure_utc(self.start)
        ensure_utc(self.end)
        if self.start > self.end:
            raise ValueError(
                f"TimeWindow start ({self.start}) must be <= end ({self.end})."
            )

    def contains(self, dt: datetime) -> bool:
        """Check if datetime falls within window (inclusive)."""
        return self.start <= dt <= self.end

    def duration(self) -> timedelta:
        """Return the duration of the window."""
        return self.end - self.start

    def fraction_of(self, dt: datetime) -> float:
        """Position of `dt` inside the window as 0..1 (0 for an empty window)."""
        total = self.duration()
        if total <= timedelta(0):
            return 0.0
        return (clamp_to_window(dt, self) - self.start) / total

    def at_fraction(self, fraction: float) -> datetime:
        """Linear map from [0, 1] to [start, end]; `fraction` is clamped."""
        clamped = max(0.0, min(1.0, fraction))
        return self.start + self.duration() * clamped


# ══════════════════════════════════════════════════════════════
# PURE TEMPORAL FUNCTIONS
# ══════════════════════════════════════════════════════════════

def clamp_to_window(dt: datetime, window: TimeWindow) -> datetime:
    """Clamp a datetime to within the given window."""
    if dt < window.start:
        return window.start
    if dt > window.end:
        return window.end
    return dt


def iter_steps(
    start: datetime, end: datetime, interval: timedelta
) -> Iterator[datetime]:
    """
    Yield start, start + interval, ... while <= end (inclusive).

    Raises ValueError for a non-positive interval (eagerly, at call time).
    """
    if interval <= timedelta(0):
        raise ValueError(f"Step interval must be positive, got {interval}.")
    return _steps(start, end, interval)


def _steps(start: datetime, end: datetime, interval: timedelta) -> Iterator[datetime]:
    current = start
    while current <= end:
        yield current
        current = current + interval
