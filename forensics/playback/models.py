"""
Forensic Playback — Models
============================
Playback state machine values, the closed speed domain and the
change notification emitted to subscribers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Union


class PlaybackState(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


class PlaybackSpeed(float, Enum):
    """Closed set of playback multipliers. Free-form floats are rejected."""

    HALF = 0.5
    X1 = 1.0
    X2 = 2.0
    X5 = 5.0
    X10 = 10.0

    @classmethod
    def coerce(cls, value: Union["PlaybackSpeed", float, int, str]) -> "PlaybackSpeed":
        """Accept an enum member or its numeric value; anything else is ValueError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(float(value))
        except (TypeError, ValueError):
            allowed = ", ".join(f"{m.value:g}" for m in cls)
            raise ValueError(
                f"Playback speed {value!r} is not one of: {allowed}."
            ) from None


@dataclass(frozen=True)
class TimelineChangeEvent:
    current_time: datetime
    previous_time: datetime
    playback_state: PlaybackState
    speed: PlaybackSpeed

    @property
    def is_playing(self) -> bool:
        return self.playback_state == PlaybackState.PLAYING


TimelineListener = Callable[[TimelineChangeEvent], None]
