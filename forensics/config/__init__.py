"""
Forensic Replay Config — Replay Settings
==========================================
Tunables for the replay engine and playback controller.

Values come from Django settings (settings.FORENSIC_REPLAY) when
Django is configured, otherwise from the defaults below. Settings are
read at call time so test overrides take effect immediately.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

DEFAULT_FRAME_CACHE_SIZE = 100
DEFAULT_TICK_INTERVAL_MS = 100
DEFAULT_STEP_MS = 60_000
DEFAULT_SPEED = 1


@dataclass(frozen=True)
class ReplaySettings:
    """Resolved replay configuration."""

    frame_cache_size: int = DEFAULT_FRAME_CACHE_SIZE
    tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS
    step_ms: int = DEFAULT_STEP_MS
    default_speed: float = DEFAULT_SPEED

    def __post_init__(self) -> None:
        if self.frame_cache_size < 1:
            raise ValueError("FRAME_CACHE_SIZE must be >= 1.")
        if self.tick_interval_ms <= 0:
            raise ValueError("TICK_INTERVAL_MS must be > 0.")
        if self.step_ms <= 0:
            raise ValueError("STEP_MS must be > 0.")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ReplaySettings":
        return cls(
            frame_cache_size=int(
                values.get("FRAME_CACHE_SIZE", DEFAULT_FRAME_CACHE_SIZE)
            ),
            tick_interval_ms=int(
                values.get("TICK_INTERVAL_MS", DEFAULT_TICK_INTERVAL_MS)
            ),
            step_ms=int(values.get("STEP_MS", DEFAULT_STEP_MS)),
            default_speed=values.get("DEFAULT_SPEED", DEFAULT_SPEED),
        )


def get_replay_settings() -> ReplaySettings:
    """Resolve settings from Django when configured, else defaults."""
    from django.conf import ENVIRONMENT_VARIABLE, settings

    if not settings.configured and not os.environ.get(ENVIRONMENT_VARIABLE):
        return ReplaySettings()
    return ReplaySettings.from_mapping(getattr(settings, "FORENSIC_REPLAY", {}))


__all__ = [
    "ReplaySettings",
    "get_replay_settings",
    "DEFAULT_FRAME_CACHE_SIZE",
    "DEFAULT_TICK_INTERVAL_MS",
    "DEFAULT_STEP_MS",
    "DEFAULT_SPEED",
]
