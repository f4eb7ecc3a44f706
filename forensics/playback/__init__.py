"""
Forensic Playback — Public API
================================
Timeline controller, tick scheduling and the control surface contract.
"""

from forensics.playback.controller import TimelineController
from forensics.playback.errors import PlaybackError, SubscriptionError
from forensics.playback.listeners import ListenerRegistry, NotifyResult, Subscription
from forensics.playback.models import (
    PlaybackSpeed,
    PlaybackState,
    TimelineChangeEvent,
    TimelineListener,
)
from forensics.playback.scheduler import (
    ManualScheduler,
    Scheduler,
    ThreadingScheduler,
)
from forensics.playback.surface import PlaybackSurface, PlaybackViewState

__all__ = [
    "TimelineController",
    "PlaybackError",
    "SubscriptionError",
    "ListenerRegistry",
    "NotifyResult",
    "Subscription",
    "PlaybackSpeed",
    "PlaybackState",
    "TimelineChangeEvent",
    "TimelineListener",
    "ManualScheduler",
    "Scheduler",
    "ThreadingScheduler",
    "PlaybackSurface",
    "PlaybackViewState",
]
