"""
Forensic Playback — Errors
============================
Playback never raises for expected edge cases: out-of-range seeks are
clamped, listener faults are logged. These cover caller mistakes only.
"""


class PlaybackError(Exception):
    """Base error for playback operations."""
    pass


class SubscriptionError(PlaybackError):
    """Listener registration was given something that cannot be called."""

    def __init__(self, listener):
        self.listener = listener
        super().__init__(
            f"Timeline listener must be callable, got {type(listener).__name__}."
        )
