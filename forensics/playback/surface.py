"""
Forensic Playback — Control Surface Contract
==============================================
What a presentational timeline bar receives and may call.

The surface is purely reactive: it renders a PlaybackViewState and
invokes exactly five callbacks. It holds no playback logic of its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Union

from forensics.playback.controller import TimelineController
from forensics.playback.models import PlaybackSpeed


@dataclass(frozen=True)
class PlaybackViewState:
    current_time: datetime
    start_time: datetime
    end_time: datetime
    is_playing: bool
    speed: PlaybackSpeed


class PlaybackSurface:
    """The five callbacks of the control surface, bound to a controller."""

    def __init__(
        self,
        controller: TimelineController,
        step: Optional[timedelta] = None,
    ) -> None:
        self._controller = controller
        self._step = step

    def view_state(self) -> PlaybackViewState:
        window = self._controller.time_range
        return PlaybackViewState(
            current_time=self._controller.current_time,
            start_time=window.start,
            end_time=window.end,
            is_playing=self._controller.is_playing,
            speed=self._controller.speed,
        )

    def on_play_pause(self) -> None:
        self._controller.toggle()

    def on_seek(self, time: datetime) -> None:
        self._controller.set_time(time)

    def on_speed_change(self, speed: Union[PlaybackSpeed, float]) -> None:
        self._controller.set_speed(speed)

    def on_step_forward(self) -> None:
        self._controller.step_forward(self._step)

    def on_step_backward(self) -> None:
        self._controller.step_backward(self._step)
