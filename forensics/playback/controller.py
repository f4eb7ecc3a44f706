"""
Forensic Playback — Timeline Controller
=========================================
Controls WHAT TIME is being viewed, nothing else.

Responsibilities:
- Track the playback cursor inside [start, end]
- Play / pause / stop state machine
- Speed changes (closed speed set)
- Seeking and stepping (always clamped, never rejected)
- Emit a TimelineChangeEvent on every change

Rules:
- The controller knows nothing about frames; callers wire it to an engine
- Every mutation is serialised; ticks from a cancelled task are ignored
- A listener calling back into the controller while it is notifying
  does not mutate mid-notification: the call is queued and applied,
  in order, once the current notification round has finished
- Arguments are validated before a call is queued, so a bad re-entrant
  call fails inside the listener that made it; a queued call that still
  fails is logged and the rest of the queue keeps draining
"""

from __future__ import annotations

import functools
import logging
import threading
from collections import deque
from datetime import datetime, timedelta
from typing import Callable, Optional, Union

from forensics.config import get_replay_settings
from forensics.playback.listeners import ListenerRegistry, NotifyResult, Subscription
from forensics.playback.models import (
    PlaybackSpeed,
    PlaybackState,
    TimelineChangeEvent,
    TimelineListener,
)
from forensics.playback.scheduler import ScheduledTask, Scheduler, ThreadingScheduler
from forensics.policy.mode import ModeContext
from forensics.time.temporal import TimeWindow, clamp_to_window, ensure_utc

logger = logging.getLogger("forensics.playback")


def _serialized(method: Callable) -> Callable:
    """Run a mutator under the controller lock, deferring re-entrant calls."""

    @functools.wraps(method)
    def wrapper(self: "TimelineController", *args, **kwargs):
        with self._lock:
            if self._destroyed:
                logger.warning(
                    f"TimelineController.{method.__name__} ignored: controller destroyed."
                )
                return None
            if self._notifying:
                logger.debug(
                    f"Re-entrant {method.__name__} deferred until notification completes."
                )
                self._deferred.append(functools.partial(method, self, *args, **kwargs))
                return None
            return method(self, *args, **kwargs)

    return wrapper


class TimelineController:
    """Time navigation for a forensic replay session."""

    def __init__(
        self,
        start_time: datetime,
        end_time: datetime,
        *,
        initial_time: Optional[datetime] = None,
        tick_interval: Optional[timedelta] = None,
        speed: Union[PlaybackSpeed, float, None] = None,
        scheduler: Optional[Scheduler] = None,
        on_time_change: Optional[TimelineListener] = None,
        mode: Optional[ModeContext] = None,
    ) -> None:
        settings = get_replay_settings()

        self._window = TimeWindow(start=ensure_utc(start_time), end=ensure_utc(end_time))
        initial = ensure_utc(initial_time) if initial_time is not None else self._window.start
        self._current = clamp_to_window(initial, self._window)
        self._tick_interval = tick_interval or timedelta(
            milliseconds=settings.tick_interval_ms
        )
        if self._tick_interval <= timedelta(0):
            raise ValueError(f"tick_interval must be positive, got {self._tick_interval}.")
        self._step = timedelta(milliseconds=settings.step_ms)
        self._speed = PlaybackSpeed.coerce(
            settings.default_speed if speed is None else speed
        )
        self._state = PlaybackState.STOPPED
        self._scheduler = scheduler or ThreadingScheduler()
        self._mode = mode

        self._task: Optional[ScheduledTask] = None
        self._generation = 0
        self._last_tick_at: Optional[float] = None

        self._listeners = ListenerRegistry()
        self._lock = threading.RLock()
        self._notifying = False
        self._deferred: deque[Callable[[], None]] = deque()
        self._destroyed = False
        self._last_notify: Optional[NotifyResult] = None

        if on_time_change is not None:
            self._listeners.subscribe(on_time_change)

    # ══════════════════════════════════════════════════════════
    # READ ACCESS
    # ══════════════════════════════════════════════════════════

    @property
    def current_time(self) -> datetime:
        return self._current

    @property
    def time_range(self) -> TimeWindow:
        return self._window

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def speed(self) -> PlaybackSpeed:
        return self._speed

    @property
    def is_playing(self) -> bool:
        return self._state == PlaybackState.PLAYING

    @property
    def tick_interval(self) -> timedelta:
        return self._tick_interval

    @property
    def step(self) -> timedelta:
        return self._step

    @property
    def mode(self) -> Optional[ModeContext]:
        return self._mode

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def last_notify(self) -> Optional[NotifyResult]:
        return self._last_notify

    def time_percent(self) -> float:
        """Cursor position as 0..1 (0 for a zero-length range)."""
        return self._window.fraction_of(self._current)

    # ══════════════════════════════════════════════════════════
    # SEEKING
    # ══════════════════════════════════════════════════════════

    def set_time(self, time: datetime) -> None:
        """Seek. Out-of-range times are clamped. Always emits."""
        self._seek(ensure_utc(time))

    @_serialized
    def _seek(self, time: datetime) -> None:
        previous = self._current
        self._current = clamp_to_window(time, self._window)
        self._emit(previous)

    def set_time_by_percent(self, percent: float) -> None:
        self.set_time(self._window.at_fraction(percent))

    def step_forward(self, duration: Optional[timedelta] = None) -> None:
        self._step_by(self._step_duration(duration))

    def step_backward(self, duration: Optional[timedelta] = None) -> None:
        self._step_by(-self._step_duration(duration))

    def _step_duration(self, duration: Optional[timedelta]) -> timedelta:
        if duration is None:
            return self._step
        if not isinstance(duration, timedelta):
            raise TypeError(
                f"Step duration must be a timedelta, got {type(duration).__name__}."
            )
        return duration

    @_serialized
    def _step_by(self, delta: timedelta) -> None:
        previous = self._current
        self._current = clamp_to_window(self._current + delta, self._window)
        self._emit(previous)

    # ══════════════════════════════════════════════════════════
    # STATE MACHINE
    # ══════════════════════════════════════════════════════════

    @_serialized
    def play(self) -> None:
        """Start playback; restarts from the beginning when at the end."""
        self._play()

    @_serialized
    def pause(self) -> None:
        """Pause playback. Only valid while playing; keeps the cursor."""
        self._pause()

    @_serialized
    def stop(self) -> None:
        """Stop playback. When it was playing, the cursor returns to start."""
        was_playing = self._state == PlaybackState.PLAYING
        previous_state = self._state
        previous = self._current

        self._stop_ticking()
        self._state = PlaybackState.STOPPED
        if was_playing:
            self._current = self._window.start

        logger.info("Playback stopped.")
        if previous_state != PlaybackState.STOPPED or previous != self._current:
            self._emit(previous)

    @_serialized
    def toggle(self) -> None:
        if self._state == PlaybackState.PLAYING:
            self._pause()
        else:
            self._play()

    def set_speed(self, speed: Union[PlaybackSpeed, float]) -> None:
        """
        Change the multiplier. Raises ValueError outside the closed set.
        A running tick task is cancelled and restarted at the new rate.
        """
        self._apply_speed(PlaybackSpeed.coerce(speed))

    @_serialized
    def _apply_speed(self, new_speed: PlaybackSpeed) -> None:
        if new_speed == self._speed:
            return

        self._speed = new_speed
        if self._state == PlaybackState.PLAYING:
            self._stop_ticking()
            self._start_ticking()

        logger.info(f"Playback speed set to {new_speed.value:g}x.")
        self._emit(self._current)

    # ══════════════════════════════════════════════════════════
    # SUBSCRIPTIONS & LIFECYCLE
    # ══════════════════════════════════════════════════════════

    def subscribe(self, listener: TimelineListener) -> Subscription:
        return self._listeners.subscribe(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def destroy(self) -> None:
        """Stop ticking and drop all listeners. Safe to call repeatedly."""
        with self._lock:
            if self._destroyed:
                return
            self._stop_ticking()
            self._listeners.clear()
            self._deferred.clear()
            self._destroyed = True
        logger.info("Timeline controller destroyed.")

    # ══════════════════════════════════════════════════════════
    # TICKING
    # ══════════════════════════════════════════════════════════

    def _play(self) -> None:
        if self._state == PlaybackState.PLAYING:
            return

        previous = self._current
        if self._current >= self._window.end:
            self._current = self._window.start

        self._state = PlaybackState.PLAYING
        self._start_ticking()
        logger.info(f"Playback started at speed {self._speed.value:g}x.")
        self._emit(previous)

    def _pause(self) -> None:
        if self._state != PlaybackState.PLAYING:
            return
        self._state = PlaybackState.PAUSED
        self._stop_ticking()
        logger.info("Playback paused.")
        self._emit(self._current)

    def _start_ticking(self) -> None:
        self._generation += 1
        generation = self._generation
        self._last_tick_at = self._scheduler.monotonic()
        self._task = self._scheduler.schedule_repeating(
            self._tick_interval.total_seconds(),
            lambda: self._on_tick(generation),
        )

    def _stop_ticking(self) -> None:
        # Bumping the generation orphans any callback already in flight.
        self._generation += 1
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._last_tick_at = None

    def _on_tick(self, generation: int) -> None:
        with self._lock:
            if (
                self._destroyed
                or generation != self._generation
                or self._state != PlaybackState.PLAYING
            ):
                return
            if self._notifying:
                self._deferred.append(lambda: self._on_tick(generation))
                return
            self._tick()

    def _tick(self) -> None:
        """Advance by elapsed real time × speed; auto-pause at the end."""
        previous = self._current

        now = self._scheduler.monotonic()
        elapsed = timedelta(seconds=max(0.0, now - self._last_tick_at))
        self._last_tick_at = now
        advance = elapsed * self._speed.value

        if self._current + advance >= self._window.end:
            self._current = self._window.end
            self._state = PlaybackState.PAUSED
            self._stop_ticking()
            logger.info("Playback reached end of range — paused.")
        else:
            self._current = self._current + advance

        self._emit(previous)

    # ══════════════════════════════════════════════════════════
    # NOTIFICATION
    # ══════════════════════════════════════════════════════════

    def _emit(self, previous: datetime) -> None:
        event = TimelineChangeEvent(
            current_time=self._current,
            previous_time=previous,
            playback_state=self._state,
            speed=self._speed,
        )
        self._notifying = True
        try:
            self._last_notify = self._listeners.notify(event)
        finally:
            self._notifying = False
        self._drain_deferred()

    def _drain_deferred(self) -> None:
        while self._deferred and not self._notifying and not self._destroyed:
            operation = self._deferred.popleft()
            try:
                operation()
            except Exception as exc:
                logger.error(
                    f"Deferred timeline operation failed: {exc}",
                    exc_info=True,
                )
                # Continue with the remaining queued operations.
