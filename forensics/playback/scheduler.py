"""
Forensic Playback — Tick Scheduling
=====================================
Explicit, cancellable repeating tasks for the playback loop.

A Scheduler owns two things:
- repeating tasks (schedule_repeating → ScheduledTask with cancel())
- the monotonic clock those tasks run on (monotonic())

Implementations:
- ThreadingScheduler: production, one daemon thread per running task,
  fixed-rate deadlines from time.monotonic(), no busy polling
- ManualScheduler: deterministic test scheduler, time only moves when
  the test advances it
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol

from forensics.time.clock import MonotonicClock, SystemClock

logger = logging.getLogger("forensics.playback")


# ══════════════════════════════════════════════════════════════
# PROTOCOLS
# ══════════════════════════════════════════════════════════════

class ScheduledTask(Protocol):
    def cancel(self) -> None:
        ...  # pragma: no cover

    @property
    def cancelled(self) -> bool:
        ...  # pragma: no cover


class Scheduler(Protocol):
    def schedule_repeating(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> ScheduledTask:
        ...  # pragma: no cover

    def monotonic(self) -> float:
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# THREADING SCHEDULER (production)
# ══════════════════════════════════════════════════════════════

class _ThreadedTask:
    """A repeating callback on a daemon thread. Only one callback is ever outstanding."""

    def __init__(
        self,
        interval_seconds: float,
        callback: Callable[[], None],
        clock: MonotonicClock,
    ) -> None:
        self._interval = interval_seconds
        self._callback = callback
        self._clock = clock
        self._stopped = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            name="forensics-playback-tick",
            daemon=True,
        )
        self._thread.start()

    def _run(self) -> None:
        next_due = self._clock.monotonic() + self._interval
        while not self._stopped.wait(max(0.0, next_due - self._clock.monotonic())):
            try:
                self._callback()
            except Exception:
                logger.error("Playback tick callback failed.", exc_info=True)
            next_due += self._interval
            now = self._clock.monotonic()
            if next_due < now:
                # Behind schedule: skip the missed slots.
                missed = int((now - next_due) // self._interval) + 1
                next_due += missed * self._interval

    def cancel(self) -> None:
        self._stopped.set()

    @property
    def cancelled(self) -> bool:
        return self._stopped.is_set()


class ThreadingScheduler:
    def __init__(self, clock: Optional[MonotonicClock] = None) -> None:
        self._clock = clock or SystemClock()

    def schedule_repeating(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> _ThreadedTask:
        if interval_seconds <= 0:
            raise ValueError(f"interval must be positive, got {interval_seconds}.")
        return _ThreadedTask(interval_seconds, callback, self._clock)

    def monotonic(self) -> float:
        return self._clock.monotonic()


# ══════════════════════════════════════════════════════════════
# MANUAL SCHEDULER (tests)
# ══════════════════════════════════════════════════════════════

class _ManualTask:
    def __init__(
        self, interval_seconds: float, callback: Callable[[], None], due: float
    ) -> None:
        self.interval = interval_seconds
        self.callback = callback
        self.due = due
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler:
    """
    Deterministic scheduler: nothing fires until the test moves time.

    Usage:
        scheduler = ManualScheduler()
        controller = TimelineController(..., scheduler=scheduler)
        controller.play()
        scheduler.run_ticks(3)
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._tasks: list[_ManualTask] = []

    def schedule_repeating(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> _ManualTask:
        if interval_seconds <= 0:
            raise ValueError(f"interval must be positive, got {interval_seconds}.")
        task = _ManualTask(interval_seconds, callback, self._now + interval_seconds)
        self._tasks.append(task)
        return task

    def monotonic(self) -> float:
        return self._now

    @property
    def active_tasks(self) -> int:
        self._tasks = [t for t in self._tasks if not t.cancelled]
        return len(self._tasks)

    def advance(self, seconds: float) -> int:
        """
        Move time forward, firing every due callback in deadline order.

        Returns the number of callbacks fired.
        """
        target = self._now + seconds
        fired = 0
        while True:
            pending = [t for t in self._tasks if not t.cancelled and t.due <= target]
            if not pending:
                break
            task = min(pending, key=lambda t: t.due)
            self._now = task.due
            task.due += task.interval
            task.callback()
            fired += 1
        self._now = target
        return fired

    def run_ticks(self, count: int = 1) -> int:
        """Fire the earliest live task `count` times, moving time to each deadline."""
        fired = 0
        for _ in range(count):
            live = [t for t in self._tasks if not t.cancelled]
            if not live:
                break
            task = min(live, key=lambda t: t.due)
            self._now = task.due
            task.due += task.interval
            task.callback()
            fired += 1
        return fired
