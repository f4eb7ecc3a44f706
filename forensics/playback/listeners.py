"""
Forensic Playback — Listener Registry
=======================================
Explicit subscriber registry with stable unsubscribe tokens.

Notification behavior:
1. Listeners are called sequentially, in subscription order
2. Each listener's exception is caught and logged
3. Notification continues with the next listener
4. A faulty listener never aborts the tick that emitted

Removal is by token id, never by function identity: the same callable
may be subscribed twice and each subscription is removed independently.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from threading import Lock
from typing import Callable, Optional

from forensics.playback.errors import SubscriptionError
from forensics.playback.models import TimelineChangeEvent, TimelineListener

logger = logging.getLogger("forensics.playback")


@dataclass
class NotifyResult:
    """Outcome of one notification round."""

    notified: int = 0
    failed: int = 0
    failures: list[dict] = field(default_factory=list)


class Subscription:
    """Handle returned by subscribe(). Idempotent to cancel."""

    def __init__(self, token: int, release: Callable[[int], bool]) -> None:
        self._token = token
        self._release: Optional[Callable[[int], bool]] = release

    @property
    def token(self) -> int:
        return self._token

    @property
    def active(self) -> bool:
        return self._release is not None

    def unsubscribe(self) -> bool:
        """Remove the listener. Returns False if it was already removed."""
        release, self._release = self._release, None
        if release is None:
            return False
        return release(self._token)

    def __call__(self) -> bool:
        return self.unsubscribe()


class ListenerRegistry:
    def __init__(self) -> None:
        self._listeners: dict[int, TimelineListener] = {}
        self._tokens = itertools.count(1)
        self._lock = Lock()

    def subscribe(self, listener: TimelineListener) -> Subscription:
        if not callable(listener):
            raise SubscriptionError(listener)
        with self._lock:
            token = next(self._tokens)
            self._listeners[token] = listener
        logger.debug(
            f"Timeline listener subscribed: "
            f"{getattr(listener, '__qualname__', listener)} (token {token})"
        )
        return Subscription(token, self._remove)

    def _remove(self, token: int) -> bool:
        with self._lock:
            return self._listeners.pop(token, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def notify(self, event: TimelineChangeEvent) -> NotifyResult:
        """
        Deliver `event` to every listener. NEVER raises.

        Listeners added or removed during delivery take effect on the
        next notification.
        """
        with self._lock:
            snapshot = list(self._listeners.items())

        result = NotifyResult()
        for token, listener in snapshot:
            name = getattr(listener, "__qualname__", str(listener))
            try:
                listener(event)
                result.notified += 1
            except Exception as exc:
                result.failed += 1
                result.failures.append(
                    {
                        "token": token,
                        "listener": name,
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                    }
                )
                logger.error(
                    f"Timeline listener failed: {name} (token {token}): {exc}",
                    exc_info=True,
                )
                # Keep going: one listener never aborts the round.
        return result
