"""
Forensic Replay — Replay Context
==================================
Thread-local read-only flag for dataset assembly.

While a ReplayContext is active on a thread:
- is_replay_active() returns True
- audit store records refuse to be written (hard enforcement)

Loading history must never be able to change history.
"""

import logging
import threading

logger = logging.getLogger("forensics.replay")

_replay_state = threading.local()


def is_replay_active() -> bool:
    """Check if replay mode is currently active on this thread."""
    return getattr(_replay_state, "depth", 0) > 0


class ReplayContext:
    """
    Context manager that activates read-only replay mode.

    Nesting is allowed; the flag clears when the outermost block exits.

    Usage:
        with ReplayContext():
            source = load_replay_source(start, end)
    """

    def __enter__(self):
        depth = getattr(_replay_state, "depth", 0)
        _replay_state.depth = depth + 1
        if depth == 0:
            logger.debug("Replay context entered — audit store writes blocked.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _replay_state.depth = max(0, getattr(_replay_state, "depth", 1) - 1)
        if _replay_state.depth == 0:
            logger.debug("Replay context exited.")
        return False
