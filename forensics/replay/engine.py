"""
Forensic Replay — Reconstruction Engine
=========================================
Owns a loaded dataset and a bounded frame cache.

Engine doctrine:
- READ the dataset only — never write to it
- Same dataset + same timestamp → structurally identical frame
- No dataset loaded is NOT an error: None / [] and a warning
- Loading a dataset replaces the previous one and drops every cached frame

Dataset = truth archive.
Engine = time machine.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from forensics.caching import CacheStats, FifoCache
from forensics.config import get_replay_settings
from forensics.policy.mode import ModeContext
from forensics.replay.frame import ReplayFrame
from forensics.replay.reconstruction import reconstruct_frame
from forensics.replay.source import ReplayDataSource
from forensics.time.temporal import (
    TimeWindow,
    iter_steps,
    serialize_timestamp,
)

logger = logging.getLogger("forensics.replay")


class ReplayEngine:
    """
    Time-indexed state reconstruction.

    `mode` is the explicit activation context of the hosting session;
    the engine only reads it for diagnostics. Gating happens at
    activation, before an engine is ever handed out.
    """

    def __init__(
        self,
        cache_size: Optional[int] = None,
        mode: Optional[ModeContext] = None,
    ) -> None:
        if cache_size is None:
            cache_size = get_replay_settings().frame_cache_size
        self._source: Optional[ReplayDataSource] = None
        self._cache: FifoCache[ReplayFrame] = FifoCache(max_size=cache_size)
        self._mode = mode

    # ══════════════════════════════════════════════════════════
    # DATASET
    # ══════════════════════════════════════════════════════════

    def load_data(self, source: ReplayDataSource) -> None:
        """Replace the held dataset wholesale and clear the cache."""
        self._source = source
        self._cache.clear()

        counts = source.summary()
        mode_name = self._mode.policy.mode.value if self._mode else "unbound"
        logger.info(
            f"Loaded replay data ({mode_name}): "
            f"{counts['positions']} positions, "
            f"{counts['zone_entries']} zone entries, "
            f"{counts['events']} events"
        )

    @property
    def is_loaded(self) -> bool:
        return self._source is not None

    @property
    def mode(self) -> Optional[ModeContext]:
        return self._mode

    def get_time_range(self) -> Optional[TimeWindow]:
        """Bounds of the loaded dataset, or None if unloaded."""
        if self._source is None:
            return None
        return self._source.window

    # ══════════════════════════════════════════════════════════
    # FRAMES
    # ══════════════════════════════════════════════════════════

    def get_frame_at(self, timestamp: datetime) -> Optional[ReplayFrame]:
        """Frame at `timestamp`, from cache when possible."""
        if self._source is None:
            logger.warning("get_frame_at called with no data source loaded.")
            return None

        key = serialize_timestamp(timestamp)

        cached = self._cache.get(key)
        if cached is not None:
            return cached

        frame = reconstruct_frame(self._source, timestamp)
        self._cache.put(key, frame)
        return frame

    def get_frames_in_range(
        self,
        start: datetime,
        end: datetime,
        interval: timedelta,
    ) -> list[ReplayFrame]:
        """
        Frames at fixed `interval` steps from start to end inclusive.

        The full list is materialised. Raises ValueError for a
        non-positive interval.
        """
        steps = iter_steps(start, end, interval)
        if self._source is None:
            logger.warning(
                "get_frames_in_range called with no data source loaded."
            )
            return []

        frames = []
        for at in steps:
            frame = self.get_frame_at(at)
            if frame is not None:
                frames.append(frame)
        return frames

    # ══════════════════════════════════════════════════════════
    # CACHE
    # ══════════════════════════════════════════════════════════

    def clear_cache(self) -> None:
        """Drop cached frames. The dataset is untouched."""
        self._cache.clear()

    def is_cached(self, timestamp: datetime) -> bool:
        return serialize_timestamp(timestamp) in self._cache

    @property
    def cache_stats(self) -> CacheStats:
        return self._cache.stats

    @property
    def cache_size(self) -> int:
        return self._cache.size
