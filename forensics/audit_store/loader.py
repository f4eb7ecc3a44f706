"""
Forensic Audit Store — Replay Source Loader
=============================================
Reads the persisted history into a ReplayDataSource.

Everything up to the window end is loaded: state at the window start
depends on zone mutations and positions recorded before it. Rows are
ordered by timestamp, then by arrival (primary key), so equal-timestamp
records keep the order they were written in.

Loading happens inside a ReplayContext: the store cannot be written
while a dataset is being assembled.
"""

from __future__ import annotations

import logging
from datetime import datetime

from forensics.audit_store.models import (
    EntityPositionRecord,
    GeoEventRecord,
    ZoneAuditRecord,
)
from forensics.replay.context import ReplayContext
from forensics.replay.errors import ReplayError
from forensics.replay.source import ReplayDataSource
from forensics.time.temporal import ensure_utc

logger = logging.getLogger("forensics.audit_store")


def load_replay_source(start: datetime, end: datetime) -> ReplayDataSource:
    """Build the closed replay dataset for [start, end]."""
    start = ensure_utc(start)
    end = ensure_utc(end)
    if start > end:
        raise ReplayError(
            f"Replay window start {start.isoformat()} is after end {end.isoformat()}."
        )

    with ReplayContext():
        positions = tuple(
            record.to_record()
            for record in EntityPositionRecord.objects.filter(
                recorded_at__lte=end
            ).order_by("recorded_at", "id")
        )
        zone_entries = tuple(
            record.to_record()
            for record in ZoneAuditRecord.objects.filter(
                occurred_at__lte=end
            ).order_by("occurred_at", "id")
        )
        events = tuple(
            record.to_record()
            for record in GeoEventRecord.objects.filter(
                occurred_at__lte=end
            ).order_by("occurred_at", "id")
        )

    logger.info(
        f"Replay source loaded for [{start.isoformat()}, {end.isoformat()}]: "
        f"{len(positions)} positions, {len(zone_entries)} zone entries, "
        f"{len(events)} events"
    )
    return ReplayDataSource(
        entity_history=positions,
        zone_audit_log=zone_entries,
        event_log=events,
        start_time=start,
        end_time=end,
    )
