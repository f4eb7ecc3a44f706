"""
Forensic Replay — State Reconstruction
========================================
Pure functions: (dataset, timestamp) -> state.

Reconstruction doctrine:
- No interpolation between samples
- No inference, no smoothing
- Samples and entries strictly after T are invisible
- Zone state is always DERIVED by folding the audit log, never read
- Cell annotations are recomputed from scratch on every call
- Equal timestamps keep input (arrival) order
"""

from __future__ import annotations

import logging
from datetime import datetime

from forensics.replay.frame import ReplayFrame
from forensics.replay.source import ReplayDataSource
from forensics.spatial.models import (
    EntityPosition,
    GeoEvent,
    GridCellState,
    Zone,
    ZoneAction,
    ZoneAuditEntry,
    derive_risk_level,
)
from forensics.time.temporal import ensure_utc

logger = logging.getLogger("forensics.replay")


# ══════════════════════════════════════════════════════════════
# ENTITIES
# ══════════════════════════════════════════════════════════════

def entities_at(
    history: tuple[EntityPosition, ...], at: datetime
) -> tuple[EntityPosition, ...]:
    """
    Latest sample per entity with timestamp <= at.

    Entities with no sample at or before `at` are absent. Ordered by
    first appearance of the entity in `history`.
    """
    latest: dict[str, EntityPosition] = {}
    for position in history:
        if position.timestamp > at:
            continue
        current = latest.get(position.entity_id)
        if current is None or current.timestamp < position.timestamp:
            latest[position.entity_id] = position
    return tuple(latest.values())


# ══════════════════════════════════════════════════════════════
# ZONES
# ══════════════════════════════════════════════════════════════

def fold_zone_entry(zones: dict[str, Zone], entry: ZoneAuditEntry) -> None:
    """Apply one audit entry to the working zone map."""
    existing = zones.get(entry.zone_id)

    if entry.action == ZoneAction.CREATED:
        if entry.after is not None:
            zones[entry.zone_id] = Zone.from_snapshot(entry.zone_id, entry.after)

    elif entry.action in (ZoneAction.UPDATED, ZoneAction.TAGGED):
        if existing is not None and entry.after is not None:
            zones[entry.zone_id] = existing.merged(entry.after)

    elif entry.action == ZoneAction.DEACTIVATED:
        if existing is not None:
            zones[entry.zone_id] = existing.merged({"active": False})


def zones_at(
    audit_log: tuple[ZoneAuditEntry, ...], at: datetime
) -> tuple[Zone, ...]:
    """Replay every audit entry <= at and return the zones still active."""
    relevant = [entry for entry in audit_log if entry.timestamp <= at]
    # sorted() is stable: equal timestamps keep arrival order.
    relevant = sorted(relevant, key=lambda entry: entry.timestamp)

    zones: dict[str, Zone] = {}
    for entry in relevant:
        fold_zone_entry(zones, entry)

    return tuple(zone for zone in zones.values() if zone.active)


# ══════════════════════════════════════════════════════════════
# GRID CELLS
# ══════════════════════════════════════════════════════════════

def cell_states_from_zones(zones: tuple[Zone, ...]) -> tuple[GridCellState, ...]:
    """
    Accumulate zone membership per cell and derive each cell's risk.

    Tags are unioned in first-seen order. Risk is computed once, from
    the complete accumulated tag set.
    """
    accumulated: dict[str, dict[str, list[str]]] = {}

    for zone in zones:
        for cell_index in zone.cells:
            record = accumulated.setdefault(
                cell_index, {"zone_ids": [], "zone_names": [], "tags": []}
            )
            record["zone_ids"].append(zone.id)
            record["zone_names"].append(zone.name)
            for tag in zone.tags:
                if tag not in record["tags"]:
                    record["tags"].append(tag)

    return tuple(
        GridCellState(
            cell_index=cell_index,
            zone_ids=tuple(record["zone_ids"]),
            zone_names=tuple(record["zone_names"]),
            tags=tuple(record["tags"]),
            risk_level=derive_risk_level(record["tags"]),
            in_zone=True,
        )
        for cell_index, record in accumulated.items()
    )


# ══════════════════════════════════════════════════════════════
# EVENTS
# ══════════════════════════════════════════════════════════════

def events_at(
    event_log: tuple[GeoEvent, ...], at: datetime
) -> tuple[GeoEvent, ...]:
    """Every logged event with timestamp <= at, in log order."""
    return tuple(event for event in event_log if event.timestamp <= at)


# ══════════════════════════════════════════════════════════════
# FRAME
# ══════════════════════════════════════════════════════════════

def reconstruct_frame(source: ReplayDataSource, at: datetime) -> ReplayFrame:
    """Build the complete frame for `at` from the dataset."""
    at = ensure_utc(at)
    zones = zones_at(source.zone_audit_log, at)
    frame = ReplayFrame(
        timestamp=at,
        entities=entities_at(source.entity_history, at),
        zones=zones,
        cell_states=cell_states_from_zones(zones),
        events=events_at(source.event_log, at),
    )
    logger.debug(
        f"Frame reconstructed at {frame.key}: "
        f"{len(frame.entities)} entities, {len(frame.zones)} zones, "
        f"{len(frame.cell_states)} cells, {len(frame.events)} events"
    )
    return frame
