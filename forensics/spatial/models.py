"""
Forensic Replay — Spatial Records
===================================
Immutable log records and derived spatial state.

Log records (EntityPosition, ZoneAuditEntry, GeoEvent) are facts:
frozen, append-only, never edited. Zone and GridCellState are
DERIVED by replay and never stored as current truth.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from forensics.time.temporal import ensure_utc, serialize_timestamp


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class EntityKind(str, Enum):
    VEHICLE = "vehicle"
    DRIVER = "driver"
    ASSET = "asset"


class ZoneAction(str, Enum):
    """Mutation kinds recorded in a zone's audit history."""

    CREATED = "created"
    UPDATED = "updated"
    DEACTIVATED = "deactivated"
    TAGGED = "tagged"


class RiskLevel(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# ══════════════════════════════════════════════════════════════
# LOG RECORDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EntityPosition:
    """One historical location sample for a tracked entity."""

    entity_id: str
    entity_kind: EntityKind
    lat: float
    lng: float
    cell_index: str
    timestamp: datetime
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.entity_id:
            raise ValueError("EntityPosition.entity_id must be non-empty.")
        object.__setattr__(self, "entity_kind", EntityKind(self.entity_kind))
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))

    def to_payload(self) -> dict:
        return {
            "entityId": self.entity_id,
            "entityType": self.entity_kind.value,
            "lat": self.lat,
            "lng": self.lng,
            "h3Index": self.cell_index,
            "timestamp": serialize_timestamp(self.timestamp),
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class ZoneAuditEntry:
    """
    One mutation in a zone's history.

    `before` / `after` are PARTIAL zone snapshots: only the fields the
    mutation touched need to be present.
    """

    zone_id: str
    action: ZoneAction
    timestamp: datetime
    user_id: str
    before: Optional[Mapping[str, Any]] = None
    after: Optional[Mapping[str, Any]] = None

    def __post_init__(self) -> None:
        if not self.zone_id:
            raise ValueError("ZoneAuditEntry.zone_id must be non-empty.")
        object.__setattr__(self, "action", ZoneAction(self.action))
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))


@dataclass(frozen=True)
class GeoEvent:
    """A discrete occurrence, e.g. a geofence crossing."""

    id: str
    timestamp: datetime
    event_type: str = ""
    payload: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))

    def to_payload(self) -> dict:
        return {
            "id": self.id,
            "timestamp": serialize_timestamp(self.timestamp),
            "type": self.event_type,
            "payload": dict(self.payload),
        }


# ══════════════════════════════════════════════════════════════
# DERIVED STATE
# ══════════════════════════════════════════════════════════════

# Snapshot keys that are not plain Zone field names.
_SNAPSHOT_ALIASES = {
    "h3Cells": "cells",
    "h3_cells": "cells",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "createdBy": "created_by",
    "updatedBy": "updated_by",
}


@dataclass(frozen=True)
class Zone:
    """A named, taggable spatial region. Reconstructed by replay only."""

    id: str
    name: str = ""
    active: bool = False
    cells: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None

    @classmethod
    def from_snapshot(cls, zone_id: str, snapshot: Mapping[str, Any]) -> "Zone":
        """Build a zone from a creation snapshot. Missing `active` means inactive."""
        values = _normalize_snapshot(snapshot)
        values.setdefault("id", zone_id)
        return cls(**values)

    def merged(self, snapshot: Mapping[str, Any]) -> "Zone":
        """Return a copy with the snapshot's fields layered on top."""
        return replace(self, **_normalize_snapshot(snapshot))

    def to_payload(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "active": self.active,
            "h3Cells": list(self.cells),
            "tags": list(self.tags),
            "metadata": dict(self.metadata),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "createdBy": self.created_by,
            "updatedBy": self.updated_by,
        }


def _normalize_snapshot(snapshot: Mapping[str, Any]) -> dict:
    known = {f.name for f in fields(Zone)}
    values: dict = {}
    for key, value in snapshot.items():
        name = _SNAPSHOT_ALIASES.get(key, key)
        if name not in known:
            continue
        if name in ("cells", "tags"):
            value = tuple(value or ())
        elif name == "active":
            value = bool(value)
        elif name == "metadata":
            value = dict(value or {})
        values[name] = value
    return values


@dataclass(frozen=True)
class GridCellState:
    """Derived annotation for one grid cell."""

    cell_index: str
    zone_ids: tuple[str, ...]
    zone_names: tuple[str, ...]
    tags: tuple[str, ...]
    risk_level: RiskLevel
    in_zone: bool = True

    def to_payload(self) -> dict:
        return {
            "h3Index": self.cell_index,
            "zoneIds": list(self.zone_ids),
            "zoneNames": list(self.zone_names),
            "tags": list(self.tags),
            "riskLevel": self.risk_level.value,
            "inZone": self.in_zone,
        }


def derive_risk_level(tags) -> RiskLevel:
    """
    Coarse risk from tags, strongest match wins:
    high/security > medium/restricted > any tag > none.
    """
    tags = list(tags)
    if any("high" in t or "security" in t for t in tags):
        return RiskLevel.HIGH
    if any("medium" in t or "restricted" in t for t in tags):
        return RiskLevel.MEDIUM
    if tags:
        return RiskLevel.LOW
    return RiskLevel.NONE
