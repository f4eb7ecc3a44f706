"""
Forensic Replay Spatial — Public API
======================================
Log records and derived zone / grid-cell state.
"""

from forensics.spatial.models import (
    EntityKind,
    EntityPosition,
    GeoEvent,
    GridCellState,
    RiskLevel,
    Zone,
    ZoneAction,
    ZoneAuditEntry,
    derive_risk_level,
)

__all__ = [
    "EntityKind",
    "EntityPosition",
    "GeoEvent",
    "GridCellState",
    "RiskLevel",
    "Zone",
    "ZoneAction",
    "ZoneAuditEntry",
    "derive_risk_level",
]
