"""
Forensic Replay — Replay Frame
================================
A complete point-in-time snapshot. The sole output of the engine.
Fully determined by (dataset, timestamp); never mutated after creation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from forensics.spatial.models import (
    EntityPosition,
    GeoEvent,
    GridCellState,
    Zone,
)
from forensics.time.temporal import serialize_timestamp


@dataclass(frozen=True)
class ReplayFrame:
    timestamp: datetime
    entities: tuple[EntityPosition, ...] = ()
    zones: tuple[Zone, ...] = ()
    cell_states: tuple[GridCellState, ...] = ()
    events: tuple[GeoEvent, ...] = ()

    @property
    def key(self) -> str:
        """Serialized timestamp — the frame's cache identity."""
        return serialize_timestamp(self.timestamp)

    def entity(self, entity_id: str):
        """Position carried for `entity_id`, or None if absent at this time."""
        for position in self.entities:
            if position.entity_id == entity_id:
                return position
        return None

    def zone(self, zone_id: str):
        for zone in self.zones:
            if zone.id == zone_id:
                return zone
        return None

    def cell(self, cell_index: str):
        for state in self.cell_states:
            if state.cell_index == cell_index:
                return state
        return None

    def to_payload(self) -> dict:
        return {
            "timestamp": self.key,
            "entities": [e.to_payload() for e in self.entities],
            "zones": [z.to_payload() for z in self.zones],
            "cellStates": [c.to_payload() for c in self.cell_states],
            "events": [e.to_payload() for e in self.events],
        }
