"""
Forensic Replay — Data Source
===============================
The closed input dataset for one replay session, and the decoder for
the ingestion bundle handed over by an external audit/event store:

    {
        "entityHistory": [...],
        "zoneAuditLog":  [...],
        "eventLog":      [...],
        "startTime":     "2025-01-01T00:00:00Z",
        "endTime":       "2025-01-01T01:00:00Z"
    }

A dataset is loaded wholesale and treated as read-only. Record order is
preserved exactly as given — it is the tie-break for equal timestamps.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping

from forensics.replay.errors import ReplaySourceError
from forensics.spatial.models import (
    EntityPosition,
    GeoEvent,
    ZoneAuditEntry,
)
from forensics.time.temporal import TimeWindow, ensure_utc, parse_timestamp


@dataclass(frozen=True)
class ReplayDataSource:
    """Entity history, zone audit log, event log and the time bounds."""

    entity_history: tuple[EntityPosition, ...]
    zone_audit_log: tuple[ZoneAuditEntry, ...]
    event_log: tuple[GeoEvent, ...]
    start_time: datetime
    end_time: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "entity_history", tuple(self.entity_history))
        object.__setattr__(self, "zone_audit_log", tuple(self.zone_audit_log))
        object.__setattr__(self, "event_log", tuple(self.event_log))
        object.__setattr__(self, "start_time", ensure_utc(self.start_time))
        object.__setattr__(self, "end_time", ensure_utc(self.end_time))
        if self.start_time > self.end_time:
            raise ValueError(
                f"Replay source start {self.start_time.isoformat()} is after "
                f"end {self.end_time.isoformat()}."
            )

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(start=self.start_time, end=self.end_time)

    def summary(self) -> dict:
        return {
            "positions": len(self.entity_history),
            "zone_entries": len(self.zone_audit_log),
            "events": len(self.event_log),
        }

    # ══════════════════════════════════════════════════════════
    # WIRE DECODING
    # ══════════════════════════════════════════════════════════

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ReplayDataSource":
        """
        Decode an ingestion bundle.

        Raises ReplaySourceError naming the first offending record.
        """
        if not isinstance(payload, Mapping):
            raise ReplaySourceError("bundle", None, "expected a JSON object.")

        start = _decode_field("startTime", None, lambda: parse_timestamp(payload["startTime"]))
        end = _decode_field("endTime", None, lambda: parse_timestamp(payload["endTime"]))
        if start > end:
            raise ReplaySourceError(
                "bundle", None, f"startTime {start} is after endTime {end}."
            )

        return cls(
            entity_history=_decode_section(
                payload, "entityHistory", _decode_position
            ),
            zone_audit_log=_decode_section(
                payload, "zoneAuditLog", _decode_zone_entry
            ),
            event_log=_decode_section(payload, "eventLog", _decode_event),
            start_time=start,
            end_time=end,
        )


# ══════════════════════════════════════════════════════════════
# RECORD DECODERS
# ══════════════════════════════════════════════════════════════

def _decode_field(section: str, index, fn: Callable[[], Any]) -> Any:
    try:
        return fn()
    except KeyError as exc:
        raise ReplaySourceError(section, index, f"missing field {exc}.") from exc
    except (TypeError, ValueError) as exc:
        raise ReplaySourceError(section, index, str(exc)) from exc


def _decode_section(
    payload: Mapping[str, Any],
    section: str,
    decoder: Callable[[Mapping[str, Any]], Any],
) -> tuple:
    records: Iterable = payload.get(section) or ()
    if isinstance(records, (str, bytes, Mapping)):
        raise ReplaySourceError(section, None, "expected a list of records.")
    return tuple(
        _decode_field(section, index, lambda r=record: decoder(r))
        for index, record in enumerate(records)
    )


def _decode_position(raw: Mapping[str, Any]) -> EntityPosition:
    return EntityPosition(
        entity_id=raw["entityId"],
        entity_kind=raw["entityType"],
        lat=float(raw["lat"]),
        lng=float(raw["lng"]),
        cell_index=raw.get("h3Index", ""),
        timestamp=parse_timestamp(raw["timestamp"]),
        metadata=dict(raw.get("metadata") or {}),
    )


def _decode_zone_entry(raw: Mapping[str, Any]) -> ZoneAuditEntry:
    return ZoneAuditEntry(
        zone_id=raw["zoneId"],
        action=raw["action"],
        timestamp=parse_timestamp(raw["timestamp"]),
        user_id=raw.get("userId", ""),
        before=raw.get("before"),
        after=raw.get("after"),
    )


def _decode_event(raw: Mapping[str, Any]) -> GeoEvent:
    if "payload" in raw:
        payload = dict(raw["payload"] or {})
    else:
        # Flat geofence events carry their detail inline.
        payload = {
            k: v for k, v in raw.items() if k not in ("id", "timestamp", "type")
        }
    return GeoEvent(
        id=str(raw["id"]),
        timestamp=parse_timestamp(raw["timestamp"]),
        event_type=raw.get("type", ""),
        payload=payload,
    )
