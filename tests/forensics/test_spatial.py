"""
Tests for forensics.spatial — records, zone snapshots and risk derivation.
"""

from datetime import datetime, timezone

import pytest

from forensics.spatial.models import (
    EntityKind,
    EntityPosition,
    RiskLevel,
    Zone,
    ZoneAction,
    ZoneAuditEntry,
    derive_risk_level,
)

T0 = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


class TestDeriveRiskLevel:
    @pytest.mark.parametrize(
        "tags, expected",
        [
            ((), RiskLevel.NONE),
            (("parking",), RiskLevel.LOW),
            (("restricted",), RiskLevel.MEDIUM),
            (("medium-traffic",), RiskLevel.MEDIUM),
            (("high-security",), RiskLevel.HIGH),
            (("security",), RiskLevel.HIGH),
            (("parking", "restricted", "high-value"), RiskLevel.HIGH),
        ],
    )
    def test_strongest_tag_wins(self, tags, expected):
        assert derive_risk_level(tags) == expected

    def test_order_does_not_matter(self):
        assert derive_risk_level(["high", "restricted"]) == derive_risk_level(
            ["restricted", "high"]
        )


class TestRecords:
    def test_position_coerces_kind(self):
        p = EntityPosition("veh-1", "vehicle", 1.0, 2.0, "cell-a", T0)
        assert p.entity_kind == EntityKind.VEHICLE

    def test_position_rejects_naive_timestamp(self):
        with pytest.raises(ValueError):
            EntityPosition("veh-1", "vehicle", 1.0, 2.0, "cell-a", datetime(2025, 1, 1))

    def test_position_rejects_unknown_kind(self):
        with pytest.raises(ValueError):
            EntityPosition("veh-1", "submarine", 1.0, 2.0, "cell-a", T0)

    def test_position_payload_keys(self):
        p = EntityPosition("veh-1", EntityKind.DRIVER, 1.0, 2.0, "cell-a", T0)
        payload = p.to_payload()
        assert payload["entityId"] == "veh-1"
        assert payload["entityType"] == "driver"
        assert payload["h3Index"] == "cell-a"
        assert payload["timestamp"] == "2025-01-01T00:00:00.000000Z"

    def test_audit_entry_coerces_action(self):
        entry = ZoneAuditEntry("z1", "tagged", T0, "u1")
        assert entry.action == ZoneAction.TAGGED

    def test_audit_entry_rejects_unknown_action(self):
        with pytest.raises(ValueError):
            ZoneAuditEntry("z1", "exploded", T0, "u1")


class TestZoneSnapshots:
    def test_from_snapshot_reads_aliases(self):
        zone = Zone.from_snapshot(
            "z1",
            {"name": "Depot", "active": True, "h3Cells": ["a", "b"], "tags": ["x"]},
        )
        assert zone.id == "z1"
        assert zone.cells == ("a", "b")
        assert zone.tags == ("x",)
        assert zone.active is True

    def test_missing_active_means_inactive(self):
        zone = Zone.from_snapshot("z1", {"name": "Depot"})
        assert zone.active is False

    def test_unknown_snapshot_keys_ignored(self):
        zone = Zone.from_snapshot("z1", {"name": "Depot", "colour": "red"})
        assert zone.name == "Depot"

    def test_merged_overlays_only_given_fields(self):
        zone = Zone.from_snapshot(
            "z1", {"name": "Depot", "active": True, "h3Cells": ["a"], "tags": ["x"]}
        )
        updated = zone.merged({"tags": ["x", "y"]})
        assert updated.tags == ("x", "y")
        assert updated.cells == ("a",)
        assert updated.name == "Depot"
        assert zone.tags == ("x",)

    def test_payload_uses_wire_names(self):
        zone = Zone.from_snapshot("z1", {"h3Cells": ["a"], "createdBy": "u1"})
        payload = zone.to_payload()
        assert payload["h3Cells"] == ["a"]
        assert payload["createdBy"] == "u1"
