"""
Forensic Audit Store — Historical Records
===========================================
Persistent, append-only history that replay datasets are built from.

RULES (NON-NEGOTIABLE):
- INSERT only. No updates, no deletes
- No writes at all while a ReplayContext is active on the thread
- Arrival order (the auto-increment id) is the tie-break for equal
  timestamps — it is never renumbered

This file contains NO replay logic. Records convert to the immutable
domain types; replay happens on those.
"""

from django.db import models

from forensics.replay.context import is_replay_active
from forensics.replay.errors import ReplayWriteForbiddenError
from forensics.spatial.models import (
    EntityKind,
    EntityPosition,
    GeoEvent,
    ZoneAction,
    ZoneAuditEntry,
)


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class EntityKindChoice(models.TextChoices):
    VEHICLE = EntityKind.VEHICLE.value, "Vehicle"
    DRIVER = EntityKind.DRIVER.value, "Driver"
    ASSET = EntityKind.ASSET.value, "Asset"


class ZoneActionChoice(models.TextChoices):
    CREATED = ZoneAction.CREATED.value, "Created"
    UPDATED = ZoneAction.UPDATED.value, "Updated"
    DEACTIVATED = ZoneAction.DEACTIVATED.value, "Deactivated"
    TAGGED = ZoneAction.TAGGED.value, "Tagged"


# ══════════════════════════════════════════════════════════════
# APPEND-ONLY BASE
# ══════════════════════════════════════════════════════════════

class AppendOnlyRecord(models.Model):
    """Abstract base enforcing insert-only persistence."""

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        """
        GUARD: INSERT only, and never during replay.
        """
        if is_replay_active():
            raise ReplayWriteForbiddenError(
                f"Cannot write {type(self).__name__} during replay. "
                "Replay mode is read-only."
            )
        if not self._state.adding:
            raise ReplayWriteForbiddenError(
                f"{type(self).__name__} records are immutable. "
                "Record a new entry instead of updating history."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """
        GUARD: History is NEVER deleted.
        """
        raise ReplayWriteForbiddenError(
            f"{type(self).__name__} records are never deleted."
        )


# ══════════════════════════════════════════════════════════════
# RECORDS
# ══════════════════════════════════════════════════════════════

class EntityPositionRecord(AppendOnlyRecord):
    """One location sample for a tracked entity."""

    entity_id = models.CharField(max_length=255)
    entity_kind = models.CharField(
        max_length=20,
        choices=EntityKindChoice.choices,
    )
    lat = models.FloatField()
    lng = models.FloatField()
    cell_index = models.CharField(
        max_length=32,
        blank=True,
        default="",
        help_text="Grid cell (H3 index) containing the sample.",
    )
    recorded_at = models.DateTimeField(
        help_text="When the sample was taken at source.",
    )
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = "forensics_entity_positions"
        ordering = ["recorded_at", "id"]
        indexes = [
            models.Index(
                fields=["recorded_at"],
                name="idx_fpos_recorded",
            ),
            models.Index(
                fields=["entity_id", "recorded_at"],
                name="idx_fpos_entity_recorded",
            ),
        ]

    def to_record(self) -> EntityPosition:
        return EntityPosition(
            entity_id=self.entity_id,
            entity_kind=EntityKind(self.entity_kind),
            lat=self.lat,
            lng=self.lng,
            cell_index=self.cell_index,
            timestamp=self.recorded_at,
            metadata=dict(self.metadata or {}),
        )

    def __str__(self):
        return f"Position({self.entity_id} @ {self.recorded_at.isoformat()})"


class ZoneAuditRecord(AppendOnlyRecord):
    """One mutation in a zone's history, with partial before/after snapshots."""

    zone_id = models.CharField(max_length=255)
    action = models.CharField(
        max_length=20,
        choices=ZoneActionChoice.choices,
    )
    occurred_at = models.DateTimeField()
    before = models.JSONField(null=True, blank=True)
    after = models.JSONField(null=True, blank=True)
    user_id = models.CharField(max_length=255)

    class Meta:
        db_table = "forensics_zone_audit_log"
        ordering = ["occurred_at", "id"]
        indexes = [
            models.Index(
                fields=["occurred_at"],
                name="idx_fzone_occurred",
            ),
            models.Index(
                fields=["zone_id", "occurred_at"],
                name="idx_fzone_zone_occurred",
            ),
        ]

    def to_record(self) -> ZoneAuditEntry:
        return ZoneAuditEntry(
            zone_id=self.zone_id,
            action=ZoneAction(self.action),
            timestamp=self.occurred_at,
            user_id=self.user_id,
            before=self.before,
            after=self.after,
        )

    def __str__(self):
        return f"ZoneAudit({self.zone_id} {self.action} @ {self.occurred_at.isoformat()})"


class GeoEventRecord(AppendOnlyRecord):
    """A discrete geospatial occurrence (e.g. geofence crossing)."""

    event_id = models.CharField(max_length=255, unique=True)
    event_type = models.CharField(max_length=100, blank=True, default="")
    occurred_at = models.DateTimeField()
    payload = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = "forensics_geo_events"
        ordering = ["occurred_at", "id"]
        indexes = [
            models.Index(
                fields=["occurred_at"],
                name="idx_fevt_occurred",
            ),
        ]

    def to_record(self) -> GeoEvent:
        return GeoEvent(
            id=self.event_id,
            timestamp=self.occurred_at,
            event_type=self.event_type,
            payload=dict(self.payload or {}),
        )

    def __str__(self):
        return f"[{self.event_type}] {self.event_id}"
