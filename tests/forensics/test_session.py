"""
Tests — Forensic Session Activation & Wiring
==============================================
Time-context gate, layer gate, and timeline → engine → sink wiring.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from forensics.playback import ManualScheduler, PlaybackSpeed
from forensics.policy import InteractionState, TimeContext
from forensics.rendering import FRAME_LAYERS, push_frame
from forensics.replay import ReplayDataSource
from forensics.session import open_session
from forensics.spatial.models import EntityPosition, RiskLevel, ZoneAuditEntry

T0 = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
T_END = T0 + timedelta(hours=1)


def at(minutes: float) -> datetime:
    return T0 + timedelta(minutes=minutes)


class RecordingSink:
    def __init__(self) -> None:
        self.updates = []

    def update_layer(self, layer_id, items):
        self.updates.append((layer_id, tuple(items)))

    def latest(self, layer_id):
        for layer, items in reversed(self.updates):
            if layer == layer_id:
                return items
        return None


SOURCE = ReplayDataSource(
    entity_history=(
        EntityPosition("veh-1", "vehicle", 1.0, 1.0, "c1", at(5)),
        EntityPosition("veh-1", "vehicle", 2.0, 2.0, "c2", at(25)),
    ),
    zone_audit_log=(
        ZoneAuditEntry(
            "Z", "created", at(10), "analyst-1",
            after={"name": "Yard", "active": True, "h3Cells": ["c1"], "tags": ["security"]},
        ),
    ),
    event_log=(),
    start_time=T0,
    end_time=T_END,
)


def open_ok(current=T0, **kwargs):
    sink = kwargs.pop("sink", RecordingSink())
    opening = open_session(
        TimeContext(start=T0, end=T_END, current=current),
        SOURCE,
        sink,
        scheduler=ManualScheduler(),
        tick_interval=timedelta(milliseconds=100),
        **kwargs,
    )
    assert opening.allowed, opening.messages
    return opening.session, sink


class TestActivationGate:
    def test_refused_without_time_context(self):
        opening = open_session(None, SOURCE)
        assert opening.allowed is False
        assert opening.session is None
        assert opening.messages == ("Time context is required for forensic mode.",)

    def test_refused_with_current_outside_range(self):
        opening = open_session(
            TimeContext(start=T0, end=T_END, current=T_END + timedelta(minutes=1)),
            SOURCE,
        )
        assert opening.allowed is False
        assert "outside" in opening.messages[0]

    def test_refused_for_mutation_layer(self):
        opening = open_session(
            TimeContext(start=T0, end=T_END, current=T0),
            SOURCE,
            layers=[*FRAME_LAYERS, "zone-draw"],
            scheduler=ManualScheduler(),
        )
        assert opening.allowed is False
        assert opening.messages == ("Layer 'zone-draw' is forbidden in forensic mode.",)


class TestSessionWiring:
    def test_initial_frame_is_rendered(self):
        session, sink = open_ok(current=at(15))
        assert session.last_frame.timestamp == at(15)
        assert [layer for layer, _ in sink.updates] == list(FRAME_LAYERS)
        cells = sink.latest("replay-cells")
        assert cells[0].risk_level == RiskLevel.HIGH

    def test_seek_renders_frame_at_new_time(self):
        session, sink = open_ok()
        session.controller.set_time(at(30))
        entities = sink.latest("replay-entities")
        assert entities[0].lat == 2.0
        assert session.last_frame.timestamp == at(30)

    def test_playback_ticks_render(self):
        scheduler = ManualScheduler()
        opening = open_session(
            TimeContext(start=T0, end=T_END, current=T0),
            SOURCE,
            RecordingSink(),
            scheduler=scheduler,
            tick_interval=timedelta(milliseconds=100),
            speed=PlaybackSpeed.X10,
        )
        session = opening.session
        session.controller.play()
        scheduler.run_ticks(5)
        assert session.last_frame.timestamp == T0 + timedelta(seconds=5)

    def test_mode_context_is_shared(self):
        session, _ = open_ok()
        assert session.engine.mode is session.context
        assert session.controller.mode is session.context

    def test_interaction_is_locked_to_inspect(self):
        session, _ = open_ok()
        assert session.request_interaction(InteractionState.INSPECT).valid
        refused = session.request_interaction(InteractionState.EDIT_ZONE)
        assert not refused.valid
        assert "not permitted in forensic mode" in refused.messages[0]

    def test_actions(self):
        session, _ = open_ok()
        assert session.request_action("replay").valid
        assert not session.request_action("correct_history").valid

    def test_reload_data_rerenders(self):
        session, sink = open_ok(current=at(15))
        session.load_data(
            ReplayDataSource(
                entity_history=(), zone_audit_log=(), event_log=(),
                start_time=T0, end_time=T_END,
            )
        )
        assert sink.latest("replay-cells") == ()
        assert sink.latest("replay-entities") == ()

    def test_session_without_source_renders_nothing(self):
        opening = open_session(
            TimeContext(start=T0, end=T_END, current=T0),
            scheduler=ManualScheduler(),
        )
        assert opening.allowed
        assert opening.session.last_frame is None

    def test_close_is_idempotent(self):
        session, sink = open_ok()
        session.close()
        session.close()
        assert session.closed
        assert session.controller.destroyed
        count = len(sink.updates)
        session.controller.set_time(at(30))
        assert len(sink.updates) == count


class TestSurface:
    def test_view_state(self):
        session, _ = open_ok(current=at(10))
        view = session.surface.view_state()
        assert view.current_time == at(10)
        assert view.start_time == T0
        assert view.end_time == T_END
        assert view.is_playing is False
        assert view.speed == PlaybackSpeed.X1

    def test_callbacks_drive_controller(self):
        session, _ = open_ok(current=at(10))
        surface = session.surface

        surface.on_step_forward()
        assert session.controller.current_time == at(11)
        surface.on_step_backward()
        assert session.controller.current_time == at(10)

        surface.on_seek(at(40))
        assert session.controller.current_time == at(40)

        surface.on_speed_change(5)
        assert surface.view_state().speed == PlaybackSpeed.X5

        surface.on_play_pause()
        assert surface.view_state().is_playing is True
        surface.on_play_pause()
        assert surface.view_state().is_playing is False


class TestPushFrame:
    def test_one_update_per_layer(self):
        session, _ = open_ok(current=at(30))
        sink = RecordingSink()
        push_frame(sink, session.last_frame)
        assert [layer for layer, _ in sink.updates] == ["replay-cells", "replay-entities"]
