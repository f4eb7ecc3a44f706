"""
Tests — Forensic Mode Policy & Time-Context Gate
==================================================
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from forensics.policy import (
    FORENSIC_POLICY,
    LAYER_REPLAY_CELLS,
    LAYER_REPLAY_ENTITIES,
    InteractionState,
    MapMode,
    ModePolicy,
    TimeContext,
    ValidationResult,
    activate_mode,
    validate_time_context,
)

T0 = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
T1 = T0 + timedelta(hours=1)
MID = T0 + timedelta(minutes=30)


# ══════════════════════════════════════════════════════════════
# VALIDATION RESULT
# ══════════════════════════════════════════════════════════════

class TestValidationResult:
    def test_ok_is_truthy(self):
        assert ValidationResult.ok()
        assert ValidationResult.ok().messages == ()

    def test_from_violations(self):
        result = ValidationResult.from_violations(["bad"], rule="R")
        assert not result
        assert result.to_payload() == {"valid": False, "rule": "R", "messages": ["bad"]}

    def test_invalid_requires_message(self):
        with pytest.raises(ValueError):
            ValidationResult(valid=False)

    def test_valid_cannot_carry_messages(self):
        with pytest.raises(ValueError):
            ValidationResult(valid=True, messages=("oops",))


# ══════════════════════════════════════════════════════════════
# TIME CONTEXT
# ══════════════════════════════════════════════════════════════

class TestTimeContextValidation:
    def test_valid_context(self):
        assert validate_time_context(TimeContext(start=T0, end=T1, current=MID)).valid

    def test_current_on_bounds_is_valid(self):
        assert validate_time_context(TimeContext(start=T0, end=T1, current=T0)).valid
        assert validate_time_context(TimeContext(start=T0, end=T1, current=T1)).valid

    def test_none_context(self):
        result = validate_time_context(None)
        assert not result.valid
        assert result.messages == ("Time context is required for forensic mode.",)

    def test_non_context_object_is_invalid(self):
        result = validate_time_context({"start": T0, "end": T1, "current": MID})
        assert not result.valid
        assert result.messages == ("Time context must be a TimeContext, got dict.",)

    def test_every_missing_field_is_reported(self):
        result = validate_time_context(TimeContext())
        assert result.messages == (
            "Time context is missing 'start'.",
            "Time context is missing 'end'.",
            "Time context is missing 'current'.",
        )

    def test_start_must_precede_end(self):
        result = validate_time_context(TimeContext(start=T1, end=T0, current=MID))
        assert not result.valid
        assert "must be before end" in result.messages[0]

    def test_zero_length_range_is_invalid(self):
        assert not validate_time_context(TimeContext(start=T0, end=T0, current=T0)).valid

    def test_current_outside_range(self):
        result = validate_time_context(
            TimeContext(start=T0, end=T1, current=T1 + timedelta(seconds=1))
        )
        assert not result.valid
        assert "outside" in result.messages[0]

    def test_naive_datetime(self):
        result = validate_time_context(
            TimeContext(start=datetime(2025, 1, 1), end=T1, current=MID)
        )
        assert result.messages == ("Time context 'start' must be timezone-aware.",)

    def test_wrong_type(self):
        result = validate_time_context(TimeContext(start="today", end=T1, current=MID))
        assert "must be a datetime" in result.messages[0]


# ══════════════════════════════════════════════════════════════
# MODE POLICY
# ══════════════════════════════════════════════════════════════

class TestForensicPolicy:
    def test_descriptor(self):
        assert FORENSIC_POLICY.mode == MapMode.FORENSIC
        assert FORENSIC_POLICY.read_only is True
        assert FORENSIC_POLICY.receives_live_data is False
        assert FORENSIC_POLICY.requires_time_context is True

    def test_only_inspect_is_allowed(self):
        assert FORENSIC_POLICY.is_state_allowed(InteractionState.INSPECT)
        for state in InteractionState:
            if state != InteractionState.INSPECT:
                assert not FORENSIC_POLICY.is_state_allowed(state)

    def test_replay_layers_allowed(self):
        assert FORENSIC_POLICY.check_layers([LAYER_REPLAY_CELLS, LAYER_REPLAY_ENTITIES]).valid

    @pytest.mark.parametrize(
        "layer",
        ["zone-draw", "route-sketch", "live-vehicles", "live-drivers", "tradeoff-editor"],
    )
    def test_forbidden_layers(self, layer):
        assert not FORENSIC_POLICY.is_layer_allowed(layer)
        result = FORENSIC_POLICY.check_layers([layer])
        assert result.messages == (f"Layer '{layer}' is forbidden in forensic mode.",)

    def test_unknown_layer_is_not_admissible(self):
        result = FORENSIC_POLICY.check_layers(["weather-radar"])
        assert "not admissible" in result.messages[0]

    def test_actions(self):
        assert FORENSIC_POLICY.check_action("scrub_timeline").valid
        assert not FORENSIC_POLICY.check_action("edit_zones").valid
        assert not FORENSIC_POLICY.check_action("teleport").valid

    def test_policy_rejects_layer_overlap(self):
        with pytest.raises(ValueError):
            ModePolicy(
                mode=MapMode.PLANNING,
                description="broken",
                allowed_states=frozenset({InteractionState.INSPECT}),
                read_only=False,
                receives_live_data=False,
                requires_time_context=False,
                allowed_layers=frozenset({"a"}),
                forbidden_layers=frozenset({"a"}),
            )


# ══════════════════════════════════════════════════════════════
# ACTIVATION
# ══════════════════════════════════════════════════════════════

class TestActivation:
    def test_refused_without_time_context(self):
        activation = activate_mode(None)
        assert activation.allowed is False
        assert activation.context is None
        assert activation.messages

    def test_refused_with_invalid_context(self):
        activation = activate_mode(TimeContext(start=T0, end=T1))
        assert activation.allowed is False
        assert activation.messages == ("Time context is missing 'current'.",)

    def test_activated_context_locks_inspect(self):
        ctx = TimeContext(start=T0, end=T1, current=MID)
        activation = activate_mode(ctx)
        assert activation.allowed is True
        assert activation.context.time_context is ctx
        assert activation.context.interaction_state == InteractionState.INSPECT
        assert not activation.context.request_state(InteractionState.DRAW_ZONE).valid
        assert activation.context.request_state(InteractionState.INSPECT).valid

    def test_independent_contexts_coexist(self):
        a = activate_mode(TimeContext(start=T0, end=T1, current=T0)).context
        b = activate_mode(TimeContext(start=T0, end=T1, current=T1)).context
        assert a.time_context.current != b.time_context.current

    def test_policy_without_time_requirement(self):
        planning = ModePolicy(
            mode=MapMode.PLANNING,
            description="planning",
            allowed_states=frozenset(InteractionState),
            read_only=False,
            receives_live_data=False,
            requires_time_context=False,
        )
        assert activate_mode(None, planning).allowed is True
