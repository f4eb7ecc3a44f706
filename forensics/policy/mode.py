"""
Forensic Policy — Mode Policy & Mode Context
==============================================
A static, declarative gate for forensic (historical replay) mode.

Forensic doctrine:
- Interaction is locked to 'inspect' — no creating, editing or drawing
- Read-only: history is truth, it is never corrected in place
- No live data: the mode only ever sees a closed historical dataset
- A valid time context is mandatory before activation
- Mutation-capable layers (drawing tools, live feeds) are never mounted

The active mode is an explicit ModeContext VALUE passed to whoever needs
it. There is no process-wide mode singleton, so independent replay
sessions can coexist.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from forensics.policy.result import ValidationResult
from forensics.policy.time_context import TimeContext, validate_time_context

logger = logging.getLogger("forensics.policy")

RULE_INTERACTION_STATE = "FORENSIC-INTERACTION-STATE"
RULE_LAYERS = "FORENSIC-LAYERS"
RULE_ACTIONS = "FORENSIC-ACTIONS"


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class MapMode(str, Enum):
    OPERATIONAL = "operational"
    PLANNING = "planning"
    FORENSIC = "forensic"


class InteractionState(str, Enum):
    """Interaction states a map surface can be in."""

    INSPECT = "inspect"
    SELECT = "select"
    DRAW_ZONE = "draw_zone"
    EDIT_ZONE = "edit_zone"
    TAG_CELLS = "tag_cells"
    ROUTE_SKETCH = "route_sketch"


# ══════════════════════════════════════════════════════════════
# MODE POLICY (static descriptor)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ModePolicy:
    """Declarative description of what a mode permits."""

    mode: MapMode
    description: str
    allowed_states: frozenset[InteractionState]
    read_only: bool
    receives_live_data: bool
    requires_time_context: bool
    allowed_layers: frozenset[str] = field(default_factory=frozenset)
    forbidden_layers: frozenset[str] = field(default_factory=frozenset)
    allowed_actions: frozenset[str] = field(default_factory=frozenset)
    forbidden_actions: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        overlap = self.allowed_layers & self.forbidden_layers
        if overlap:
            raise ValueError(
                f"Layers cannot be both allowed and forbidden: {sorted(overlap)}"
            )

    def is_state_allowed(self, state: InteractionState) -> bool:
        return InteractionState(state) in self.allowed_states

    def is_layer_allowed(self, layer_id: str) -> bool:
        return layer_id in self.allowed_layers and layer_id not in self.forbidden_layers

    def is_action_allowed(self, action: str) -> bool:
        return action in self.allowed_actions and action not in self.forbidden_actions

    def check_state(self, state: InteractionState) -> ValidationResult:
        if self.is_state_allowed(state):
            return ValidationResult.ok(rule=RULE_INTERACTION_STATE)
        return ValidationResult.from_violations(
            [
                f"Interaction state '{InteractionState(state).value}' is not "
                f"permitted in {self.mode.value} mode."
            ],
            rule=RULE_INTERACTION_STATE,
        )

    def check_layers(self, layer_ids: Iterable[str]) -> ValidationResult:
        violations = []
        for layer_id in layer_ids:
            if layer_id in self.forbidden_layers:
                violations.append(
                    f"Layer '{layer_id}' is forbidden in {self.mode.value} mode."
                )
            elif layer_id not in self.allowed_layers:
                violations.append(
                    f"Layer '{layer_id}' is not admissible in {self.mode.value} mode."
                )
        return ValidationResult.from_violations(violations, rule=RULE_LAYERS)

    def check_action(self, action: str) -> ValidationResult:
        if self.is_action_allowed(action):
            return ValidationResult.ok(rule=RULE_ACTIONS)
        return ValidationResult.from_violations(
            [f"Action '{action}' is not permitted in {self.mode.value} mode."],
            rule=RULE_ACTIONS,
        )


# Layer identifiers used by replay rendering.
LAYER_REPLAY_CELLS = "replay-cells"
LAYER_REPLAY_ENTITIES = "replay-entities"


FORENSIC_POLICY = ModePolicy(
    mode=MapMode.FORENSIC,
    description="Immutable historical analysis — time-based replay",
    allowed_states=frozenset({InteractionState.INSPECT}),
    read_only=True,
    receives_live_data=False,
    requires_time_context=True,
    allowed_layers=frozenset({
        LAYER_REPLAY_CELLS,
        LAYER_REPLAY_ENTITIES,
        "vehicles",
        "routes",
        "batches",
        "facilities",
        "zones",
        "tradeoffs",
        "exceptions",
        "performance_heatmaps",
    }),
    forbidden_layers=frozenset({
        "zone-draw",
        "route-sketch",
        "live-vehicles",
        "live-drivers",
        "tradeoff-editor",
    }),
    allowed_actions=frozenset({
        "replay",
        "scrub_timeline",
        "compare_routes",
        "analyze_performance",
        "view_tradeoff_history",
        "view_exception_history",
        "generate_heatmap",
        "filter_by_date_range",
        "export_forensics_report",
    }),
    forbidden_actions=frozenset({
        "edit_any_data",
        "redispatch",
        "correct_history",
        "fix_routes",
        "modify_timestamps",
        "delete_historical_records",
        "trigger_dispatch",
        "edit_zones",
    }),
)


# ══════════════════════════════════════════════════════════════
# MODE CONTEXT & ACTIVATION
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ModeContext:
    """
    An activated mode. Only activate_mode() builds one from
    a validated time context.
    """

    policy: ModePolicy
    time_context: TimeContext
    interaction_state: InteractionState = InteractionState.INSPECT

    def request_state(self, state: InteractionState) -> ValidationResult:
        """Check a requested interaction state change against the policy."""
        return self.policy.check_state(state)


@dataclass(frozen=True)
class ModeActivation:
    """Result of a mode activation request."""

    allowed: bool
    messages: tuple[str, ...] = ()
    context: Optional[ModeContext] = None


def activate_mode(
    time_context: Optional[TimeContext],
    policy: ModePolicy = FORENSIC_POLICY,
) -> ModeActivation:
    """
    Mode activation gate. Never raises for a bad time context.

    Refused activations carry the violation messages and no context.
    """
    if policy.requires_time_context:
        result = validate_time_context(time_context)
        if not result.valid:
            logger.warning(
                f"{policy.mode.value} mode activation refused: "
                f"{'; '.join(result.messages)}"
            )
            return ModeActivation(allowed=False, messages=result.messages)

    context = ModeContext(
        policy=policy,
        time_context=time_context,
        interaction_state=InteractionState.INSPECT,
    )
    logger.info(f"{policy.mode.value} mode activated.")
    return ModeActivation(allowed=True, context=context)
