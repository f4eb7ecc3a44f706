"""
Forensic Policy — Public API
==============================
Static mode policy, time-context validation and mode activation.
"""

from forensics.policy.mode import (
    FORENSIC_POLICY,
    LAYER_REPLAY_CELLS,
    LAYER_REPLAY_ENTITIES,
    InteractionState,
    MapMode,
    ModeActivation,
    ModeContext,
    ModePolicy,
    activate_mode,
)
from forensics.policy.result import ValidationResult
from forensics.policy.time_context import TimeContext, validate_time_context

__all__ = [
    "FORENSIC_POLICY",
    "LAYER_REPLAY_CELLS",
    "LAYER_REPLAY_ENTITIES",
    "InteractionState",
    "MapMode",
    "ModeActivation",
    "ModeContext",
    "ModePolicy",
    "activate_mode",
    "ValidationResult",
    "TimeContext",
    "validate_time_context",
]
