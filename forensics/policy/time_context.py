"""
Forensic Policy — Time Context
================================
The mandatory time frame of a forensic session: start, end and the
current position. All three must be present, start < end, and current
must fall inside [start, end].
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from forensics.policy.result import ValidationResult

RULE_TIME_CONTEXT = "FORENSIC-TIME-CONTEXT"


@dataclass(frozen=True)
class TimeContext:
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    current: Optional[datetime] = None


def validate_time_context(ctx: Optional[TimeContext]) -> ValidationResult:
    """
    Check a time context. Pure; never raises.

    Returns every violation found, not just the first.
    """
    if ctx is None:
        return ValidationResult.from_violations(
            ["Time context is required for forensic mode."],
            rule=RULE_TIME_CONTEXT,
        )
    if not isinstance(ctx, TimeContext):
        return ValidationResult.from_violations(
            [f"Time context must be a TimeContext, got {type(ctx).__name__}."],
            rule=RULE_TIME_CONTEXT,
        )

    violations: list[str] = []

    for name in ("start", "end", "current"):
        value = getattr(ctx, name)
        if value is None:
            violations.append(f"Time context is missing '{name}'.")
        elif not isinstance(value, datetime):
            violations.append(
                f"Time context '{name}' must be a datetime, "
                f"got {type(value).__name__}."
            )
        elif value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
            violations.append(f"Time context '{name}' must be timezone-aware.")

    if violations:
        return ValidationResult.from_violations(violations, rule=RULE_TIME_CONTEXT)

    if ctx.start >= ctx.end:
        violations.append(
            f"Time context start ({ctx.start.isoformat()}) must be "
            f"before end ({ctx.end.isoformat()})."
        )
    elif not ctx.start <= ctx.current <= ctx.end:
        violations.append(
            f"Current time ({ctx.current.isoformat()}) is outside "
            f"[{ctx.start.isoformat()}, {ctx.end.isoformat()}]."
        )

    return ValidationResult.from_violations(violations, rule=RULE_TIME_CONTEXT)
