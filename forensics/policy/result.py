"""
Forensic Policy — Result Models
=================================
ValidationResult: pass/fail plus human-readable violation messages.

Pure data. Validation never raises for a failed check — failure is a
value the caller must inspect and surface.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of a policy check.

    Fields:
        valid:     True if no violation was found.
        messages:  One message per violation (empty when valid).
        rule:      Identifier of the check that produced this result.
    """

    valid: bool
    messages: tuple[str, ...] = field(default_factory=tuple)
    rule: str = ""

    def __post_init__(self):
        object.__setattr__(self, "messages", tuple(self.messages))
        if self.valid and self.messages:
            raise ValueError("A valid result cannot carry violation messages.")
        if not self.valid and not self.messages:
            raise ValueError("An invalid result must explain itself.")

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def ok(cls, rule: str = "") -> "ValidationResult":
        return cls(valid=True, rule=rule)

    @classmethod
    def from_violations(
        cls, violations: Iterable[str], rule: str = ""
    ) -> "ValidationResult":
        messages = tuple(violations)
        return cls(valid=not messages, messages=messages, rule=rule)

    def to_payload(self) -> dict:
        return {
            "valid": self.valid,
            "rule": self.rule,
            "messages": list(self.messages),
        }
