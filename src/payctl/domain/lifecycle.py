"""Instruction lifecycle states and transitions.

RECEIVED -> NORMALIZED -> PARSED | SYNTAX_FAILED
PARSED -> VALIDATED | RULE_FAILED
VALIDATED -> SETTLED | PENDING

A payload that cannot be normalized fails straight out of RECEIVED.
Failed and settled states are terminal.
"""

from __future__ import annotations

from enum import StrEnum


class InstructionState(StrEnum):
    """Stage an instruction has reached inside the pipeline."""

    RECEIVED = "received"
    NORMALIZED = "normalized"
    PARSED = "parsed"
    SYNTAX_FAILED = "syntax_failed"
    VALIDATED = "validated"
    RULE_FAILED = "rule_failed"
    SETTLED = "settled"
    PENDING = "pending"


INSTRUCTION_TRANSITIONS: dict[str, list[str]] = {
    "received": ["normalized", "syntax_failed"],
    "normalized": ["parsed", "syntax_failed"],
    "parsed": ["validated", "rule_failed"],
    "validated": ["settled", "pending"],
    "syntax_failed": [],
    "rule_failed": [],
    "settled": [],
    "pending": [],
}

TERMINAL_STATES: frozenset[str] = frozenset(
    state for state, targets in INSTRUCTION_TRANSITIONS.items() if not targets
)


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]] = INSTRUCTION_TRANSITIONS,
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed


class LifecycleError(RuntimeError):
    """Raised when the pipeline attempts an illegal state transition."""


class InstructionLifecycle:
    """Ordered record of the states one instruction has passed through."""

    def __init__(self) -> None:
        self._trail: list[InstructionState] = [InstructionState.RECEIVED]

    @property
    def state(self) -> InstructionState:
        return self._trail[-1]

    @property
    def trail(self) -> list[str]:
        return [str(s) for s in self._trail]

    def advance(self, target: InstructionState) -> None:
        if not is_valid_transition(self.state, target):
            msg = f"Invalid instruction transition: {self.state} -> {target}"
            raise LifecycleError(msg)
        self._trail.append(target)
