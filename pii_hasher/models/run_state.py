from __future__ import annotations

from enum import Enum

"""RunState enum for the hashing run lifecycle.

State transitions: IDLE → PARSING → READY → PROCESSING → COMPLETE

ERROR is reachable from PARSING (parse/validation failure), READY (no target
columns found) and PROCESSING (hashing/assembly failure). COMPLETE and ERROR
are terminal until an explicit reset back to IDLE (new upload).
"""

__all__ = [
    "RunState",
    "InvalidTransitionError",
    "check_transition",
]


class InvalidTransitionError(Exception):
    """Raised when a run is asked to move along an edge the lifecycle forbids."""


class RunState(Enum):
    IDLE = "idle"
    PARSING = "parsing"
    READY = "ready"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.COMPLETE, RunState.ERROR)


_ALLOWED: dict[RunState, frozenset[RunState]] = {
    RunState.IDLE: frozenset({RunState.PARSING}),
    RunState.PARSING: frozenset({RunState.READY, RunState.ERROR}),
    RunState.READY: frozenset({RunState.PROCESSING, RunState.ERROR}),
    RunState.PROCESSING: frozenset({RunState.COMPLETE, RunState.ERROR}),
    RunState.COMPLETE: frozenset(),
    RunState.ERROR: frozenset(),
}


def check_transition(current: RunState, target: RunState) -> RunState:
    """Validate ``current -> target`` and return ``target``.

    Reset to IDLE is always allowed; every other edge must be listed in the
    lifecycle table.

    Raises:
        InvalidTransitionError: If the edge is not allowed
    """
    if target is RunState.IDLE:
        return target
    if target not in _ALLOWED[current]:
        raise InvalidTransitionError(f"cannot move from {current.value} to {target.value}")
    return target
