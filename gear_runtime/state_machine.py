"""
Gear Runtime - Gear State Machine.

============================================================
PURPOSE
============================================================
Guards gear lifecycle transitions.

STATE MACHINE:

    UNINITIALIZED ──create() ok──► ACTIVE ──destroy()──► DESTROYED
          │
          └──create() fails──► FAILED_CREATE

INVARIANTS:
- Terminal states are final
- Invalid transitions raise GearStateError
- All transitions are logged

============================================================
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Set, Tuple

from .errors import GearStateError
from .types import GearState


logger = logging.getLogger(__name__)


# ============================================================
# STATE TRANSITION RULES
# ============================================================

VALID_TRANSITIONS: Dict[GearState, Set[GearState]] = {
    GearState.UNINITIALIZED: {
        GearState.ACTIVE,
        GearState.FAILED_CREATE,
    },
    GearState.ACTIVE: {
        GearState.DESTROYED,
    },
    # Terminal states - no transitions out
    GearState.FAILED_CREATE: set(),
    GearState.DESTROYED: set(),
}

# States in which cartridges may be added to the gear
CARTRIDGE_MUTABLE_STATES: Set[GearState] = {
    GearState.UNINITIALIZED,
    GearState.ACTIVE,
}


# ============================================================
# STATE TRANSITION EVENT
# ============================================================

@dataclass
class GearTransition:
    """Record of a gear state transition."""

    gear_uuid: str
    from_state: GearState
    to_state: GearState
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    reason: str = ""


# ============================================================
# STATE MACHINE
# ============================================================

def can_transition(from_state: GearState, to_state: GearState) -> Tuple[bool, str]:
    """
    Check if transition is allowed.

    Returns:
        Tuple of (allowed, reason)
    """
    if to_state in VALID_TRANSITIONS.get(from_state, set()):
        return True, "Valid transition"

    if from_state.is_terminal():
        return False, f"Cannot transition from terminal state {from_state.value}"

    return False, f"Invalid transition: {from_state.value} -> {to_state.value}"


class GearStateMachine:
    """Tracks and enforces the lifecycle state of one gear."""

    def __init__(self, gear_uuid: str):
        self._gear_uuid = gear_uuid
        self._state = GearState.UNINITIALIZED
        self._history: List[GearTransition] = []

    @property
    def state(self) -> GearState:
        return self._state

    @property
    def history(self) -> List[GearTransition]:
        return list(self._history)

    def require(self, allowed: Set[GearState], operation: str) -> None:
        """Raise GearStateError unless the current state is in `allowed`."""
        if self._state not in allowed:
            raise GearStateError(
                self._gear_uuid,
                self._state.value,
                operation,
                reason=f"{operation} not allowed in state {self._state.value}",
            )

    def transition(self, to_state: GearState, reason: str = "") -> GearTransition:
        """
        Move to `to_state`.

        Raises:
            GearStateError: If the transition is not allowed
        """
        allowed, why = can_transition(self._state, to_state)
        if not allowed:
            raise GearStateError(self._gear_uuid, self._state.value, to_state.value, reason=why)

        event = GearTransition(
            gear_uuid=self._gear_uuid,
            from_state=self._state,
            to_state=to_state,
            reason=reason,
        )
        self._state = to_state
        self._history.append(event)

        logger.debug(
            f"Gear {self._gear_uuid}: {event.from_state.value} -> {event.to_state.value}"
            + (f" ({reason})" if reason else "")
        )
        return event
