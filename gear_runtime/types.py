"""
Gear Runtime - Types.

============================================================
PURPOSE
============================================================
Type definitions shared by gears, cartridges, listeners
and the collaborator adapters.

============================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .cartridge import Cartridge


# ============================================================
# CARTRIDGE TYPES
# ============================================================

class CartridgeType(Enum):
    """
    Cartridge packaging type.

    Standard and embedded cartridges are packaged and versioned
    independently, so they live under different roots on the node.
    """

    STANDARD = "standard"
    """Application runtime (php, python, ruby...)."""

    EMBEDDED = "embedded"
    """Dependency embedded into an application (mysql, mongodb...)."""


# ============================================================
# GEAR LIFECYCLE STATES
# ============================================================

class GearState(Enum):
    """
    Gear lifecycle state.

    State Machine:

    UNINITIALIZED ──► ACTIVE ──► DESTROYED
          │
          └──────► FAILED_CREATE
    """

    UNINITIALIZED = "UNINITIALIZED"
    """Constructed, container not yet allocated."""

    ACTIVE = "ACTIVE"
    """Container allocated, cartridges may run hooks."""

    FAILED_CREATE = "FAILED_CREATE"
    """Container allocation failed."""

    DESTROYED = "DESTROYED"
    """Cartridges deconfigured and container released."""

    def is_terminal(self) -> bool:
        """Check if state is terminal."""
        return self in (GearState.FAILED_CREATE, GearState.DESTROYED)


# ============================================================
# HOOKS
# ============================================================

LIFECYCLE_HOOKS = ("configure", "deconfigure", "start", "stop", "status")
"""Hooks with a convenience wrapper on every cartridge."""

HOOK_COMPLETED_SUFFIX = "_hook_completed"


def hook_completed_event(hook: str) -> str:
    """Name of the event fired after `hook` succeeds."""
    return f"{hook}{HOOK_COMPLETED_SUFFIX}"


@dataclass
class HookResult:
    """Outcome of a hook invocation."""

    command: str
    """Full command line that was executed."""

    exit_code: int
    """Exit code reported by the command runner."""

    output: List[str] = field(default_factory=list)
    """Captured output lines in emission order."""


@dataclass
class HookEvent:
    """Arguments passed to a listener handler."""

    cart: "Cartridge"
    exit_code: int
    output: List[str] = field(default_factory=list)


# ============================================================
# COMMAND EXECUTION
# ============================================================

TIMEOUT_EXIT_CODE = 124
"""Exit code reported for a command killed on timeout."""


@dataclass
class CommandResult:
    """Result returned by a command runner."""

    exit_code: int
    output: List[str] = field(default_factory=list)
    timed_out: bool = False
    duration_seconds: float = 0.0


# ============================================================
# CONTAINER
# ============================================================

@dataclass
class ContainerSpec:
    """Identity and naming passed to the container provider."""

    application_uuid: str
    gear_uuid: str
    application_name: str
    container_name: str
    namespace: str


# ============================================================
# CONNECTIVITY
# ============================================================

@dataclass
class DbConnection:
    """Connectivity details scraped from a data-store cartridge."""

    username: Optional[str] = None
    password: Optional[str] = None
    ip: Optional[str] = None
    port: Optional[str] = None

    def __repr__(self) -> str:
        password = "***" if self.password else None
        return (
            f"DbConnection(username={self.username!r}, password={password!r}, "
            f"ip={self.ip!r}, port={self.port!r})"
        )
