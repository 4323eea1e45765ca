"""
Gear Runtime Package.

============================================================
PURPOSE
============================================================
Drives hosted application gears and the cartridges inside
them through their lifecycle hooks.

PRINCIPLES:
    Embedded cartridges are torn down before standard ones.
    Hook failures are never retried.
    Listeners only see successful hooks.

============================================================
MODULES
============================================================
- types: Enums and dataclasses
- config: Runtime configuration
- errors: Error taxonomy
- state_machine: Gear lifecycle transitions
- adapters: Command runner and container collaborators
- listeners: Post-hook cartridge listeners
- cartridge: Hook invocation protocol
- gear: Cartridge set, container ownership, teardown order
- application: Accounts and applications
- context: Configuration plus collaborators
- cli: Command-line entry point

============================================================
"""

# ============================================================
# TYPES
# ============================================================
from .types import (
    CartridgeType,
    GearState,
    HookResult,
    HookEvent,
    CommandResult,
    ContainerSpec,
    DbConnection,
    LIFECYCLE_HOOKS,
    TIMEOUT_EXIT_CODE,
    hook_completed_event,
)

# ============================================================
# CONFIGURATION
# ============================================================
from .config import RuntimeConfig

# ============================================================
# ERRORS
# ============================================================
from .errors import (
    HookExecutionError,
    ListenerError,
    ContainerAllocationError,
    GearStateError,
)

# ============================================================
# COLLABORATORS
# ============================================================
from .adapters import (
    CommandRunner,
    ContainerHandle,
    ContainerProvider,
    RunconCommandRunner,
    MockCommandRunner,
    MockContainerProvider,
    create_command_runner,
    create_container_provider,
)

# ============================================================
# LISTENERS
# ============================================================
from .listeners import (
    CartridgeListener,
    DatabaseCartListener,
    default_listeners,
)

# ============================================================
# ENTITIES
# ============================================================
from .context import RuntimeContext
from .cartridge import Cartridge
from .gear import Gear
from .application import Account, Application


__all__ = [
    # Types
    "CartridgeType",
    "GearState",
    "HookResult",
    "HookEvent",
    "CommandResult",
    "ContainerSpec",
    "DbConnection",
    "LIFECYCLE_HOOKS",
    "TIMEOUT_EXIT_CODE",
    "hook_completed_event",
    # Config
    "RuntimeConfig",
    # Errors
    "HookExecutionError",
    "ListenerError",
    "ContainerAllocationError",
    "GearStateError",
    # Collaborators
    "CommandRunner",
    "ContainerHandle",
    "ContainerProvider",
    "RunconCommandRunner",
    "MockCommandRunner",
    "MockContainerProvider",
    "create_command_runner",
    "create_container_provider",
    # Listeners
    "CartridgeListener",
    "DatabaseCartListener",
    "default_listeners",
    # Entities
    "RuntimeContext",
    "Cartridge",
    "Gear",
    "Account",
    "Application",
]
