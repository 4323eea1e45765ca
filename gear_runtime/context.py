"""
Gear Runtime - Runtime Context.

Bundles the configuration and collaborators that gears and
cartridges are constructed with.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .adapters.base import CommandRunner, ContainerProvider
from .adapters.factory import create_command_runner, create_container_provider
from .config import RuntimeConfig
from .listeners import CartridgeListener, default_listeners


@dataclass
class RuntimeContext:
    """Configuration plus collaborators for one runtime."""

    runner: CommandRunner
    container_provider: ContainerProvider
    config: RuntimeConfig = field(default_factory=RuntimeConfig)
    listener_factory: Callable[[], List[CartridgeListener]] = default_listeners
    """Builds the listener list for each new cartridge."""

    @classmethod
    def create(
        cls,
        runner_id: str,
        provider_id: str,
        config: Optional[RuntimeConfig] = None,
    ) -> "RuntimeContext":
        """Build a context from adapter identifiers."""
        return cls(
            runner=create_command_runner(runner_id),
            container_provider=create_container_provider(provider_id),
            config=config or RuntimeConfig.from_env(),
        )
