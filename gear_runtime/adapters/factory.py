"""
Gear Runtime - Adapter Factory.

============================================================
PURPOSE
============================================================
Creates collaborator adapters by identifier.

USAGE
============================================================
```python
runner = create_command_runner("runcon")
provider = create_container_provider("mock")
```

============================================================
"""

import logging
from typing import Callable, Dict, List

from .base import CommandRunner, ContainerProvider
from .mock import MockCommandRunner, MockContainerProvider
from .runcon import RunconCommandRunner


logger = logging.getLogger(__name__)


_RUNNERS: Dict[str, Callable[[], CommandRunner]] = {
    "runcon": RunconCommandRunner,
    "mock": MockCommandRunner,
}

_PROVIDERS: Dict[str, Callable[[], ContainerProvider]] = {
    "mock": MockContainerProvider,
}


def register_command_runner(runner_id: str, factory: Callable[[], CommandRunner]) -> None:
    """Register a command runner implementation."""
    _RUNNERS[runner_id] = factory
    logger.debug(f"Registered command runner: {runner_id}")


def register_container_provider(
    provider_id: str,
    factory: Callable[[], ContainerProvider],
) -> None:
    """Register a container provider implementation."""
    _PROVIDERS[provider_id] = factory
    logger.debug(f"Registered container provider: {provider_id}")


def list_command_runners() -> List[str]:
    return sorted(_RUNNERS)


def list_container_providers() -> List[str]:
    return sorted(_PROVIDERS)


def create_command_runner(runner_id: str) -> CommandRunner:
    """
    Create a command runner.

    Raises:
        ValueError: If runner_id is not registered
    """
    factory = _RUNNERS.get(runner_id)
    if factory is None:
        raise ValueError(
            f"Unsupported command runner: {runner_id}. "
            f"Supported: {', '.join(list_command_runners())}"
        )
    return factory()


def create_container_provider(provider_id: str) -> ContainerProvider:
    """
    Create a container provider.

    Raises:
        ValueError: If provider_id is not registered
    """
    factory = _PROVIDERS.get(provider_id)
    if factory is None:
        raise ValueError(
            f"Unsupported container provider: {provider_id}. "
            f"Supported: {', '.join(list_container_providers())}"
        )
    return factory()
