"""
Gear Runtime - Adapters Package.

Collaborator interfaces and their implementations:
- base: CommandRunner, ContainerProvider, ContainerHandle
- runcon: SELinux runcon-backed command runner
- mock: In-memory runner and container provider
- factory: Creation by identifier
"""

from .base import CommandRunner, ContainerHandle, ContainerProvider
from .runcon import RunconCommandRunner
from .mock import (
    ExecutedCommand,
    MockCommandRunner,
    MockContainerHandle,
    MockContainerProvider,
)
from .factory import (
    create_command_runner,
    create_container_provider,
    list_command_runners,
    list_container_providers,
    register_command_runner,
    register_container_provider,
)


__all__ = [
    "CommandRunner",
    "ContainerHandle",
    "ContainerProvider",
    "RunconCommandRunner",
    "ExecutedCommand",
    "MockCommandRunner",
    "MockContainerHandle",
    "MockContainerProvider",
    "create_command_runner",
    "create_container_provider",
    "list_command_runners",
    "list_container_providers",
    "register_command_runner",
    "register_container_provider",
]
