"""
Gear Runtime - Collaborator Interfaces.

============================================================
PURPOSE
============================================================
Abstract interfaces for the external capabilities the gear
runtime consumes.

- CommandRunner: executes a hook command under a privilege
  context with a hard timeout
- ContainerProvider: allocates the OS-level container for
  a gear and returns a handle
- ContainerHandle: releases an allocated container

DESIGN PRINCIPLES:
- Runtime logic never touches subprocess or the node directly
- Fully testable with mock adapters

============================================================
"""

from abc import ABC, abstractmethod

from ..types import CommandResult, ContainerSpec


# ============================================================
# COMMAND RUNNER
# ============================================================

class CommandRunner(ABC):
    """Executes shell commands under a privilege context."""

    runner_id: str = "abstract"

    @abstractmethod
    def execute(
        self,
        command: str,
        privilege_user: str,
        privilege_role: str,
        privilege_type: str,
        timeout_seconds: float,
    ) -> CommandResult:
        """
        Execute `command` and block until it exits or times out.

        Args:
            command: Full command line
            privilege_user: SELinux user
            privilege_role: SELinux role
            privilege_type: SELinux type
            timeout_seconds: Hard timeout

        Returns:
            CommandResult with output lines in emission order.
            A timeout is reported with timed_out=True, never raised.
        """


# ============================================================
# CONTAINER
# ============================================================

class ContainerHandle(ABC):
    """An allocated container, exclusively owned by one gear."""

    @abstractmethod
    def destroy(self) -> None:
        """Release the container."""


class ContainerProvider(ABC):
    """Allocates containers for gears."""

    provider_id: str = "abstract"

    @abstractmethod
    def create(self, spec: ContainerSpec) -> ContainerHandle:
        """
        Allocate a container.

        Raises:
            ContainerAllocationError: If allocation fails
        """
