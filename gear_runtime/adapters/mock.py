"""
Gear Runtime - Mock Adapters.

============================================================
PURPOSE
============================================================
In-memory collaborators for tests and dry runs.

FEATURES:
- Scripted hook results keyed by hook name
- Full record of every executed command
- Configurable container allocation failure

============================================================
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..errors import ContainerAllocationError
from ..types import CommandResult, ContainerSpec
from .base import CommandRunner, ContainerHandle, ContainerProvider


logger = logging.getLogger(__name__)


# ============================================================
# COMMAND RUNNER
# ============================================================

@dataclass
class ExecutedCommand:
    """A command seen by MockCommandRunner."""

    command: str
    privilege_user: str
    privilege_role: str
    privilege_type: str
    timeout_seconds: float


class MockCommandRunner(CommandRunner):
    """
    Returns scripted results instead of running anything.

    A result is picked by the first registered key that appears
    in the hook path segment of the command (`/info/hooks/<key> `).
    Unscripted commands succeed with no output.
    """

    runner_id = "mock"

    def __init__(self, default: Optional[CommandResult] = None):
        self._default = default or CommandResult(exit_code=0)
        self._scripted: Dict[str, CommandResult] = {}
        self.executed: List[ExecutedCommand] = []

    def script(
        self,
        hook: str,
        exit_code: int = 0,
        output: Optional[List[str]] = None,
        timed_out: bool = False,
    ) -> None:
        """Register the result returned for `hook`."""
        self._scripted[hook] = CommandResult(
            exit_code=exit_code,
            output=list(output or []),
            timed_out=timed_out,
        )

    @property
    def commands(self) -> List[str]:
        return [e.command for e in self.executed]

    def execute(
        self,
        command: str,
        privilege_user: str,
        privilege_role: str,
        privilege_type: str,
        timeout_seconds: float,
    ) -> CommandResult:
        self.executed.append(ExecutedCommand(
            command=command,
            privilege_user=privilege_user,
            privilege_role=privilege_role,
            privilege_type=privilege_type,
            timeout_seconds=timeout_seconds,
        ))

        for hook, result in self._scripted.items():
            if f"/info/hooks/{hook} " in command:
                return CommandResult(
                    exit_code=result.exit_code,
                    output=list(result.output),
                    timed_out=result.timed_out,
                )

        return CommandResult(
            exit_code=self._default.exit_code,
            output=list(self._default.output),
            timed_out=self._default.timed_out,
        )


# ============================================================
# CONTAINER
# ============================================================

class MockContainerHandle(ContainerHandle):
    """Container handle that only records its release."""

    def __init__(self, spec: ContainerSpec):
        self.spec = spec
        self.destroyed = False

    def destroy(self) -> None:
        self.destroyed = True
        logger.debug(f"Mock container for gear {self.spec.gear_uuid} destroyed")


@dataclass
class MockContainerProvider(ContainerProvider):
    """Container provider with injectable allocation failure."""

    provider_id = "mock"

    fail_with: Optional[BaseException] = None
    """Raised from create() when set."""

    created: List[MockContainerHandle] = field(default_factory=list)

    def create(self, spec: ContainerSpec) -> MockContainerHandle:
        if self.fail_with is not None:
            raise self.fail_with

        handle = MockContainerHandle(spec)
        self.created.append(handle)
        return handle

    @classmethod
    def failing(cls, message: str = "Container allocation failed") -> "MockContainerProvider":
        """Provider whose create() raises ContainerAllocationError."""
        return cls(fail_with=ContainerAllocationError(message))
