"""
Gear Runtime - Error Taxonomy.

============================================================
PURPOSE
============================================================
Errors raised by cartridge hooks and gear lifecycle
operations.

NONE OF THESE ARE RETRIED:
- HookExecutionError propagates to the immediate caller
- ContainerAllocationError is fatal to the gear
- GearStateError signals a caller discipline violation

============================================================
"""

from typing import List, Optional

from core.exceptions import (
    HookError,
    LifecycleError,
    Severity,
    StateTransitionError,
)


# ============================================================
# HOOK ERRORS
# ============================================================

class HookExecutionError(HookError):
    """
    Hook exit code did not match the expected exit code.

    Carries the command, the observed exit code and the full
    captured output. A runner timeout is reported the same way.
    """

    def __init__(
        self,
        command: str,
        exit_code: int,
        output: Optional[List[str]] = None,
        timed_out: bool = False,
        expected_exit_code: int = 0,
    ):
        self.command = command
        self.exit_code = exit_code
        self.output = list(output or [])
        self.timed_out = timed_out
        self.expected_exit_code = expected_exit_code

        joined = "\n".join(self.output)
        message = f"Error ({exit_code}) running {command}: {joined}"
        if timed_out:
            message = f"Timed out: {message}"

        super().__init__(
            message,
            context={
                "command": command,
                "exit_code": exit_code,
                "expected_exit_code": expected_exit_code,
                "timed_out": timed_out,
            },
        )


class ListenerError(HookError):
    """A critical cartridge listener failed while handling an event."""

    def __init__(self, listener_name: str, event: str, cause: BaseException):
        self.listener_name = listener_name
        self.event = event
        super().__init__(
            f"Listener {listener_name} failed handling {event}: {cause}",
            context={"listener": listener_name, "event": event},
            cause=cause,
        )


# ============================================================
# LIFECYCLE ERRORS
# ============================================================

class ContainerAllocationError(LifecycleError):
    """The underlying container could not be allocated."""

    default_severity = Severity.CRITICAL

    def __init__(
        self,
        message: str,
        gear_uuid: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.gear_uuid = gear_uuid
        context = {"gear_uuid": gear_uuid} if gear_uuid else {}
        super().__init__(message, context=context, cause=cause)


class GearStateError(StateTransitionError):
    """Operation is not valid in the gear's current state."""

    def __init__(self, gear_uuid: str, current: str, target: str, reason: str = ""):
        self.gear_uuid = gear_uuid
        self.current = current
        self.target = target
        super().__init__(
            f"Gear {gear_uuid} cannot go from {current} to {target}"
            + (f": {reason}" if reason else ""),
            from_state=current,
            to_state=target,
            reason=reason or None,
            context={"gear_uuid": gear_uuid},
        )


__all__ = [
    "HookExecutionError",
    "ListenerError",
    "ContainerAllocationError",
    "GearStateError",
]
