"""
Core Module - Exceptions.

============================================================
RESPONSIBILITY
============================================================
Defines the base exceptions shared by the gear runtime.

- Provides clear exception hierarchy
- Enables specific error handling
- Includes context for debugging

============================================================
EXCEPTION HIERARCHY
============================================================
GearRuntimeException (base)
├── ConfigurationError
│   └── InvalidConfigError
├── HookError
│   ├── HookExecutionError      (gear_runtime.errors)
│   └── ListenerError           (gear_runtime.errors)
└── LifecycleError
    ├── ContainerAllocationError (gear_runtime.errors)
    └── StateTransitionError
        └── GearStateError       (gear_runtime.errors)

============================================================
"""

from enum import Enum
from typing import Any, Dict, Optional


# ============================================================
# SEVERITY LEVELS
# ============================================================

class Severity(Enum):
    """Exception severity levels."""

    LOW = "low"
    """Minor issue, informational."""

    MEDIUM = "medium"
    """Moderate issue, requires attention."""

    HIGH = "high"
    """Serious issue, the current lifecycle operation is aborted."""

    CRITICAL = "critical"
    """The gear is unusable."""


# ============================================================
# BASE EXCEPTION
# ============================================================

class GearRuntimeException(Exception):
    """
    Base exception for all gear runtime errors.

    All exceptions carry:
    - severity: for log routing
    - context: for debugging
    - cause: the underlying exception, if any
    """

    default_severity: Severity = Severity.MEDIUM

    def __init__(
        self,
        message: str,
        severity: Optional[Severity] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)

        self.message = message
        self.severity = severity or self.default_severity
        self.context = context or {}
        self.cause = cause

        if cause:
            self.context["cause_type"] = type(cause).__name__
            self.context["cause_message"] = str(cause)

    def to_log_format(self) -> str:
        """Format exception as a single log line."""
        line = f"[{self.severity.value.upper()}] {type(self).__name__}: {self.message}"
        ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        if ctx_str:
            line = f"{line} | {ctx_str}"
        return line


# ============================================================
# CONFIGURATION ERRORS
# ============================================================

class ConfigurationError(GearRuntimeException):
    """Error in configuration."""

    default_severity = Severity.HIGH

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        actual_value: Optional[Any] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if config_key:
            context["config_key"] = config_key
        if actual_value is not None:
            context["actual_value"] = str(actual_value)[:100]

        super().__init__(message, context=context, **kwargs)


class InvalidConfigError(ConfigurationError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid configuration for {key}: {reason}",
            config_key=key,
            actual_value=value,
            context={"reason": reason},
        )


# ============================================================
# HOOK ERRORS
# ============================================================

class HookError(GearRuntimeException):
    """Base class for cartridge hook errors."""

    default_severity = Severity.HIGH


# ============================================================
# LIFECYCLE ERRORS
# ============================================================

class LifecycleError(GearRuntimeException):
    """Base class for gear lifecycle errors."""

    default_severity = Severity.HIGH


class StateTransitionError(LifecycleError):
    """Invalid state transition."""

    def __init__(
        self,
        message: str,
        from_state: Optional[str] = None,
        to_state: Optional[str] = None,
        reason: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if from_state:
            context["from_state"] = from_state
        if to_state:
            context["to_state"] = to_state
        if reason:
            context["reason"] = reason

        super().__init__(message, context=context, **kwargs)


__all__ = [
    "Severity",
    "GearRuntimeException",
    "ConfigurationError",
    "InvalidConfigError",
    "HookError",
    "LifecycleError",
    "StateTransitionError",
]
