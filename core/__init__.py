"""
Core Module Package.

This package contains the infrastructure shared by every
runtime package.

Components:
- exceptions: Base exception hierarchy
"""

from .exceptions import (
    Severity,
    GearRuntimeException,
    ConfigurationError,
    InvalidConfigError,
    HookError,
    LifecycleError,
    StateTransitionError,
)
