"""
Gear Runtime - Configuration.

============================================================
PURPOSE
============================================================
All configuration for gears and cartridges.

Replaces the process-wide globals (cartridge roots, selinux
context, hook timeout) with one explicit structure that is
passed into gear and cartridge construction.

Values come from the environment (a local .env file is
honoured) or from explicit keyword arguments.

============================================================
"""

import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv

from core.exceptions import InvalidConfigError


# ============================================================
# DEFAULTS
# ============================================================

DEFAULT_HOME_ROOT = "/var/lib/stickshift"
DEFAULT_CARTRIDGE_ROOT = "/usr/libexec/stickshift/cartridges"
DEFAULT_EMBEDDED_CARTRIDGE_ROOT = "/usr/libexec/stickshift/cartridges/embedded"

DEFAULT_PRIVILEGE_USER = "unconfined_u"
DEFAULT_PRIVILEGE_ROLE = "system_r"
DEFAULT_PRIVILEGE_TYPE = "libra_initrc_t"

DEFAULT_HOOK_TIMEOUT_SECONDS = 45


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidConfigError(key, raw, "must be an integer") from e


# ============================================================
# RUNTIME CONFIGURATION
# ============================================================

@dataclass
class RuntimeConfig:
    """Configuration for the gear runtime."""

    # Filesystem layout
    home_root: str = DEFAULT_HOME_ROOT
    """Root of gear home directories."""

    cartridge_root: str = DEFAULT_CARTRIDGE_ROOT
    """Root of standard cartridge definitions."""

    embedded_cartridge_root: str = DEFAULT_EMBEDDED_CARTRIDGE_ROOT
    """Root of embedded cartridge definitions."""

    # Privilege context for hook execution
    privilege_user: str = DEFAULT_PRIVILEGE_USER
    """SELinux user hooks run as."""

    privilege_role: str = DEFAULT_PRIVILEGE_ROLE
    """SELinux role hooks run as."""

    privilege_type: str = DEFAULT_PRIVILEGE_TYPE
    """SELinux type hooks run as."""

    hook_timeout_seconds: int = DEFAULT_HOOK_TIMEOUT_SECONDS
    """Hard timeout for a single hook."""

    # Accounts
    login_prefix: str = "cucumber-test"
    """Prefix of generated account logins."""

    # Logging
    log_level: str = "INFO"
    """Logging level."""

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration from environment variables.

        Raises:
            InvalidConfigError: a numeric variable is not an integer
        """
        load_dotenv()

        return cls(
            home_root=os.getenv("GEAR_HOME_ROOT", DEFAULT_HOME_ROOT),
            cartridge_root=os.getenv("GEAR_CARTRIDGE_ROOT", DEFAULT_CARTRIDGE_ROOT),
            embedded_cartridge_root=os.getenv(
                "GEAR_EMBEDDED_CARTRIDGE_ROOT", DEFAULT_EMBEDDED_CARTRIDGE_ROOT
            ),
            privilege_user=os.getenv("GEAR_SELINUX_USER", DEFAULT_PRIVILEGE_USER),
            privilege_role=os.getenv("GEAR_SELINUX_ROLE", DEFAULT_PRIVILEGE_ROLE),
            privilege_type=os.getenv("GEAR_SELINUX_TYPE", DEFAULT_PRIVILEGE_TYPE),
            hook_timeout_seconds=_env_int(
                "GEAR_HOOK_TIMEOUT_SECONDS", DEFAULT_HOOK_TIMEOUT_SECONDS
            ),
            login_prefix=os.getenv("GEAR_LOGIN_PREFIX", "cucumber-test"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.hook_timeout_seconds < 1:
            errors.append("hook_timeout_seconds must be at least 1")

        for key in ("home_root", "cartridge_root", "embedded_cartridge_root"):
            if not getattr(self, key):
                errors.append(f"{key} must not be empty")

        for key in ("privilege_user", "privilege_role", "privilege_type"):
            if not getattr(self, key):
                errors.append(f"{key} must not be empty")

        return errors

    def require_valid(self) -> "RuntimeConfig":
        """Raise InvalidConfigError on the first validation problem."""
        errors = self.validate()
        if errors:
            key = errors[0].split(" ", 1)[0]
            raise InvalidConfigError(key, getattr(self, key, None), errors[0])
        return self
