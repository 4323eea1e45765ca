"""
Gear Runtime - Accounts and Applications.

============================================================
PURPOSE
============================================================
Bookkeeping around gears: a user account owns applications,
an application owns gears. Names and identifiers are
generated on construction.

============================================================
"""

import logging
import random
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .context import RuntimeContext
from .gear import Gear, gen_small_uuid


logger = logging.getLogger(__name__)

_DIGITS = "123456789"


def _random_digits(count: int) -> str:
    return "".join(random.choice(_DIGITS) for _ in range(count))


def gen_unique_login_and_domain(
    domain: Optional[str] = None,
    login_prefix: str = "cucumber-test",
) -> Tuple[str, str]:
    """Generate a login and, unless given, a `ci` + 8 digit domain."""
    if not domain:
        domain = "ci" + _random_digits(8)
    login = f"{login_prefix}_{domain}@example.com"
    return login, domain


def gen_unique_app_name() -> str:
    """`app` + 4 digits."""
    return "app" + _random_digits(4)


# ============================================================
# ACCOUNT
# ============================================================

class Account:
    """A user account. A login and domain are generated on init."""

    def __init__(self, context: RuntimeContext, domain: Optional[str] = None):
        self.context = context
        self.name, self.domain = gen_unique_login_and_domain(
            domain, context.config.login_prefix
        )
        self.apps: List["Application"] = []

        logger.info(f"Created new account {self.name} with domain {self.domain}")

    def create_app(self) -> "Application":
        """Create a new Application associated with this account."""
        app = Application(self)
        logger.info(f"Created new application {app.name} for account {self.name}")
        self.apps.append(app)
        return app

    def default_app(self) -> Optional["Application"]:
        return self.apps[0] if self.apps else None


# ============================================================
# APPLICATION
# ============================================================

class Application:
    """
    An application associated with an account. The name and uuid
    are generated on init.
    """

    def __init__(
        self,
        account: Account,
        name: Optional[str] = None,
        app_uuid: Optional[str] = None,
    ):
        self.name = name or gen_unique_app_name()
        self.uuid = app_uuid or gen_small_uuid()
        self.account = account
        self.gears: List[Gear] = []

        # first class stand-in for the hot_deploy marker file
        self.hot_deploy_enabled = False

    @property
    def context(self) -> RuntimeContext:
        return self.account.context

    def create_gear(self) -> Gear:
        """Create and allocate a new empty gear for this application."""
        gear = Gear(self, self.context)
        gear.create()
        self.gears.append(gear)
        return gear

    def default_gear(self) -> Optional[Gear]:
        return self.gears[0] if self.gears else None

    def destroy(self) -> None:
        """Tear down the application by destroying each gear."""
        logger.info(f"Destroying application {self.name}")
        for gear in self.gears:
            gear.destroy()

    def current_cart_pids(self) -> Dict[str, str]:
        """
        Collect PIDs for every cartridge of this application.

        Reads `{home_root}/{gear}/{cart}/{run,pid}/*.pid` and maps
        each PID file's basename (without `.pid`) to its contents.

        NOTE: Duplicate PID file names across gears (scaled apps)
        overwrite each other.
        """
        home_root = Path(self.context.config.home_root)
        pids: Dict[str, str] = {}

        for gear in self.gears:
            for cart in gear.carts.values():
                cart_dir = home_root / gear.uuid / cart.name
                for sub in ("run", "pid"):
                    for pid_file in sorted((cart_dir / sub).glob("*.pid")):
                        logger.info(f"Reading pid file {pid_file} for cart {cart.name}")
                        pids[pid_file.stem] = pid_file.read_text().strip()

        return pids
