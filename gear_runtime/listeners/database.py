"""
Gear Runtime - Database Cartridge Listener.

============================================================
PURPOSE
============================================================
Scrapes connectivity details (IP, port and credentials) from
the configure hook output of data-store cartridges and
attaches them to the cartridge as a DbConnection.

Recognised output lines:

    Root User: <username>
    Root Password: <password>
    <prefix>://<a.b.c.d>:<port>

where <prefix> is the cartridge name up to the first hyphen
(mysql-5.1 -> mysql). The last matching line of each kind wins.

============================================================
"""

import logging
import re
from typing import Dict, FrozenSet, Iterable

from ..logging_utils import mask_connection
from ..types import DbConnection, HookEvent, hook_completed_event
from .base import CartridgeListener, EventHandler


logger = logging.getLogger(__name__)


USERNAME_PATTERN = re.compile(r"Root User: (\S+)")
PASSWORD_PATTERN = re.compile(r"Root Password: (\S+)")

DB_METADATA_KEY = "db"


def address_pattern(cartridge_name: str) -> "re.Pattern[str]":
    """Pattern for `<prefix>://ip:port` derived from the cartridge name."""
    prefix = cartridge_name.split("-", 1)[0]
    return re.compile(rf"{re.escape(prefix)}://(\d+\.\d+\.\d+\.\d+):(\d+)")


def scrape_connection(cartridge_name: str, output: Iterable[str]) -> DbConnection:
    """Build a DbConnection from hook output lines."""
    ip_pattern = address_pattern(cartridge_name)
    db = DbConnection()

    for line in output:
        match = USERNAME_PATTERN.search(line)
        if match:
            db.username = match.group(1)

        match = PASSWORD_PATTERN.search(line)
        if match:
            db.password = match.group(1)

        match = ip_pattern.search(line)
        if match:
            db.ip = match.group(1)
            db.port = match.group(2)

    return db


class DatabaseCartListener(CartridgeListener):
    """Attaches a DbConnection to data-store cartridges after configure."""

    SUPPORTED_CARTRIDGES: FrozenSet[str] = frozenset({
        "mysql-5.1",
        "mongodb-2.0",
        "postgresql-8.4",
    })

    def supports(self, cartridge_name: str) -> bool:
        return cartridge_name in self.SUPPORTED_CARTRIDGES

    def handlers(self) -> Dict[str, EventHandler]:
        return {
            hook_completed_event("configure"): self.configure_hook_completed,
        }

    def configure_hook_completed(self, args: HookEvent) -> None:
        logger.info(f"{self.name} is processing configure hook results")

        cart = args.cart
        db = scrape_connection(cart.name, args.output)

        logger.info(
            f"{self.name} is adding a DbConnection to cartridge {cart.name}: "
            f"{mask_connection(db)}"
        )
        cart.metadata[DB_METADATA_KEY] = db
