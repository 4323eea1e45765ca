"""
Gear Runtime - Cartridge Listeners.

Post-hook observers that attach derived state to cartridges.
"""

from typing import List

from .base import CartridgeListener, EventHandler
from .database import (
    DB_METADATA_KEY,
    DatabaseCartListener,
    scrape_connection,
)


def default_listeners() -> List[CartridgeListener]:
    """Listeners registered on every new cartridge."""
    return [DatabaseCartListener()]


__all__ = [
    "CartridgeListener",
    "EventHandler",
    "DatabaseCartListener",
    "DB_METADATA_KEY",
    "scrape_connection",
    "default_listeners",
]
