"""
Gear Runtime - Cartridge Listener Base.

============================================================
PURPOSE
============================================================
Cartridge listeners are invoked by cartridges at points in
their lifecycle, such as after a hook completes. They react
to the results of cartridge actions and attach supplementary
information to the cartridge.

SUPPORTED EVENTS:

    {hook_name}_hook_completed(HookEvent)
        - fired after a successful hook execution

A listener is invoked only if it both handles the event and
supports the cartridge name. Otherwise it is skipped.

============================================================
"""

from typing import Callable, Dict

from ..types import HookEvent


EventHandler = Callable[[HookEvent], None]


class CartridgeListener:
    """
    Base class for cartridge listeners.

    Subclasses declare their events in `handlers()` and the
    cartridges they apply to in `supports()`.
    """

    critical: bool = False
    """If True, a failure in this listener aborts the hook call."""

    @property
    def name(self) -> str:
        return type(self).__name__

    def handlers(self) -> Dict[str, EventHandler]:
        """Mapping of event name to handler."""
        return {}

    def supports(self, cartridge_name: str) -> bool:
        """Whether this listener applies to `cartridge_name`."""
        return False

    def handles(self, event: str) -> bool:
        return event in self.handlers()

    def handle(self, event: str, args: HookEvent) -> None:
        """
        Dispatch `event` to its handler.

        Raises:
            KeyError: If the listener does not handle `event`
        """
        self.handlers()[event](args)
