"""
Gear Runtime - Cartridge.

============================================================
PURPOSE
============================================================
A cartridge installed in a gear, driven through the hook
scripts it ships under `{cartridge_root}/{name}/info/hooks`.

HOOK PROTOCOL:
- Hooks are invoked as
      {hooks_path}/{hook} '{app}' '{domain}' {gear_uuid} {extra args}
  under the configured SELinux context with a hard timeout
- An exit code other than the expected one raises
  HookExecutionError and listeners are NOT notified
- On success, listeners receive "{hook}_hook_completed"

============================================================
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from .errors import HookExecutionError, ListenerError
from .listeners import DB_METADATA_KEY, CartridgeListener
from .types import (
    CartridgeType,
    DbConnection,
    HookEvent,
    HookResult,
    hook_completed_event,
)

if TYPE_CHECKING:
    from .gear import Gear


logger = logging.getLogger(__name__)


class Cartridge:
    """
    Represents a cartridge associated with a gear. Supports firing
    events and listener registration for cartridge-specific concerns.
    """

    def __init__(
        self,
        name: str,
        gear: "Gear",
        cartridge_type: CartridgeType = CartridgeType.STANDARD,
        listeners: Optional[List[CartridgeListener]] = None,
    ):
        self._name = name
        self._gear = gear
        self._type = cartridge_type

        # a place for cartridge specific helpers to put stuff
        self.metadata: Dict[str, Any] = {}

        config = gear.context.config
        local_root = (
            config.cartridge_root
            if cartridge_type == CartridgeType.STANDARD
            else config.embedded_cartridge_root
        )
        self._path = f"{local_root}/{name}"
        self._hooks_path = f"{self._path}/info/hooks"

        if listeners is None:
            listeners = gear.context.listener_factory()
        self.listeners: List[CartridgeListener] = list(listeners)

    # --------------------------------------------------------
    # Identity
    # --------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def gear(self) -> "Gear":
        return self._gear

    @property
    def cartridge_type(self) -> CartridgeType:
        return self._type

    @property
    def path(self) -> str:
        return self._path

    @property
    def hooks_path(self) -> str:
        return self._hooks_path

    @property
    def db(self) -> Optional[DbConnection]:
        """Connectivity details attached by a listener, if any."""
        return self.metadata.get(DB_METADATA_KEY)

    def __repr__(self) -> str:
        return f"Cartridge(name={self._name!r}, type={self._type.value})"

    # --------------------------------------------------------
    # Lifecycle hooks
    # --------------------------------------------------------

    def configure(self) -> int:
        return self.run_hook("configure")

    def deconfigure(self) -> int:
        return self.run_hook("deconfigure")

    def start(self) -> int:
        return self.run_hook("start")

    def stop(self) -> int:
        return self.run_hook("stop")

    def status(self) -> int:
        return self.run_hook("status")

    # --------------------------------------------------------
    # Hook execution
    # --------------------------------------------------------

    def build_hook_command(self, hook: str, extra_args: Sequence[str] = ()) -> str:
        """Command line used to invoke `hook`."""
        app = self._gear.app
        return (
            f"{self._hooks_path}/{hook} '{app.name}' '{app.account.domain}' "
            f"{self._gear.uuid} {' '.join(extra_args)}"
        )

    def run_hook(
        self,
        hook: str,
        expected_exitcode: int = 0,
        extra_args: Optional[Sequence[str]] = None,
    ) -> int:
        """
        Invoke an arbitrary hook on the cartridge.

        Extra arguments are appended after the gear uuid. The hook
        runs in the SELinux context defined by the runtime config.

        Returns:
            The hook exit code

        Raises:
            HookExecutionError: If the exit code is not expected_exitcode
        """
        return self.run_hook_output(hook, expected_exitcode, extra_args).exit_code

    def run_hook_output(
        self,
        hook: str,
        expected_exitcode: int = 0,
        extra_args: Optional[Sequence[str]] = None,
    ) -> HookResult:
        """Like run_hook, but returns the exit code and captured output."""
        app = self._gear.app
        logger.info(
            f"Running {hook} hook for cartridge {self._name} in gear "
            f"{self._gear.uuid} for application {app.name}"
        )

        config = self._gear.context.config
        command = self.build_hook_command(hook, extra_args or ())

        result = self._gear.context.runner.execute(
            command,
            config.privilege_user,
            config.privilege_role,
            config.privilege_type,
            config.hook_timeout_seconds,
        )

        if result.timed_out or result.exit_code != expected_exitcode:
            raise HookExecutionError(
                command,
                result.exit_code,
                result.output,
                timed_out=result.timed_out,
                expected_exit_code=expected_exitcode,
            )

        self.notify_listeners(
            hook_completed_event(hook),
            HookEvent(cart=self, exit_code=result.exit_code, output=list(result.output)),
        )

        return HookResult(
            command=command,
            exit_code=result.exit_code,
            output=list(result.output),
        )

    # --------------------------------------------------------
    # Listeners
    # --------------------------------------------------------

    def add_listener(self, listener: CartridgeListener) -> None:
        self.listeners.append(listener)

    def notify_listeners(self, event: str, args: HookEvent) -> None:
        """
        Notify listeners of an event, in registration order.

        Listeners that do not handle the event or do not support
        this cartridge are skipped. A failing listener is logged
        and skipped unless it is critical, in which case the
        failure is raised as ListenerError.
        """
        for listener in list(self.listeners):
            if not (listener.handles(event) and listener.supports(self._name)):
                continue

            logger.info(f"Notifying {listener.name} of {event} event")
            try:
                listener.handle(event, args)
            except Exception as e:
                if listener.critical:
                    raise ListenerError(listener.name, event, e) from e
                logger.error(
                    f"Listener {listener.name} failed handling {event} "
                    f"for cartridge {self._name}: {e}",
                    exc_info=True,
                )
