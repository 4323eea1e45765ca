"""
Gear Runtime - Gear.

============================================================
PURPOSE
============================================================
A gear owns a set of cartridges and the container they run
in.

TEARDOWN ORDER:
    Cartridges actually have a dependency graph, but only the
    two-tier ordering is enforced here: every EMBEDDED cartridge
    is deconfigured before any STANDARD one, because a standard
    deconfigure hook may still talk to an embedded dependency
    (e.g. its database). Only then is the container released.

CALLER OBLIGATIONS:
- Call create() before running cartridge hooks
- Call destroy() once; a failed teardown is not rolled back

============================================================
"""

import logging
import traceback
import uuid
from typing import TYPE_CHECKING, Dict, List, Optional

from .adapters.base import ContainerHandle
from .cartridge import Cartridge
from .state_machine import CARTRIDGE_MUTABLE_STATES, GearStateMachine
from .types import CartridgeType, ContainerSpec, GearState

if TYPE_CHECKING:
    from .application import Application
    from .context import RuntimeContext


logger = logging.getLogger(__name__)


def gen_small_uuid() -> str:
    """32 hex characters, a uuid without dashes."""
    return uuid.uuid4().hex


class Gear:
    """
    A gear associated with an application.

    NOTE: Instantiating a Gear is not enough for it to be used;
    call create() before performing cartridge operations.
    """

    def __init__(
        self,
        app: "Application",
        context: "RuntimeContext",
        gear_uuid: Optional[str] = None,
    ):
        self._uuid = gear_uuid or gen_small_uuid()
        self._app = app
        self._context = context
        self._carts: Dict[str, Cartridge] = {}
        self._container: Optional[ContainerHandle] = None
        self._state = GearStateMachine(self._uuid)

    # --------------------------------------------------------
    # Inspection
    # --------------------------------------------------------

    @property
    def uuid(self) -> str:
        return self._uuid

    @property
    def app(self) -> "Application":
        return self._app

    @property
    def context(self) -> "RuntimeContext":
        return self._context

    @property
    def carts(self) -> Dict[str, Cartridge]:
        return self._carts

    @property
    def container(self) -> Optional[ContainerHandle]:
        return self._container

    @property
    def state(self) -> GearState:
        return self._state.state

    @property
    def state_machine(self) -> GearStateMachine:
        return self._state

    def default_cart(self) -> Optional[Cartridge]:
        """The first cartridge added to the gear."""
        return next(iter(self._carts.values()), None)

    def carts_of_type(self, cartridge_type: CartridgeType) -> List[Cartridge]:
        return [c for c in self._carts.values() if c.cartridge_type == cartridge_type]

    # --------------------------------------------------------
    # Lifecycle
    # --------------------------------------------------------

    def container_spec(self) -> ContainerSpec:
        return ContainerSpec(
            application_uuid=self._app.uuid,
            gear_uuid=self._uuid,
            application_name=self._app.name,
            container_name=self._app.name,
            namespace=self._app.account.domain,
        )

    def create(self) -> None:
        """
        Allocate the container for this gear.

        Allocation failure is fatal: the gear moves to FAILED_CREATE
        and the original exception is re-raised unchanged.
        """
        self._state.require({GearState.UNINITIALIZED}, "create")
        logger.info(f"Creating new gear {self._uuid} for application {self._app.name}")

        try:
            self._container = self._context.container_provider.create(self.container_spec())
        except Exception as e:
            logger.error(str(e))
            logger.error("".join(traceback.format_exception(type(e), e, e.__traceback__)))
            self._container = None
            self._state.transition(GearState.FAILED_CREATE, reason=type(e).__name__)
            raise

        self._state.transition(GearState.ACTIVE)

    def add_cartridge(
        self,
        cart_name: str,
        cartridge_type: CartridgeType = CartridgeType.STANDARD,
    ) -> Cartridge:
        """
        Create a cartridge and associate it with this gear.

        NOTE: The cartridge is instantiated, but no hooks (such as
        configure) are executed.
        """
        self._state.require(CARTRIDGE_MUTABLE_STATES, "add_cartridge")

        cart = Cartridge(cart_name, self, cartridge_type)
        self._carts[cart.name] = cart
        return cart

    def destroy(self) -> None:
        """
        Deconfigure every cartridge, embedded first, then release
        the container.

        Any hook failure propagates immediately; the gear stays
        ACTIVE and the container is not released.
        """
        self._state.require({GearState.ACTIVE}, "destroy")

        logger.info(
            f"Deconfiguring all cartridges on gear {self._uuid} "
            f"of application {self._app.name}"
        )

        for cart in self.carts_of_type(CartridgeType.EMBEDDED):
            cart.deconfigure()

        for cart in self.carts_of_type(CartridgeType.STANDARD):
            cart.deconfigure()

        logger.info(f"Destroying gear {self._uuid} of application {self._app.name}")
        self._container.destroy()
        self._container = None
        self._state.transition(GearState.DESTROYED)
