"""
Screen controllers.

Each controller holds the logic behind one screen of the app and talks to
the outside world only through a Presenter (navigation, notices) and, for
the cart, a scheduler for the delayed return after checkout.
"""
from typing import Any, Callable, Optional

from shopflow.auth import AuthGate, AuthResult
from shopflow.cart import (
    CartLineItem,
    CartStore,
    CheckoutProcess,
    CheckoutResult,
    Direction,
    SyncMode,
    bridge_for,
)
from shopflow.cart.checkout import DelayScheduler
from shopflow.catalog import Catalog
from shopflow.i18n import DEFAULT_LANGUAGE
from shopflow.logging import get_logger

from .presenter import Notice, Presenter, Screen

logger = get_logger(__name__)

# Navigation params for the cart screen
PARAM_CART_ITEMS = "cart_items"
PARAM_UPDATE_CART_ITEMS = "update_cart_items"


def _notifier(presenter: Presenter, lang: str) -> Callable[[str], None]:
    def notify(key: str) -> None:
        presenter.present_notice(Notice.translated(key, lang))
    return notify


class LoginScreen:
    def __init__(self, presenter: Presenter, gate: Optional[AuthGate] = None, lang: str = DEFAULT_LANGUAGE):
        self.presenter = presenter
        self.gate = gate or AuthGate()
        self.lang = lang

    def submit(self, email: str, password: str) -> AuthResult:
        """Check credentials; go to the listing or show why not."""
        result = self.gate.authenticate(email, password)
        if result.ok:
            self.presenter.navigate_to(Screen.LISTING)
        else:
            self.presenter.present_notice(Notice.translated(result.message_key, self.lang))
        return result


class ListingScreen:
    """
    Product list plus the canonical cart of the session.

    The cart screen receives a copy of `cart_items` and reports back through
    `update_cart_items`, which replaces this copy wholesale.
    """

    def __init__(self, presenter: Presenter, catalog: Optional[Catalog] = None):
        self.presenter = presenter
        self.catalog = catalog or Catalog()
        self.cart_items: list[CartLineItem] = []

    def add_to_cart(self, product_id: str) -> CartLineItem:
        product = self.catalog.get(product_id)
        for item in self.cart_items:
            if item.id == product.id:
                item.quantity += 1
                return item
        item = CartLineItem.from_dict(product.to_cart_item())
        self.cart_items.append(item)
        return item

    def update_cart_items(self, items: list[CartLineItem]) -> None:
        self.cart_items = [item.copy() for item in items]
        logger.debug(f"Listing cart replaced, {len(self.cart_items)} item(s)")

    def open_cart(self) -> None:
        self.presenter.navigate_to(
            Screen.CART,
            {
                PARAM_CART_ITEMS: [item.copy() for item in self.cart_items],
                PARAM_UPDATE_CART_ITEMS: self.update_cart_items,
            },
        )


class CartScreen:
    """
    Cart view opened from the listing.

    `close()` must be called when the view goes away; it cancels a pending
    post-checkout return so it never acts on a dead view.
    """

    def __init__(
        self,
        presenter: Presenter,
        scheduler: DelayScheduler,
        params: Optional[dict[str, Any]] = None,
        lang: str = DEFAULT_LANGUAGE,
        sync_mode: Optional[SyncMode | str] = None,
        delay_ms: Optional[int] = None,
    ):
        params = params or {}
        self.presenter = presenter
        notify = _notifier(presenter, lang)

        self.bridge = bridge_for(params.get(PARAM_UPDATE_CART_ITEMS), mode=sync_mode)
        self.store = CartStore(bridge=self.bridge, notify=notify)
        self.checkout_process = CheckoutProcess(
            self.store,
            scheduler,
            on_finished=self._return_to_login,
            notify=notify,
            delay_ms=delay_ms,
        )
        self.closed = False
        self.store.initialize(params.get(PARAM_CART_ITEMS))

    def adjust_quantity(self, item_id: str, direction: Direction | str) -> Optional[CartLineItem]:
        return self.store.adjust_quantity(item_id, direction)

    def remove_item(self, item_id: str) -> bool:
        return self.store.remove_item(item_id)

    def checkout(self) -> CheckoutResult:
        return self.checkout_process.checkout()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.checkout_process.cancel()

    def _return_to_login(self) -> None:
        if self.closed:
            logger.warning("Post-checkout return fired after the cart view closed, ignoring")
            return
        logger.info("Checkout finished, returning to login")
        self.presenter.navigate_to(Screen.LOGIN)
