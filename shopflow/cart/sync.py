"""
Cart change propagation.

The Cart view works on a copy of the listing's cart. After a mutation the
store hands the full resulting cart to this bridge, which forwards it as a
typed CartChanged event to subscribers (the Listing view), which replace
their copy wholesale.

Which kinds of change cross the bridge depends on the sync mode:

- legacy: only removals, as the first mobile release did. Quantity changes
  and checkout clearing stay local to the Cart view.
- unified: every mutation, so the listing always mirrors the cart.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from shopflow.config import SYNC_MODE_LEGACY, SYNC_MODE_UNIFIED, get_settings
from shopflow.logging import get_logger

from .models import CartLineItem

logger = get_logger(__name__)


class ChangeKind(str, Enum):
    ADDED = "added"
    QUANTITY_CHANGED = "quantity_changed"
    REMOVED = "removed"
    CLEARED = "cleared"


class SyncMode(str, Enum):
    LEGACY = SYNC_MODE_LEGACY
    UNIFIED = SYNC_MODE_UNIFIED


PROPAGATED_KINDS: dict[SyncMode, frozenset[ChangeKind]] = {
    SyncMode.LEGACY: frozenset({ChangeKind.REMOVED}),
    SyncMode.UNIFIED: frozenset(ChangeKind),
}


@dataclass(frozen=True)
class CartChanged:
    """The cart after a mutation, as seen by subscribers."""
    kind: ChangeKind
    items: tuple[CartLineItem, ...]

    def to_dicts(self) -> list[dict]:
        return [item.to_dict() for item in self.items]


CartListener = Callable[[CartChanged], None]
# `update_cart_items(items)` callback: receives the full item list
ItemsCallback = Callable[[list[CartLineItem]], None]


class Subscription:
    """Handle returned by `subscribe`; call `cancel()` to stop receiving events."""

    def __init__(self, bridge: "CartSyncBridge", listener: CartListener):
        self._bridge = bridge
        self.listener = listener

    @property
    def active(self) -> bool:
        return self.listener in self._bridge._listeners

    def cancel(self) -> None:
        self._bridge.unsubscribe(self.listener)


class CartSyncBridge:
    """Forwards cart changes from the Cart view back to its owner."""

    def __init__(self, mode: SyncMode | str | None = None):
        self.mode = SyncMode(mode or get_settings().cart_sync_mode)
        self._listeners: list[CartListener] = []

    @property
    def propagated_kinds(self) -> frozenset[ChangeKind]:
        return PROPAGATED_KINDS[self.mode]

    def subscribe(self, listener: CartListener) -> Subscription:
        if listener not in self._listeners:
            self._listeners.append(listener)
        return Subscription(self, listener)

    def subscribe_items(self, callback: ItemsCallback) -> Subscription:
        """Subscribe a plain `update_cart_items(items)` style callback."""
        def listener(event: CartChanged) -> None:
            callback([item.copy() for item in event.items])

        return self.subscribe(listener)

    def unsubscribe(self, listener: CartListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def should_propagate(self, kind: ChangeKind) -> bool:
        return kind in self.propagated_kinds

    def publish(self, kind: ChangeKind, items: Iterable[CartLineItem]) -> Optional[CartChanged]:
        """
        Send the full current cart to subscribers.

        Returns the event that was delivered, or None when the change kind
        is not propagated in this mode. No subscribers is not an error.
        """
        if not self.should_propagate(kind):
            logger.debug(f"Cart change {kind.value} kept local ({self.mode.value} mode)")
            return None

        event = CartChanged(kind=kind, items=tuple(item.copy() for item in items))
        for listener in list(self._listeners):
            listener(event)
        logger.debug(f"Cart change {kind.value} sent to {len(self._listeners)} subscriber(s)")
        return event


def bridge_for(
    on_cart_changed: Optional[ItemsCallback | Sequence[ItemsCallback]] = None,
    mode: SyncMode | str | None = None,
) -> CartSyncBridge:
    """Build a bridge with zero or more `update_cart_items` callbacks attached."""
    bridge = CartSyncBridge(mode)
    if on_cart_changed is None:
        return bridge
    callbacks = on_cart_changed if isinstance(on_cart_changed, (list, tuple)) else [on_cart_changed]
    for callback in callbacks:
        bridge.subscribe_items(callback)
    return bridge
