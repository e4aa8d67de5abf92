"""Cart state for one Cart view session."""
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional

from shopflow.config import get_settings
from shopflow.errors import NOTICE_CART_EMPTY, NOTICE_ITEM_REMOVED
from shopflow.logging import get_logger, sanitize_id_for_logging
from shopflow.services.money import add, format_money

from .models import CartLineItem
from .sync import CartSyncBridge, ChangeKind

logger = get_logger(__name__)

NoticeSink = Callable[[str], None]


class Direction(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


class CartState(str, Enum):
    EMPTY = "empty"
    FILLED = "filled"


class CartStore:
    """
    Owns the line items of one Cart view.

    Features:
    - Seeded from a copy of the listing's cart, never a shared reference
    - Quantity adjustment floors at 1; only `remove_item` drops an item
    - Mutations are handed to the sync bridge, which decides what reaches
      the listing
    - User-visible notices go out through `notify` as i18n keys
    """

    def __init__(
        self,
        bridge: Optional[CartSyncBridge] = None,
        notify: Optional[NoticeSink] = None,
        currency_symbol: Optional[str] = None,
    ):
        self.bridge = bridge or CartSyncBridge()
        self._notify = notify
        self.currency_symbol = currency_symbol or get_settings().currency_symbol
        self._items: list[CartLineItem] = []

    # ==================== STATE ====================

    @property
    def state(self) -> CartState:
        return CartState.FILLED if self._items else CartState.EMPTY

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def total_items(self) -> int:
        """Total number of units in the cart."""
        return sum(item.quantity for item in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def snapshot(self) -> list[CartLineItem]:
        """Copies of the current items, in insertion order."""
        return [item.copy() for item in self._items]

    def get_item(self, item_id: str) -> Optional[CartLineItem]:
        return next((item for item in self._items if item.id == item_id), None)

    # ==================== MUTATIONS ====================

    def initialize(self, items: Optional[Iterable[CartLineItem | Mapping[str, Any]]] = None) -> None:
        """
        Seed the cart from the listing's snapshot.

        An absent or empty snapshot leaves the cart EMPTY and shows the
        "cart is empty" notice. Items are copied; a falsy quantity becomes 1.
        Repeated ids are merged into the first occurrence.
        """
        incoming = list(items) if items else []
        if not incoming:
            self._items = []
            logger.info("Cart opened empty")
            self._emit_notice(NOTICE_CART_EMPTY)
            return

        seeded: list[CartLineItem] = []
        by_id: dict[str, CartLineItem] = {}
        for raw in incoming:
            item = CartLineItem.coerce(raw)
            existing = by_id.get(item.id)
            if existing is not None:
                existing.quantity += item.quantity
                continue
            by_id[item.id] = item
            seeded.append(item)

        self._items = seeded
        logger.info(f"Cart opened with {len(seeded)} item(s)")

    def add_item(self, item: CartLineItem | Mapping[str, Any]) -> CartLineItem:
        """Append an item, or add its quantity to the line with the same id."""
        new_item = CartLineItem.coerce(item)
        existing = self.get_item(new_item.id)
        if existing is not None:
            existing.quantity += new_item.quantity
            result = existing
        else:
            self._items.append(new_item)
            result = new_item

        self.bridge.publish(ChangeKind.ADDED, self._items)
        return result

    def adjust_quantity(self, item_id: str, direction: Direction | str) -> Optional[CartLineItem]:
        """
        Step an item's quantity by one.

        Increase is unconditional; decrease stops at 1 and never removes.
        Unknown ids leave the cart untouched and return None.
        """
        direction = Direction(direction)
        item = self.get_item(item_id)
        if item is None:
            logger.debug(f"adjust_quantity: no item {sanitize_id_for_logging(item_id)}")
            return None

        if direction is Direction.INCREASE:
            item.quantity += 1
        else:
            item.quantity = max(item.quantity - 1, 1)

        self.bridge.publish(ChangeKind.QUANTITY_CHANGED, self._items)
        return item

    def remove_item(self, item_id: str) -> bool:
        """
        Delete an item and report the resulting cart to the listing.

        Returns False (and does nothing) when the id is not in the cart,
        so removing twice has the same result as removing once.
        """
        remaining = [item for item in self._items if item.id != item_id]
        if len(remaining) == len(self._items):
            logger.debug(f"remove_item: no item {sanitize_id_for_logging(item_id)}")
            return False

        self._items = remaining
        self.bridge.publish(ChangeKind.REMOVED, self._items)
        logger.info(f"Removed item {sanitize_id_for_logging(item_id)}, {len(remaining)} left")
        self._emit_notice(NOTICE_ITEM_REMOVED)
        return True

    def clear(self) -> None:
        """Drop every item; the bridge decides whether the listing hears of it."""
        self._items = []
        self.bridge.publish(ChangeKind.CLEARED, self._items)

    # ==================== PRICING ====================

    def compute_total(self) -> Decimal:
        """Sum of unit price times quantity over all items; 0 when empty."""
        total = Decimal("0")
        for item in self._items:
            total = add(total, item.line_total)
        return total

    def display_total(self) -> str:
        """Total rounded to cents with the currency symbol ("$25.50")."""
        return format_money(self.compute_total(), self.currency_symbol)

    def summary(self) -> dict:
        """Cart contents and totals for API responses."""
        return {
            "state": self.state.value,
            "items": [
                {**item.to_dict(), "line_total": format_money(item.line_total, self.currency_symbol)}
                for item in self._items
            ],
            "total_items": self.total_items,
            "total": str(self.compute_total()),
            "display_total": self.display_total(),
        }

    def _emit_notice(self, key: str) -> None:
        if self._notify is not None:
            self._notify(key)
