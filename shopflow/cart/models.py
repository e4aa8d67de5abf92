"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Mapping

from shopflow.services.money import format_money, multiply, parse_price


@dataclass
class CartLineItem:
    """
    Single product entry in a cart.

    `price` is kept as the display string the listing provides ("$10.00");
    it is parsed once here, so a malformed price fails at ingestion with
    InvalidPriceError instead of corrupting a total later.
    """
    id: str
    name: str
    price: str
    image: str = ""
    quantity: int = 1
    unit_price: Decimal = field(init=False, repr=False)

    def __post_init__(self):
        self.unit_price = parse_price(self.price)
        # Absent or falsy quantity means one unit
        if not self.quantity:
            self.quantity = 1
        is_count = isinstance(self.quantity, int) and not isinstance(self.quantity, bool)
        if not is_count or self.quantity < 1:
            raise ValueError(f"quantity must be a positive integer, got {self.quantity!r}")

    @property
    def line_total(self) -> Decimal:
        """Unit price times quantity, unrounded."""
        return multiply(self.unit_price, self.quantity)

    def copy(self) -> "CartLineItem":
        return replace(self)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartLineItem":
        """Create from a listing payload; missing quantity defaults to 1."""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            price=data["price"],
            image=data.get("image") or "",
            quantity=data.get("quantity") or 1,
        )

    @classmethod
    def coerce(cls, item: "CartLineItem | Mapping[str, Any]") -> "CartLineItem":
        """Copy an item or build one from a mapping."""
        if isinstance(item, CartLineItem):
            return item.copy()
        return cls.from_dict(item)


@dataclass(frozen=True)
class CheckoutResult:
    """Transient result of a successful checkout."""
    total_amount: Decimal
    item_count: int
    currency_symbol: str = "$"

    @property
    def display_total(self) -> str:
        return format_money(self.total_amount, self.currency_symbol)

    def to_dict(self) -> dict:
        return {
            "total_amount": str(self.total_amount),
            "display_total": self.display_total,
            "item_count": self.item_count,
        }
