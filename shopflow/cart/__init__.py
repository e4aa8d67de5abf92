"""Cart package: models, store, sync bridge and checkout."""
from .checkout import CheckoutProcess, CheckoutState
from .models import CartLineItem, CheckoutResult
from .store import CartState, CartStore, Direction
from .sync import CartChanged, CartSyncBridge, ChangeKind, SyncMode, bridge_for

__all__ = [
    "CartLineItem",
    "CheckoutResult",
    "CartState",
    "CartStore",
    "Direction",
    "CartChanged",
    "CartSyncBridge",
    "ChangeKind",
    "SyncMode",
    "bridge_for",
    "CheckoutProcess",
    "CheckoutState",
]
