"""
Cart Router

Cart screen endpoints. Amounts are returned as strings (exact Decimal) with
a rounded display value next to them.
"""
from fastapi import APIRouter, Depends

from shopflow.errors import ShopflowError
from shopflow.flow import Screen, ShoppingSession
from shopflow.i18n import get_text
from shopflow.logging import get_logger

from .deps import get_session, raise_http_error, session_view
from .models import AdjustQuantityRequest

logger = get_logger(__name__)

router = APIRouter(tags=["cart"])


def _cart_view(session: ShoppingSession, **payload) -> dict:
    summary = session.cart.store.summary()
    summary["total_label"] = get_text("cart.total", session.lang, total=summary["display_total"])
    return session_view(session, cart=summary, **payload)


@router.get("/cart")
async def get_cart(session: ShoppingSession = Depends(get_session)):
    """Current contents and total of the open cart screen."""
    try:
        session.require_cart()
    except ShopflowError as e:
        raise_http_error(session, e)
    return _cart_view(session)


@router.patch("/cart/items/{item_id}")
async def adjust_cart_item(
    item_id: str,
    request: AdjustQuantityRequest,
    session: ShoppingSession = Depends(get_session),
):
    """Increase or decrease an item's quantity (never below 1)."""
    async with session.lock:
        try:
            session.require_cart().adjust_quantity(item_id, request.direction)
        except ShopflowError as e:
            raise_http_error(session, e)
        return _cart_view(session)


@router.delete("/cart/items/{item_id}")
async def remove_cart_item(item_id: str, session: ShoppingSession = Depends(get_session)):
    """Remove an item; the listing's cart is updated as well."""
    async with session.lock:
        try:
            removed = session.require_cart().remove_item(item_id)
        except ShopflowError as e:
            raise_http_error(session, e)
        return _cart_view(session, removed=removed)


@router.post("/cart/checkout")
async def checkout(session: ShoppingSession = Depends(get_session)):
    """Compute the total, empty the cart and schedule the return to login."""
    async with session.lock:
        try:
            result = session.require_cart().checkout()
        except ShopflowError as e:
            raise_http_error(session, e)
        return _cart_view(session, checkout=result.to_dict())


@router.post("/cart/close")
async def close_cart(session: ShoppingSession = Depends(get_session)):
    """Leave the cart screen and go back to the listing."""
    async with session.lock:
        try:
            session.require_cart()
        except ShopflowError as e:
            raise_http_error(session, e)
        session.navigate_to(Screen.LISTING)
        return session_view(session)
