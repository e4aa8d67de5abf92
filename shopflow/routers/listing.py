"""
Listing Router

Product list and the session's own cart, plus opening the cart screen.
"""
from fastapi import APIRouter, Depends

from shopflow.catalog import Catalog
from shopflow.errors import ShopflowError
from shopflow.flow import ShoppingSession
from shopflow.logging import get_logger, sanitize_id_for_logging

from .deps import get_session, raise_http_error, session_view
from .models import AddToCartRequest

logger = get_logger(__name__)

router = APIRouter(tags=["listing"])


def _listing_cart(session: ShoppingSession) -> list[dict]:
    return [item.to_dict() for item in session.listing.cart_items]


@router.get("/products")
async def get_products():
    """Products available on the listing screen."""
    return {"products": [product.to_dict() for product in Catalog()]}


@router.get("/listing/cart")
async def get_listing_cart(session: ShoppingSession = Depends(get_session)):
    """The listing's copy of the cart."""
    try:
        session.require_listing()
    except ShopflowError as e:
        raise_http_error(session, e)
    return session_view(session, items=_listing_cart(session))


@router.post("/listing/cart")
async def add_to_listing_cart(request: AddToCartRequest, session: ShoppingSession = Depends(get_session)):
    """Add one unit of a product to the listing's cart."""
    async with session.lock:
        try:
            listing = session.require_listing()
            item = listing.add_to_cart(request.product_id)
        except ShopflowError as e:
            raise_http_error(session, e)
        logger.info(f"Added product {sanitize_id_for_logging(item.id)} (qty {item.quantity})")
        return session_view(session, items=_listing_cart(session))


@router.post("/listing/open-cart")
async def open_cart(session: ShoppingSession = Depends(get_session)):
    """Open the cart screen with a copy of the listing's cart."""
    async with session.lock:
        try:
            session.require_listing().open_cart()
        except ShopflowError as e:
            raise_http_error(session, e)
        return session_view(session, cart=session.cart.store.summary())
