"""API Router.

Combines all sub-routers into a single router with prefix /api.
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .cart import router as cart_router
from .listing import router as listing_router

router = APIRouter(prefix="/api")

router.include_router(auth_router)
router.include_router(listing_router)
router.include_router(cart_router)

__all__ = ["router"]
