"""
Shared Dependencies for Routers

Session lookup from the bearer token and translation of domain errors to
HTTP errors.
"""
from typing import NoReturn

from fastapi import Header, HTTPException

from shopflow.errors import (
    ERROR_INVALID_SESSION,
    EmptyCartError,
    IncompleteInputError,
    InvalidCredentialsError,
    InvalidPriceError,
    ProductNotFoundError,
    ScreenStateError,
    ShopflowError,
)
from shopflow.flow import ShoppingSession, get_session_registry
from shopflow.i18n import get_text

_STATUS_BY_ERROR: tuple[tuple[type[ShopflowError], int], ...] = (
    (IncompleteInputError, 401),
    (InvalidCredentialsError, 401),
    (EmptyCartError, 400),
    (ProductNotFoundError, 404),
    (ScreenStateError, 409),
    (InvalidPriceError, 422),
)


async def get_session(authorization: str = Header(None, alias="Authorization")) -> ShoppingSession:
    """Resolve `Authorization: Bearer <session_token>` to a live session."""
    if not authorization:
        raise HTTPException(status_code=401, detail=ERROR_INVALID_SESSION)

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail=ERROR_INVALID_SESSION)

    session = get_session_registry().get(parts[1])
    if session is None:
        raise HTTPException(status_code=401, detail=ERROR_INVALID_SESSION)
    return session


def session_view(session: ShoppingSession, **payload) -> dict:
    """Common response envelope: current screen plus notices to show."""
    return {
        "screen": session.screen.value,
        "notices": [notice.to_dict() for notice in session.drain_notices()],
        **payload,
    }


def raise_http_error(session: ShoppingSession, error: ShopflowError) -> NoReturn:
    """Re-raise a domain error as an HTTPException carrying the notices."""
    status_code = next(
        (status for error_cls, status in _STATUS_BY_ERROR if isinstance(error, error_cls)),
        400,
    )
    message = get_text(error.message_key, session.lang) if error.message_key else error.message
    detail = session_view(session, code=error.code, message=message)
    raise HTTPException(status_code=status_code, detail=detail) from error
