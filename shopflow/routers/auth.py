"""
Auth Router

Session creation and the login gate.
"""
from fastapi import APIRouter, Depends

from shopflow.errors import ShopflowError
from shopflow.flow import ShoppingSession, get_session_registry
from shopflow.logging import get_logger

from .deps import get_session, raise_http_error, session_view
from .models import CreateSessionRequest, LoginRequest

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/session")
async def create_session(request: CreateSessionRequest | None = None):
    """Open a new app session on the login screen."""
    session = get_session_registry().create(lang=request.language if request else None)
    return session_view(
        session,
        session_token=session.token,
        expires_at=session.expires_at.isoformat(),
        language=session.lang,
    )


@router.post("/auth/login")
async def login(request: LoginRequest, session: ShoppingSession = Depends(get_session)):
    """Check credentials; on success the session moves to the listing."""
    async with session.lock:
        try:
            result = session.submit_login(request.email, request.password)
            result.raise_for_failure()
        except ShopflowError as e:
            raise_http_error(session, e)
        return session_view(session, email=result.email)


@router.delete("/session")
async def close_session(session: ShoppingSession = Depends(get_session)):
    """Forget the session and cancel anything it still has pending."""
    get_session_registry().remove(session.token)
    return {"ok": True}
