"""
Per-device session state (in-memory).

A ShoppingSession is the explicit state container for one user of the app:
the current screen, the screen controllers alive on it and the notices not
yet shown. It is also the Presenter the controllers talk to, so navigation
rebuilds or tears down controllers the way the app's navigation stack does.
Nothing survives a process restart.
"""
import asyncio
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from shopflow.auth import AuthGate
from shopflow.cart import SyncMode
from shopflow.catalog import Catalog
from shopflow.config import get_settings
from shopflow.errors import ScreenStateError
from shopflow.i18n import detect_language
from shopflow.logging import get_logger, sanitize_id_for_logging

from .presenter import Notice, Screen
from .scheduler import AsyncioScheduler
from .screens import CartScreen, ListingScreen, LoginScreen

logger = get_logger(__name__)


class ShoppingSession:
    def __init__(
        self,
        token: str,
        gate: Optional[AuthGate] = None,
        catalog: Optional[Catalog] = None,
        lang: Optional[str] = None,
        sync_mode: Optional[SyncMode | str] = None,
        scheduler: Optional[AsyncioScheduler] = None,
        ttl: Optional[timedelta] = None,
    ):
        settings = get_settings()
        self.token = token
        self.lang = detect_language(lang or settings.language)
        self.sync_mode = SyncMode(sync_mode or settings.cart_sync_mode)
        self.catalog = catalog or Catalog()
        self.scheduler = scheduler or AsyncioScheduler()
        self.lock = asyncio.Lock()

        now = datetime.now(timezone.utc)
        self.created_at = now
        self.expires_at = now + (ttl or timedelta(minutes=settings.session_ttl_minutes))

        self.screen = Screen.LOGIN
        self.user_email: Optional[str] = None
        self.login = LoginScreen(self, gate=gate, lang=self.lang)
        self.listing: Optional[ListingScreen] = None
        self.cart: Optional[CartScreen] = None
        self._notices: list[Notice] = []

    @property
    def expired(self) -> bool:
        return datetime.now(timezone.utc) > self.expires_at

    # ==================== PRESENTER ====================

    def navigate_to(self, screen: Screen, params: Optional[dict[str, Any]] = None) -> None:
        logger.debug(
            f"Session {sanitize_id_for_logging(self.token)}: {self.screen.value} -> {screen.value}"
        )
        if screen is Screen.LOGIN:
            # Back to the root: the listing and its cart are unmounted
            self._close_cart()
            self.listing = None
            self.user_email = None
        elif screen is Screen.LISTING:
            self._close_cart()
            if self.listing is None:
                self.listing = ListingScreen(self, catalog=self.catalog)
        elif screen is Screen.CART:
            self._close_cart()
            self.cart = CartScreen(
                self,
                self.scheduler,
                params=params,
                lang=self.lang,
                sync_mode=self.sync_mode,
            )
        self.screen = screen

    def present_notice(self, notice: Notice) -> None:
        self._notices.append(notice)

    def drain_notices(self) -> list[Notice]:
        notices, self._notices = self._notices, []
        return notices

    # ==================== ACTIONS ====================

    def submit_login(self, email: str, password: str):
        self.require_screen(Screen.LOGIN)
        result = self.login.submit(email, password)
        if result.ok:
            self.user_email = result.email
        return result

    def require_screen(self, screen: Screen) -> None:
        if self.screen is not screen:
            raise ScreenStateError(f"expected screen {screen.value}, current is {self.screen.value}")

    def require_listing(self) -> ListingScreen:
        self.require_screen(Screen.LISTING)
        return self.listing

    def require_cart(self) -> CartScreen:
        self.require_screen(Screen.CART)
        return self.cart

    def close(self) -> None:
        """Tear down everything still alive on this session."""
        self._close_cart()
        self.scheduler.cancel_all()

    def _close_cart(self) -> None:
        if self.cart is not None:
            self.cart.close()
            self.cart = None


class SessionRegistry:
    """In-memory session store keyed by an opaque bearer token."""

    def __init__(self, **session_defaults):
        self._sessions: dict[str, ShoppingSession] = {}
        self._session_defaults = session_defaults

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, lang: Optional[str] = None) -> ShoppingSession:
        self.cleanup_expired()
        token = secrets.token_urlsafe(32)
        session = ShoppingSession(token, lang=lang, **self._session_defaults)
        self._sessions[token] = session
        logger.info(f"Session created {sanitize_id_for_logging(token)}")
        return session

    def get(self, token: str) -> Optional[ShoppingSession]:
        """Return a live session, dropping it if it has expired."""
        session = self._sessions.get(token)
        if session is None:
            return None
        if session.expired:
            self.remove(token)
            return None
        return session

    def cleanup_expired(self) -> int:
        """Close and drop every expired session. Returns how many were dropped."""
        expired = [token for token, session in self._sessions.items() if session.expired]
        for token in expired:
            self.remove(token)
        if expired:
            logger.debug(f"Dropped {len(expired)} expired sessions")
        return len(expired)

    def remove(self, token: str) -> None:
        session = self._sessions.pop(token, None)
        if session is not None:
            session.close()
            logger.info(f"Session closed {sanitize_id_for_logging(token)}")

    def clear(self) -> None:
        for token in list(self._sessions):
            self.remove(token)


_registry: Optional[SessionRegistry] = None


def get_session_registry() -> SessionRegistry:
    """Get SessionRegistry singleton."""
    global _registry
    if _registry is None:
        _registry = SessionRegistry()
    return _registry
