"""
Runtime configuration.

All settings come from environment variables (a local `.env` is loaded by
the API entry point). Read once and cached; call `get_settings.cache_clear()`
after changing the environment in tests.

SHOPFLOW_CART_SYNC_MODE defaults to "unified": every cart change made on the
cart screen (additions, quantity changes, removals, checkout clearing) is
mirrored into the listing screen. This departs from the original two-screen
app, where only removals were sent back. Set it to "legacy" to restore that
removal-only behaviour.
"""
import os
from dataclasses import dataclass
from functools import lru_cache

from shopflow.logging import get_logger

logger = get_logger(__name__)

# Delay before returning to the login screen after a successful checkout
DEFAULT_CHECKOUT_DELAY_MS = 2000
DEFAULT_CURRENCY_SYMBOL = "$"
DEFAULT_LANGUAGE = "en"
DEFAULT_SESSION_TTL_MINUTES = 60

SYNC_MODE_LEGACY = "legacy"
SYNC_MODE_UNIFIED = "unified"
_SYNC_MODES = (SYNC_MODE_LEGACY, SYNC_MODE_UNIFIED)


@dataclass(frozen=True)
class Settings:
    checkout_delay_ms: int = DEFAULT_CHECKOUT_DELAY_MS
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    language: str = DEFAULT_LANGUAGE
    cart_sync_mode: str = SYNC_MODE_UNIFIED
    session_ttl_minutes: int = DEFAULT_SESSION_TTL_MINUTES


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default
    if value < 0:
        logger.warning(f"Ignoring negative {name}={value}, using {default}")
        return default
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings from the current environment (cached)."""
    sync_mode = os.environ.get("SHOPFLOW_CART_SYNC_MODE", SYNC_MODE_UNIFIED).strip().lower()
    if sync_mode not in _SYNC_MODES:
        logger.warning(f"Unknown SHOPFLOW_CART_SYNC_MODE={sync_mode!r}, using {SYNC_MODE_UNIFIED}")
        sync_mode = SYNC_MODE_UNIFIED

    return Settings(
        checkout_delay_ms=_int_from_env("SHOPFLOW_CHECKOUT_DELAY_MS", DEFAULT_CHECKOUT_DELAY_MS),
        currency_symbol=os.environ.get("SHOPFLOW_CURRENCY_SYMBOL", DEFAULT_CURRENCY_SYMBOL),
        language=os.environ.get("SHOPFLOW_LANGUAGE", DEFAULT_LANGUAGE),
        cart_sync_mode=sync_mode,
        session_ttl_minutes=_int_from_env("SHOPFLOW_SESSION_TTL_MINUTES", DEFAULT_SESSION_TTL_MINUTES),
    )
