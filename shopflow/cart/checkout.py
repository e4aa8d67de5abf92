"""
Checkout state machine.

ACTIVE -> TERMINATED, entered synchronously when the cart is cleared and
the return to the login screen is scheduled; the scheduled callback firing
later does not change the state. An empty cart also reads as TERMINATED.
"""
from enum import Enum
from typing import Callable, Optional, Protocol

from shopflow.config import get_settings
from shopflow.errors import NOTICE_CHECKOUT_EMPTY, NOTICE_CHECKOUT_SUCCESS, EmptyCartError
from shopflow.logging import get_logger

from .models import CheckoutResult
from .store import CartStore, NoticeSink

logger = get_logger(__name__)


class CheckoutState(str, Enum):
    ACTIVE = "active"
    TERMINATED = "terminated"


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class DelayScheduler(Protocol):
    def schedule_delayed(self, delay_ms: int, callback: Callable[[], None]) -> Cancellable: ...


class CheckoutProcess:
    """Turns the cart into a total, clears it and schedules the way out."""

    def __init__(
        self,
        store: CartStore,
        scheduler: DelayScheduler,
        on_finished: Callable[[], None],
        notify: Optional[NoticeSink] = None,
        delay_ms: Optional[int] = None,
    ):
        self.store = store
        self.scheduler = scheduler
        self.on_finished = on_finished
        self._notify = notify
        self.delay_ms = get_settings().checkout_delay_ms if delay_ms is None else delay_ms
        self._completed = False
        self._pending: Optional[Cancellable] = None

    @property
    def state(self) -> CheckoutState:
        if self._completed or self.store.is_empty:
            return CheckoutState.TERMINATED
        return CheckoutState.ACTIVE

    @property
    def has_pending_return(self) -> bool:
        return self._pending is not None

    def checkout(self) -> CheckoutResult:
        """
        Finalize the cart.

        Raises:
            EmptyCartError: the cart has no items; nothing is changed.
        """
        if self.store.is_empty:
            logger.info("Checkout refused: cart is empty")
            self._emit_notice(NOTICE_CHECKOUT_EMPTY)
            raise EmptyCartError(NOTICE_CHECKOUT_EMPTY)

        result = CheckoutResult(
            total_amount=self.store.compute_total(),
            item_count=self.store.total_items,
            currency_symbol=self.store.currency_symbol,
        )
        logger.info(f"Total Amount: {result.total_amount}")
        self._emit_notice(NOTICE_CHECKOUT_SUCCESS)

        self.store.clear()
        self._completed = True
        self._pending = self.scheduler.schedule_delayed(self.delay_ms, self._finish)
        return result

    def cancel(self) -> None:
        """Drop the pending return to the login screen (view torn down)."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
            logger.debug("Pending post-checkout return cancelled")

    def _finish(self) -> None:
        self._pending = None
        self.on_finished()

    def _emit_notice(self, key: str) -> None:
        if self._notify is not None:
            self._notify(key)
