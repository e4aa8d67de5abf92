"""Tests for screen controllers, sessions and the asyncio scheduler"""
import asyncio
from datetime import timedelta

import pytest

from shopflow.cart import SyncMode
from shopflow.errors import ProductNotFoundError, ScreenStateError
from shopflow.flow import (
    AsyncioScheduler,
    CartScreen,
    ListingScreen,
    LoginScreen,
    Screen,
    SessionRegistry,
    ShoppingSession,
)
from shopflow.flow.screens import PARAM_CART_ITEMS, PARAM_UPDATE_CART_ITEMS


class TestLoginScreen:
    def test_success_navigates_to_listing(self, presenter):
        LoginScreen(presenter).submit("letrongthien@gmail.com", "1")
        assert presenter.screen is Screen.LISTING
        assert presenter.notices == []

    def test_failure_shows_translated_notice(self, presenter):
        LoginScreen(presenter, lang="vi").submit("letrongthien@gmail.com", "2")
        assert presenter.screen is Screen.LOGIN
        assert presenter.notices[0].key == "auth.invalid_credentials"
        assert presenter.notices[0].message == "Email hoặc mật khẩu không đúng!"

    def test_incomplete_input_notice(self, presenter):
        LoginScreen(presenter).submit("", "")
        assert presenter.drain_notices()[0].message == "Please fill in all fields!"
        assert presenter.notices == []


class TestListingScreen:
    def test_add_to_cart_increments_existing(self, presenter):
        listing = ListingScreen(presenter)
        listing.add_to_cart("5")
        listing.add_to_cart("5")
        listing.add_to_cart("6")
        assert [(item.id, item.quantity) for item in listing.cart_items] == [("5", 2), ("6", 1)]

    def test_unknown_product(self, presenter):
        with pytest.raises(ProductNotFoundError):
            ListingScreen(presenter).add_to_cart("nope")

    def test_open_cart_passes_copy_and_callback(self, presenter):
        listing = ListingScreen(presenter)
        listing.add_to_cart("1")
        listing.open_cart()

        assert presenter.screen is Screen.CART
        snapshot = presenter.params[PARAM_CART_ITEMS]
        assert snapshot[0] is not listing.cart_items[0]
        assert presenter.params[PARAM_UPDATE_CART_ITEMS] == listing.update_cart_items


class TestCartScreen:
    def open(self, presenter, scheduler, mode=SyncMode.LEGACY):
        listing = ListingScreen(presenter)
        listing.add_to_cart("5")
        listing.add_to_cart("5")
        listing.add_to_cart("6")
        listing.open_cart()
        cart = CartScreen(presenter, scheduler, presenter.params, sync_mode=mode, delay_ms=2000)
        return listing, cart

    def test_opened_without_items(self, presenter, scheduler):
        cart = CartScreen(presenter, scheduler, params=None)
        assert cart.store.is_empty
        assert [notice.key for notice in presenter.notices] == ["cart.empty"]

    def test_opened_without_callback(self, presenter, scheduler, sample_items):
        cart = CartScreen(presenter, scheduler, {PARAM_CART_ITEMS: sample_items})
        assert cart.remove_item("p1")
        assert [notice.key for notice in presenter.notices] == ["cart.item_removed"]

    def test_legacy_reconciliation(self, presenter, scheduler):
        listing, cart = self.open(presenter, scheduler, SyncMode.LEGACY)
        cart.adjust_quantity("6", "increase")
        assert listing.cart_items[1].quantity == 1
        cart.remove_item("5")
        assert [(item.id, item.quantity) for item in listing.cart_items] == [("6", 2)]

    def test_checkout_returns_to_login_after_delay(self, presenter, scheduler):
        listing, cart = self.open(presenter, scheduler)
        result = cart.checkout()

        assert str(result.total_amount) == "25.50"
        assert presenter.screen is Screen.CART
        assert [notice.key for notice in presenter.notices] == ["checkout.success"]
        # Legacy mode: the listing still believes it has items
        assert len(listing.cart_items) == 2

        scheduler.fire_all()
        assert presenter.screen is Screen.LOGIN

    def test_close_cancels_return(self, presenter, scheduler):
        _, cart = self.open(presenter, scheduler)
        cart.checkout()
        cart.close()
        scheduler.fire_all()
        assert presenter.screen is Screen.CART

    def test_late_callback_after_close_is_ignored(self, presenter, scheduler):
        _, cart = self.open(presenter, scheduler)
        cart.checkout()
        task = scheduler.tasks[0]
        cart.close()
        task.callback()
        assert presenter.screen is Screen.CART


class TestShoppingSession:
    def make(self, scheduler, mode=SyncMode.UNIFIED):
        return ShoppingSession("token-123", sync_mode=mode, scheduler=scheduler)

    def login(self, session):
        assert session.submit_login("letrongthien@gmail.com", "1").ok

    def test_full_flow(self, scheduler):
        session = self.make(scheduler)
        assert session.screen is Screen.LOGIN

        self.login(session)
        assert session.screen is Screen.LISTING
        assert session.user_email == "letrongthien@gmail.com"

        session.require_listing().add_to_cart("5")
        session.require_listing().open_cart()
        assert session.screen is Screen.CART

        cart = session.require_cart()
        cart.adjust_quantity("5", "increase")
        assert session.listing.cart_items[0].quantity == 2

        cart.checkout()
        assert session.listing.cart_items == []
        assert [n.key for n in session.drain_notices()] == ["checkout.success"]

        scheduler.fire_all()
        assert session.screen is Screen.LOGIN
        assert session.listing is None
        assert session.cart is None
        assert session.user_email is None

    def test_actions_on_wrong_screen(self, scheduler):
        session = self.make(scheduler)
        with pytest.raises(ScreenStateError):
            session.require_cart()
        with pytest.raises(ScreenStateError):
            session.require_listing()

    def test_failed_login_stays(self, scheduler):
        session = self.make(scheduler)
        assert not session.submit_login("x@example.com", "bad").ok
        assert session.screen is Screen.LOGIN
        assert session.drain_notices()[0].key == "auth.invalid_credentials"

    def test_back_to_listing_cancels_pending_return(self, scheduler):
        session = self.make(scheduler)
        self.login(session)
        session.listing.add_to_cart("1")
        session.listing.open_cart()
        session.cart.checkout()
        session.navigate_to(Screen.LISTING)
        assert scheduler.pending == []
        assert session.screen is Screen.LISTING

    def test_listing_survives_cart_round_trip(self, scheduler):
        session = self.make(scheduler, SyncMode.LEGACY)
        self.login(session)
        session.listing.add_to_cart("1")
        listing = session.listing
        session.listing.open_cart()
        session.cart.adjust_quantity("1", "increase")
        session.navigate_to(Screen.LISTING)
        assert session.listing is listing
        assert listing.cart_items[0].quantity == 1


class TestSessionRegistry:
    def test_create_and_get(self):
        registry = SessionRegistry()
        session = registry.create(lang="vi-VN")
        assert session.lang == "vi"
        assert registry.get(session.token) is session
        assert len(registry) == 1

    def test_expired_session_is_dropped(self):
        registry = SessionRegistry(ttl=timedelta(seconds=-1))
        session = registry.create()
        assert registry.get(session.token) is None
        assert len(registry) == 0

    def test_create_drops_expired_sessions(self):
        registry = SessionRegistry(ttl=timedelta(seconds=-1))
        sessions = [registry.create() for _ in range(5)]
        assert len(registry) == 1
        assert registry.get(sessions[0].token) is None

    def test_cleanup_expired_without_lookup(self):
        registry = SessionRegistry(ttl=timedelta(seconds=-1))
        registry.create()
        registry.create()
        assert registry.cleanup_expired() == 1
        assert len(registry) == 0

    def test_remove_and_clear(self):
        registry = SessionRegistry()
        first = registry.create()
        registry.create()
        registry.remove(first.token)
        assert registry.get(first.token) is None
        registry.clear()
        assert len(registry) == 0


class TestAsyncioScheduler:
    @pytest.mark.asyncio
    async def test_fires_after_delay(self):
        fired = asyncio.Event()
        scheduler = AsyncioScheduler()
        task = scheduler.schedule_delayed(10, fired.set)
        assert task.pending
        await asyncio.wait_for(fired.wait(), timeout=1)
        assert task.fired
        assert scheduler.pending_count == 0

    @pytest.mark.asyncio
    async def test_cancel(self):
        calls = []
        scheduler = AsyncioScheduler()
        task = scheduler.schedule_delayed(10, lambda: calls.append(1))
        task.cancel()
        await asyncio.sleep(0.05)
        assert calls == []
        assert task.cancelled

    @pytest.mark.asyncio
    async def test_cancel_all(self):
        calls = []
        scheduler = AsyncioScheduler()
        scheduler.schedule_delayed(10, lambda: calls.append(1))
        scheduler.schedule_delayed(20, lambda: calls.append(2))
        assert scheduler.pending_count == 2
        scheduler.cancel_all()
        await asyncio.sleep(0.05)
        assert calls == []

    @pytest.mark.asyncio
    async def test_failing_callback_is_contained(self):
        def boom():
            raise RuntimeError("boom")

        scheduler = AsyncioScheduler()
        task = scheduler.schedule_delayed(0, boom)
        await asyncio.sleep(0.02)
        assert task.fired

    @pytest.mark.asyncio
    async def test_session_checkout_with_real_scheduler(self):
        session = ShoppingSession("token-async", sync_mode=SyncMode.LEGACY)
        session.submit_login("user2@example.com", "123456789")
        session.listing.add_to_cart("2")
        session.listing.open_cart()
        session.cart.checkout()
        assert session.screen is Screen.CART
        # Delay is 50 ms in the test environment
        await asyncio.sleep(0.2)
        assert session.screen is Screen.LOGIN
