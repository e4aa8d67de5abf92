"""Pytest configuration and fixtures"""
import os

import pytest

# Set test environment variables before any settings are read
os.environ.setdefault("SHOPFLOW_CHECKOUT_DELAY_MS", "50")
os.environ.setdefault("SHOPFLOW_CART_SYNC_MODE", "unified")
os.environ.setdefault("SHOPFLOW_LANGUAGE", "en")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from shopflow.config import get_settings  # noqa: E402
from shopflow.flow import RecordingPresenter  # noqa: E402


class FakeTask:
    def __init__(self, delay_ms, callback):
        self.delay_ms = delay_ms
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Scheduler that only fires when the test says so."""

    def __init__(self):
        self.tasks = []

    def schedule_delayed(self, delay_ms, callback):
        task = FakeTask(delay_ms, callback)
        self.tasks.append(task)
        return task

    @property
    def pending(self):
        return [task for task in self.tasks if not (task.cancelled or task.fired)]

    def fire_all(self):
        for task in self.pending:
            task.fired = True
            task.callback()


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read settings from the environment for every test"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def notices():
    """List collecting notice keys emitted by a store or checkout"""
    return []


@pytest.fixture
def sample_items():
    """Listing cart payload as the listing screen hands it over"""
    return [
        {"id": "p1", "name": "USB-C Charger", "price": "$10.00", "image": "charger.png", "quantity": 2},
        {"id": "p2", "name": "Laptop Stand", "price": "$5.50", "image": "stand.png"},
    ]
