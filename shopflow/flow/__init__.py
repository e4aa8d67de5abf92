"""Screen flow: presenter protocol, scheduler, screen controllers, sessions."""
from .presenter import Notice, Presenter, RecordingPresenter, Screen
from .scheduler import AsyncioScheduler, ScheduledTask
from .screens import CartScreen, ListingScreen, LoginScreen
from .session import SessionRegistry, ShoppingSession, get_session_registry

__all__ = [
    "Notice",
    "Presenter",
    "RecordingPresenter",
    "Screen",
    "AsyncioScheduler",
    "ScheduledTask",
    "CartScreen",
    "ListingScreen",
    "LoginScreen",
    "SessionRegistry",
    "ShoppingSession",
    "get_session_registry",
]
