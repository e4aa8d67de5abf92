"""
What the core needs from the presentation layer.

A presenter moves between screens and shows notices (a modal with a single
OK button in the mobile app). Anything that implements these two methods
can host the flow.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Protocol

from shopflow.i18n import get_text


class Screen(str, Enum):
    LOGIN = "login"
    LISTING = "listing"
    CART = "cart"


@dataclass(frozen=True)
class Notice:
    key: str
    message: str

    @classmethod
    def translated(cls, key: str, lang: str) -> "Notice":
        return cls(key=key, message=get_text(key, lang))

    def to_dict(self) -> dict:
        return {"key": self.key, "message": self.message}


class Presenter(Protocol):
    def navigate_to(self, screen: Screen, params: Optional[dict[str, Any]] = None) -> None: ...

    def present_notice(self, notice: Notice) -> None: ...


@dataclass
class RecordingPresenter:
    """Presenter that only remembers what it was asked to do."""
    screen: Screen = Screen.LOGIN
    params: dict[str, Any] = field(default_factory=dict)
    notices: list[Notice] = field(default_factory=list)
    history: list[Screen] = field(default_factory=list)

    def navigate_to(self, screen: Screen, params: Optional[dict[str, Any]] = None) -> None:
        self.screen = screen
        self.params = dict(params or {})
        self.history.append(screen)

    def present_notice(self, notice: Notice) -> None:
        self.notices.append(notice)

    def drain_notices(self) -> list[Notice]:
        notices, self.notices = self.notices, []
        return notices
