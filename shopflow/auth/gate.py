"""Login gate: checks entered credentials against the directory."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from shopflow.errors import (
    NOTICE_INCOMPLETE_INPUT,
    NOTICE_INVALID_CREDENTIALS,
    IncompleteInputError,
    InvalidCredentialsError,
)
from shopflow.logging import get_logger, sanitize_string_for_logging

from .directory import AuthDirectory

logger = get_logger(__name__)


class AuthFailure(str, Enum):
    INCOMPLETE_INPUT = "incomplete_input"
    INVALID_CREDENTIALS = "invalid_credentials"


_FAILURE_ERRORS = {
    AuthFailure.INCOMPLETE_INPUT: (IncompleteInputError, NOTICE_INCOMPLETE_INPUT),
    AuthFailure.INVALID_CREDENTIALS: (InvalidCredentialsError, NOTICE_INVALID_CREDENTIALS),
}


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a login attempt."""
    ok: bool
    email: str
    failure: Optional[AuthFailure] = None

    @property
    def message_key(self) -> Optional[str]:
        """i18n key of the notice to show, None on success."""
        if self.failure is None:
            return None
        return _FAILURE_ERRORS[self.failure][1]

    def raise_for_failure(self) -> None:
        """Raise the matching ShopflowError if the attempt failed."""
        if self.failure is None:
            return
        error_cls, key = _FAILURE_ERRORS[self.failure]
        raise error_cls(key)


class AuthGate:
    """
    Decides whether entered credentials open the listing screen.

    Empty input is evaluated, not pre-rejected: it yields INCOMPLETE_INPUT.
    Matching is exact (case-sensitive, no trimming). There is no lockout.
    """

    def __init__(self, directory: Optional[AuthDirectory] = None):
        self.directory = directory or AuthDirectory()

    def authenticate(self, email: str, password: str) -> AuthResult:
        if not email or not password:
            logger.info("Login rejected: incomplete input")
            return AuthResult(ok=False, email=email or "", failure=AuthFailure.INCOMPLETE_INPUT)

        if self.directory.find(email, password) is None:
            logger.info(f"Login rejected for {sanitize_string_for_logging(email)}")
            return AuthResult(ok=False, email=email, failure=AuthFailure.INVALID_CREDENTIALS)

        logger.info(f"Login accepted for {sanitize_string_for_logging(email)}")
        return AuthResult(ok=True, email=email)
