"""Static directory of accepted login credentials."""
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class UserCredential:
    email: str
    password: str


# Accounts the app ships with; there is no sign-up and nothing is persisted
DEFAULT_CREDENTIALS: tuple[UserCredential, ...] = (
    UserCredential(email="letrongthien@gmail.com", password="1"),
    UserCredential(email="user2@example.com", password="123456789"),
    UserCredential(email="user3@example.com", password="123456789"),
    UserCredential(email="user4@example.com", password="123456789"),
    UserCredential(email="user5@example.com", password="123456789"),
)


class AuthDirectory:
    """
    Read-only, ordered set of credential pairs fixed at construction.

    Duplicate emails are tolerated; `find` returns the first exact match.
    """

    def __init__(self, credentials: Iterable[UserCredential] = DEFAULT_CREDENTIALS):
        self._credentials = tuple(credentials)

    def __len__(self) -> int:
        return len(self._credentials)

    def __iter__(self):
        return iter(self._credentials)

    def find(self, email: str, password: str) -> Optional[UserCredential]:
        """First record whose email and password both equal the input exactly."""
        return next(
            (
                record for record in self._credentials
                if record.email == email and record.password == password
            ),
            None,
        )
