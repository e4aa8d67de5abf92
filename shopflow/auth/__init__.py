"""Authentication package."""
from .directory import DEFAULT_CREDENTIALS, AuthDirectory, UserCredential
from .gate import AuthFailure, AuthGate, AuthResult

__all__ = [
    "DEFAULT_CREDENTIALS",
    "AuthDirectory",
    "UserCredential",
    "AuthFailure",
    "AuthGate",
    "AuthResult",
]
