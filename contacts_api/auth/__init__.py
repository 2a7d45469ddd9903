"""
Authentication: password hashing, session tokens and the user store.

Routes live in contacts_api.auth.routes and the request dependency in
contacts_api.auth.policies; they are imported by the app factory directly.
"""

from contacts_api.auth.jwt import (
    PasswordHasher,
    TokenIssuer,
    TokenPayload,
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
)
from contacts_api.auth.users import EmailInUseError, UserRepository

__all__ = [
    "PasswordHasher",
    "TokenIssuer",
    "TokenPayload",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    "EmailInUseError",
    "UserRepository",
]
