# =============================================================================
# Password Hashing & Session Tokens
# =============================================================================
#
# This module provides the two credential primitives:
#   - Password hashing (bcrypt via passlib, fixed cost factor)
#   - Session token creation and validation (signed, time-limited JWT)
#
# Both take their configuration from a Settings instance passed in by the
# caller. A token being valid here only proves it was signed by us and has
# not expired; whether it is the *current* session is checked against the
# user record in auth.policies.
#
# =============================================================================

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
import secrets

from fastapi.concurrency import run_in_threadpool
from passlib.context import CryptContext
from pydantic import BaseModel
import jwt

from contacts_api.config import Settings
from contacts_api.core.utils import generate_id, utc_now

logger = logging.getLogger(__name__)


# =============================================================================
# Password Hashing
# =============================================================================


class PasswordHasher:
    """Salted one-way password hashing with a fixed bcrypt cost factor."""

    def __init__(self, settings: Settings):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=settings.bcrypt_rounds,
        )
        # Compared against when the account does not exist
        self._dummy_hash = self.hash_password(secrets.token_hex(16))

    def hash_password(self, password: str) -> str:
        return self._context.hash(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        """
        Constant-time compare of a password against its hash.

        An empty hash (unknown account) is still checked against a dummy hash,
        so the call costs the same either way and always returns False.
        """
        if not password:
            return False
        try:
            if not password_hash:
                self._context.verify(password, self._dummy_hash)
                return False
            return self._context.verify(password, password_hash)
        except (ValueError, TypeError):
            return False

    async def hash(self, password: str) -> str:
        return await run_in_threadpool(self.hash_password, password)

    async def verify(self, password: str, password_hash: str) -> bool:
        return await run_in_threadpool(self.verify_password, password, password_hash)


# =============================================================================
# Tokens
# =============================================================================


class TokenPayload(BaseModel):
    """Session token payload."""
    sub: str  # user_id
    exp: datetime
    iat: datetime
    jti: str  # unique token ID, so two logins never mint the same token


class TokenError(Exception):
    """Base exception for token errors."""
    pass


class TokenExpiredError(TokenError):
    """Token has expired."""
    pass


class TokenInvalidError(TokenError):
    """Token is invalid or malformed."""
    pass


class TokenIssuer:
    """Signs and verifies session tokens keyed by user identity."""

    def __init__(self, settings: Settings):
        if not settings.secret_key:
            raise ValueError("secret_key must not be blank")
        self._secret = settings.secret_key
        self._algorithm = settings.jwt_algorithm
        self.expires_in = timedelta(hours=settings.jwt_expire_hours)

    def create_token(self, user_id: str) -> str:
        """Create a signed session token for a user."""
        now = utc_now()
        payload = {
            "sub": user_id,
            "exp": now + self.expires_in,
            "iat": now,
            "jti": generate_id("tok"),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode_token(self, token: str) -> TokenPayload:
        """
        Decode and validate a session token.

        Raises:
            TokenExpiredError: Token has expired
            TokenInvalidError: Token is invalid
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(f"Invalid token: {e}")

        return TokenPayload(
            sub=payload["sub"],
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            jti=payload.get("jti", ""),
        )
