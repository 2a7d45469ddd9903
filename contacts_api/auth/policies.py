"""
Auth middleware for protected routes.

Use: `user: User = Depends(get_current_user)`

A request is authenticated only when both checks pass:
1. the bearer token verifies (signature + expiry), and
2. it is exactly the token currently stored on the user record.

The second check is what makes logout and re-login invalidate older tokens.
"""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from contacts_api.api.deps import AppServices, get_services
from contacts_api.auth.jwt import TokenError
from contacts_api.core.models import User
from contacts_api.integrations.sentry import set_user

logger = logging.getLogger(__name__)

# Optional bearer (we raise our own 401 instead of FastAPI's 403)
optional_bearer = HTTPBearer(auto_error=False)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=401,
        detail="Not authorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer),
    services: AppServices = Depends(get_services),
) -> User:
    """Resolve the bearer token to the user it belongs to."""
    if not credentials or not credentials.credentials:
        raise _unauthorized()

    token = credentials.credentials

    try:
        payload = services.tokens.decode_token(token)
    except TokenError as e:
        logger.info(f"Rejected token: {e}")
        raise _unauthorized()

    user = await services.users.get_by_id(payload.sub)
    if user is None:
        logger.info(f"Token subject {payload.sub} has no account")
        raise _unauthorized()

    if not user.token or not secrets.compare_digest(user.token, token):
        logger.info(f"Superseded token presented for {user.id}")
        raise _unauthorized()

    set_user(user.id)
    return user
