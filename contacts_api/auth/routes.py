# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints:
#   POST  /users/register      - Create account
#   POST  /users/login         - Get a session token
#   POST  /users/logout        - Drop the current session
#   GET   /users/current       - Get current user
#   PATCH /users/subscription  - Change subscription tier
#   PATCH /users/avatars       - Upload a new avatar
#
# =============================================================================

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile

from contacts_api.api.deps import AppServices, get_services
from contacts_api.auth.policies import get_current_user
from contacts_api.auth.schemas import (
    AvatarResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    SubscriptionRequest,
    SubscriptionResponse,
    UserResponse,
)
from contacts_api.auth.users import EmailInUseError
from contacts_api.core.models import Subscription, User
from contacts_api.integrations.gravatar import gravatar_url
from contacts_api.services.avatars import AvatarDecodeError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

# Same message for unknown email and wrong password
WRONG_CREDENTIALS = "Email or password is wrong"
INVALID_SUBSCRIPTION = (
    "Invalid subscription value. Valid options are 'starter', 'pro', or 'business'"
)


# =============================================================================
# Public Endpoints
# =============================================================================


@router.post("/register", status_code=201, response_model=UserResponse)
async def register(data: RegisterRequest, services: AppServices = Depends(get_services)):
    """
    Create a new account.

    Returns the stored email and subscription, never the password hash.
    """
    if await services.users.get_by_email(data.email) is not None:
        raise HTTPException(status_code=409, detail="Email in use")

    password_hash = await services.hasher.hash(data.password)

    try:
        user = await services.users.create(
            email=data.email,
            password_hash=password_hash,
            avatar_url=gravatar_url(data.email, services.settings),
            subscription=data.subscription,
        )
    except EmailInUseError:
        raise HTTPException(status_code=409, detail="Email in use")

    logger.info(f"Registered {user.id}")
    return user.public()


@router.post("/login", response_model=LoginResponse)
async def login(data: LoginRequest, services: AppServices = Depends(get_services)):
    """
    Authenticate and get a session token.

    Issuing a token overwrites the stored one, so older tokens stop working.
    """
    user = await services.users.get_by_email(data.email)
    password_hash = user.password if user is not None else ""
    if not await services.hasher.verify(data.password, password_hash) or user is None:
        logger.info("Failed login attempt")
        raise HTTPException(status_code=400, detail=WRONG_CREDENTIALS)

    token = services.tokens.create_token(user.id)
    await services.users.set_token(user.id, token)

    logger.info(f"Login {user.id}")
    return {"token": token, "user": user.public()}


# =============================================================================
# Protected Endpoints
# =============================================================================


@router.post("/logout", status_code=204)
async def logout(
    user: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    """Clear the stored session token."""
    await services.users.clear_token(user.id)
    logger.info(f"Logout {user.id}")
    return Response(status_code=204)


@router.get("/current", response_model=UserResponse)
async def current(user: User = Depends(get_current_user)):
    """Get the current authenticated user."""
    return user.public()


@router.patch("/subscription", response_model=SubscriptionResponse)
async def change_subscription(
    data: SubscriptionRequest,
    user: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    """
    Change subscription tier.

    The value is validated first, then rejected if it is the current tier.
    """
    if data.newSubscription not in Subscription.values():
        raise HTTPException(status_code=400, detail=INVALID_SUBSCRIPTION)

    new_subscription = Subscription(data.newSubscription)
    if new_subscription == user.subscription:
        raise HTTPException(status_code=400, detail="This subscription is already in use")

    await services.users.update(user.id, subscription=new_subscription)

    logger.info(f"Subscription {user.id}: {user.subscription.value} -> {new_subscription.value}")
    return {"newSubscription": new_subscription}


@router.patch("/avatars", response_model=AvatarResponse)
async def update_avatar(
    avatarURL: UploadFile = File(...),
    user: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    """Upload, resize and persist a new avatar."""
    data = await avatarURL.read()

    try:
        avatar_url = await services.avatars.process(user.id, avatarURL.filename, data)
    except AvatarDecodeError as e:
        logger.warning(f"Avatar upload rejected for {user.id}: {e}")
        raise HTTPException(status_code=400, detail="Unsupported image file")

    try:
        await services.users.update(user.id, avatar_url=avatar_url)
    except Exception:
        await services.avatars.remove(avatar_url)
        raise

    previous = user.avatar_url
    user.avatar_url = avatar_url
    await services.avatars.remove(previous)

    return {**user.public(), "avatarURL": user.avatar_url}
