"""
Request/response models for the /users routes.
"""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from contacts_api.core.models import Subscription


# =============================================================================
# Requests
# =============================================================================


class RegisterRequest(BaseModel):
    """User registration data."""
    email: EmailStr
    password: str = Field(min_length=6)
    subscription: Subscription = Subscription.STARTER


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class SubscriptionRequest(BaseModel):
    # Membership in the tier set is checked by the route so that the error
    # message matches the tier rules rather than a generic enum error.
    newSubscription: str


# =============================================================================
# Responses
# =============================================================================


class UserResponse(BaseModel):
    """User data returned to client (no sensitive fields)."""
    email: str
    subscription: Subscription


class LoginResponse(BaseModel):
    token: str
    user: UserResponse


class SubscriptionResponse(BaseModel):
    newSubscription: Subscription


class AvatarResponse(UserResponse):
    avatarURL: str
