"""
Core data models for the contacts API.

Users own accounts and sessions; contacts are address-book entries that
point back at their owner. Both are stored as plain documents, so every
model round-trips through model_dump() / model_validate().
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from contacts_api.core.utils import generate_id, utc_now


# =============================================================================
# Enums
# =============================================================================


class Subscription(str, Enum):
    """Subscription tier of an account."""

    STARTER = "starter"
    PRO = "pro"
    BUSINESS = "business"

    @classmethod
    def values(cls) -> list[str]:
        return [s.value for s in cls]


# =============================================================================
# User
# =============================================================================


class User(BaseModel):
    """
    A registered account.

    `password` holds the bcrypt hash, never the plaintext. `token` is the
    single active session token; an empty string means logged out.
    """

    id: str = Field(default_factory=lambda: generate_id("user"))
    email: str
    password: str
    subscription: Subscription = Subscription.STARTER
    token: str = ""
    avatar_url: str = ""

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def public(self) -> dict[str, str]:
        """The fields any route may return."""
        return {"email": self.email, "subscription": self.subscription.value}


# =============================================================================
# Contact
# =============================================================================


class Contact(BaseModel):
    """An address-book entry owned by exactly one user."""

    id: str = Field(default_factory=lambda: generate_id("contact"))
    name: str
    email: str | None = None
    phone: str | None = None
    favorite: bool = False
    avatar_url: str | None = None

    # Ownership
    owner: str  # User.id

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
