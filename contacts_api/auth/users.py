"""
Credential store: user documents on top of MetadataStorage.
"""

from __future__ import annotations

from typing import Any

from contacts_api.core.models import Subscription, User
from contacts_api.core.utils import utc_now
from contacts_api.storage import Collections, MetadataStorage


class EmailInUseError(ValueError):
    """Registration attempted with an email that already has an account."""


class UserRepository:
    """Find, create and point-update user records."""

    def __init__(self, metadata: MetadataStorage):
        self.metadata = metadata

    async def get_by_id(self, user_id: str) -> User | None:
        doc = await self.metadata.get(Collections.USERS, user_id)
        return User.model_validate(doc) if doc else None

    async def get_by_email(self, email: str) -> User | None:
        doc = await self.metadata.find_one(Collections.USERS, {"email": email})
        return User.model_validate(doc) if doc else None

    async def create(
        self,
        *,
        email: str,
        password_hash: str,
        avatar_url: str,
        subscription: Subscription = Subscription.STARTER,
    ) -> User:
        if await self.get_by_email(email) is not None:
            raise EmailInUseError(email)

        user = User(
            email=email,
            password=password_hash,
            subscription=subscription,
            avatar_url=avatar_url,
        )
        await self.metadata.save(Collections.USERS, user.id, user.model_dump(mode="json"))
        return user

    async def update(self, user_id: str, **fields: Any) -> bool:
        """Single point-write of the given fields."""
        updates = {
            key: value.value if isinstance(value, Subscription) else value
            for key, value in fields.items()
        }
        updates["updated_at"] = utc_now().isoformat()
        return await self.metadata.update(Collections.USERS, user_id, updates)

    async def set_token(self, user_id: str, token: str) -> bool:
        return await self.update(user_id, token=token)

    async def clear_token(self, user_id: str) -> bool:
        return await self.update(user_id, token="")
