"""
Request/response models for the /contacts routes.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from contacts_api.core.models import Contact


class ContactCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr | None = None
    phone: str | None = None
    favorite: bool = False
    avatarURL: str | None = None


class ContactUpdate(BaseModel):
    """Partial update; at least one field must be present."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None
    phone: str | None = None
    favorite: bool | None = None
    avatarURL: str | None = None

    def changes(self) -> dict:
        """Submitted fields, keyed by their stored names."""
        data = self.model_dump(exclude_unset=True)
        # name and favorite cannot be cleared
        for key in ("name", "favorite"):
            if key in data and data[key] is None:
                del data[key]
        if "avatarURL" in data:
            data["avatar_url"] = data.pop("avatarURL")
        return data


class FavoriteUpdate(BaseModel):
    favorite: bool


class ContactResponse(BaseModel):
    id: str
    name: str
    email: str | None
    phone: str | None
    favorite: bool
    avatarURL: str | None
    owner: str

    @classmethod
    def from_contact(cls, contact: Contact) -> ContactResponse:
        return cls(
            id=contact.id,
            name=contact.name,
            email=contact.email,
            phone=contact.phone,
            favorite=contact.favorite,
            avatarURL=contact.avatar_url,
            owner=contact.owner,
        )
