"""
Contact documents, always scoped to their owner.
"""

from __future__ import annotations

from typing import Any

from contacts_api.core.models import Contact
from contacts_api.core.utils import utc_now
from contacts_api.storage import Collections, MetadataStorage


class ContactRepository:
    def __init__(self, metadata: MetadataStorage):
        self.metadata = metadata

    async def find(
        self,
        owner: str,
        *,
        page: int = 1,
        limit: int = 20,
        favorite: bool | None = None,
    ) -> list[Contact]:
        filters: dict[str, Any] = {"owner": owner}
        if favorite is not None:
            filters["favorite"] = favorite
        docs = await self.metadata.query(
            Collections.CONTACTS, filters, limit=limit, offset=(page - 1) * limit
        )
        return [Contact.model_validate(doc) for doc in docs]

    async def get(self, owner: str, contact_id: str) -> Contact | None:
        doc = await self.metadata.get(Collections.CONTACTS, contact_id)
        if doc is None or doc.get("owner") != owner:
            return None
        return Contact.model_validate(doc)

    async def create(self, owner: str, **fields: Any) -> Contact:
        contact = Contact(owner=owner, **fields)
        await self.metadata.save(
            Collections.CONTACTS, contact.id, contact.model_dump(mode="json")
        )
        return contact

    async def update(self, owner: str, contact_id: str, **fields: Any) -> Contact | None:
        """Apply a partial update; None when the owner has no such contact."""
        if await self.get(owner, contact_id) is None:
            return None
        await self.metadata.update(
            Collections.CONTACTS,
            contact_id,
            {**fields, "updated_at": utc_now().isoformat()},
        )
        return await self.get(owner, contact_id)

    async def delete(self, owner: str, contact_id: str) -> Contact | None:
        contact = await self.get(owner, contact_id)
        if contact is None:
            return None
        await self.metadata.delete(Collections.CONTACTS, contact_id)
        return contact
