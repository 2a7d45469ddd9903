# =============================================================================
# Contacts API Routes
# =============================================================================
#
# Every route is owner-scoped: a contact that belongs to someone else is
# indistinguishable from one that does not exist (404).
#
# Endpoints:
#   GET    /contacts                 - List (page, limit, favorite)
#   GET    /contacts/{id}            - Get one
#   POST   /contacts                 - Create
#   PUT    /contacts/{id}            - Update fields
#   PATCH  /contacts/{id}/favorite   - Set favorite flag
#   DELETE /contacts/{id}            - Remove
#
# =============================================================================

import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from contacts_api.api.deps import AppServices, get_services
from contacts_api.auth.policies import get_current_user
from contacts_api.contacts.schemas import (
    ContactCreate,
    ContactResponse,
    ContactUpdate,
    FavoriteUpdate,
)
from contacts_api.core.models import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contacts", tags=["contacts"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Not found")


@router.get("", response_model=list[ContactResponse])
async def list_contacts(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    favorite: bool | None = None,
    user: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    contacts = await services.contacts.find(
        user.id, page=page, limit=limit, favorite=favorite
    )
    return [ContactResponse.from_contact(c) for c in contacts]


@router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact(
    contact_id: str,
    user: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    contact = await services.contacts.get(user.id, contact_id)
    if contact is None:
        raise _not_found()
    return ContactResponse.from_contact(contact)


@router.post("", status_code=201, response_model=ContactResponse)
async def add_contact(
    data: ContactCreate,
    user: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    contact = await services.contacts.create(
        user.id,
        name=data.name,
        email=data.email,
        phone=data.phone,
        favorite=data.favorite,
        avatar_url=data.avatarURL,
    )
    logger.info(f"Contact {contact.id} created by {user.id}")
    return ContactResponse.from_contact(contact)


@router.put("/{contact_id}", response_model=ContactResponse)
async def update_contact(
    contact_id: str,
    data: ContactUpdate | None = Body(default=None),
    user: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    changes = data.changes() if data is not None else {}
    if not changes:
        raise HTTPException(status_code=400, detail="missing fields")

    contact = await services.contacts.update(user.id, contact_id, **changes)
    if contact is None:
        raise _not_found()
    return ContactResponse.from_contact(contact)


@router.patch("/{contact_id}/favorite", response_model=ContactResponse)
async def update_favorite(
    contact_id: str,
    data: FavoriteUpdate,
    user: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    contact = await services.contacts.update(user.id, contact_id, favorite=data.favorite)
    if contact is None:
        raise _not_found()
    return ContactResponse.from_contact(contact)


@router.delete("/{contact_id}")
async def remove_contact(
    contact_id: str,
    user: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    contact = await services.contacts.delete(user.id, contact_id)
    if contact is None:
        raise _not_found()
    logger.info(f"Contact {contact_id} deleted by {user.id}")
    return {"message": "contact deleted"}
