"""
Application services and the FastAPI dependencies that hand them out.

Everything a route needs is built once in the app factory from an explicit
Settings instance and parked on app.state.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from contacts_api.auth.jwt import PasswordHasher, TokenIssuer
from contacts_api.auth.users import UserRepository
from contacts_api.config import Settings
from contacts_api.contacts.repository import ContactRepository
from contacts_api.services.avatars import AvatarPipeline
from contacts_api.storage import StorageProvider, create_local_storage


@dataclass
class AppServices:
    """Application state - initialized once per app."""

    settings: Settings
    storage: StorageProvider
    users: UserRepository
    contacts: ContactRepository
    hasher: PasswordHasher
    tokens: TokenIssuer
    avatars: AvatarPipeline


def build_services(settings: Settings, storage: StorageProvider | None = None) -> AppServices:
    storage = storage or create_local_storage()
    return AppServices(
        settings=settings,
        storage=storage,
        users=UserRepository(storage.metadata),
        contacts=ContactRepository(storage.metadata),
        hasher=PasswordHasher(settings),
        tokens=TokenIssuer(settings),
        avatars=AvatarPipeline(settings),
    )


def get_services(request: Request) -> AppServices:
    return request.app.state.services
