"""
Storage abstractions.

- MetadataStorage → document database (users, contacts)
"""

from contacts_api.storage.base import (
    MetadataStorage,
    StorageProvider,
    Collections,
)
from contacts_api.storage.local import InMemoryMetadataStorage, create_local_storage

__all__ = [
    "MetadataStorage",
    "StorageProvider",
    "Collections",
    "InMemoryMetadataStorage",
    "create_local_storage",
]
