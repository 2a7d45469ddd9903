"""
Services - file and image work behind the routes.
"""

from contacts_api.services.avatars import AvatarDecodeError, AvatarPipeline

__all__ = [
    "AvatarDecodeError",
    "AvatarPipeline",
]
