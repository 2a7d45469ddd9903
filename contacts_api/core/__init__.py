"""
Core models and helpers shared across the contacts API.
"""

from contacts_api.core.models import Contact, Subscription, User
from contacts_api.core.utils import generate_id, utc_now

__all__ = [
    "Contact",
    "Subscription",
    "User",
    "generate_id",
    "utc_now",
]
