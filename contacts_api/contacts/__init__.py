"""
Owner-scoped address book.
"""

from contacts_api.contacts.repository import ContactRepository

__all__ = ["ContactRepository"]
