"""
Contacts API - address book with accounts, sessions and avatars.
"""

__version__ = "0.1.0"
