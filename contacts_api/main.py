"""
Contacts API - main entry point.

Run with `contacts-api` (console script) or
`uvicorn contacts_api.main:app --reload`.
"""

from __future__ import annotations

import uvicorn

from contacts_api.api.app import create_app
from contacts_api.config import get_settings

app = create_app()


def main():
    """Main entry point."""
    settings = get_settings()
    uvicorn.run(
        "contacts_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug and not settings.is_production,
    )


if __name__ == "__main__":
    main()
