# =============================================================================
# Gravatar Default Avatars
# =============================================================================
#
# New accounts get a gravatar URL derived from their email. The URL is
# computed locally (hash of the normalized email); nothing is fetched, so
# registration never depends on gravatar being reachable.
#
# =============================================================================

from libgravatar import Gravatar

from contacts_api.config import Settings


def gravatar_url(email: str, settings: Settings) -> str:
    """Deterministic gravatar URL for an email (pg-rated, mystery-man fallback)."""
    return Gravatar(email).get_image(
        size=settings.gravatar_size,
        default="mm",
        rating="pg",
    )
