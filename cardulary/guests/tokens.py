"""Submission link tokens.

A token is the only credential a guest needs: whoever holds it can open and
submit that guest's address form.
"""

import secrets

from cardulary.config.settings import settings

TOKEN_BYTES = 32


def generate_guest_token() -> str:
    """Return 64 hex characters (256 bits) from the OS CSPRNG."""
    return secrets.token_hex(TOKEN_BYTES)


def get_submission_url(token: str, base_url: str | None = None) -> str:
    base = (base_url or settings.frontend_url).rstrip("/")
    return f"{base}/submit/{token}"
