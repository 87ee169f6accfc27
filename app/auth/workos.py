# =============================================================================
# app/auth/workos.py - WorkOS User Lookup
# =============================================================================
# Fallback used when an access token carries no email claim: the user record
# is fetched from the WorkOS User Management API by the token's `sub`.
#
# Lookups are best effort. Any failure is logged and yields an empty email,
# which simply makes the caller a non-admin.
# =============================================================================

import logging
from typing import Any

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

# Claims that may carry the user's email, in priority order
EMAIL_CLAIMS = ("email", "email_address", "preferred_username", "upn")


def normalize_email(value: Any) -> str:
    """Trimmed, lowercased email ("" for None)."""
    if value is None:
        return ""
    return str(value).strip().lower()


def email_from_claims(claims: dict[str, Any]) -> str:
    """First non-empty email-like claim, normalized."""
    for claim in EMAIL_CLAIMS:
        email = normalize_email(claims.get(claim))
        if email:
            return email
    return ""


def fetch_user(user_id: str) -> dict[str, Any] | None:
    """
    Fetch a WorkOS user record.

    Returns:
        The user dict, or None when no API key is configured

    Raises:
        httpx.HTTPError: If the request fails
    """
    if not settings.WORKOS_API_KEY:
        return None

    response = httpx.get(
        f"{settings.workos_base_url}/user_management/users/{user_id}",
        headers={
            "Authorization": f"Bearer {settings.WORKOS_API_KEY}",
            "Accept": "application/json",
        },
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    response.raise_for_status()
    return response.json()


def lookup_email(user_id: str) -> str:
    """Email of a WorkOS user, or "" if it can't be resolved."""
    try:
        user = fetch_user(user_id)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(
            f"Email not in JWT and WorkOS user lookup failed: {e}. "
            "Add an email claim to the WorkOS session JWT template."
        )
        return ""

    if not isinstance(user, dict):
        return ""
    return normalize_email(user.get("email"))
