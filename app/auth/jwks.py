# =============================================================================
# app/auth/jwks.py - WorkOS JWKS Cache and Token Verification
# =============================================================================
# Access tokens are WorkOS AuthKit JWTs signed with keys published at:
#   https://<WORKOS_API_HOSTNAME>/sso/jwks/<client_id>
#
# The key set is cached per client id for JWKS_CACHE_TTL_SECONDS. A token
# whose kid isn't in the cached set triggers one refetch, so rotated keys are
# picked up without waiting for the TTL. Forced refetches are spaced at least
# JWKS_REFRESH_COOLDOWN_SECONDS apart per client id. invalidate() drops cached
# sets.
# =============================================================================

import logging
import time
from typing import Any

import httpx
from jose import jwt, JWTError

from app.config import settings

logger = logging.getLogger(__name__)

# Asymmetric algorithms only: a JWKS never carries shared secrets
ALLOWED_ALGORITHMS = ("RS256", "RS384", "RS512", "ES256", "ES384", "ES512")


class JWKSFetchError(Exception):
    """Raised when the key set can't be fetched or is malformed."""


class JWKSCache:
    """
    Process-wide JWKS cache keyed by client id.

    Entries expire after ttl_seconds (0 disables caching). A forced refresh
    within refresh_cooldown seconds of the previous one serves the cached set.
    """

    def __init__(self, ttl_seconds: int, timeout: float, refresh_cooldown: int = 60):
        self.ttl_seconds = ttl_seconds
        self.timeout = timeout
        self.refresh_cooldown = refresh_cooldown
        self._entries: dict[str, tuple[dict[str, Any], float]] = {}
        self._last_forced: dict[str, float] = {}

    def jwks_url(self, client_id: str) -> str:
        return f"{settings.workos_base_url}/sso/jwks/{client_id}"

    def _fetch(self, client_id: str) -> dict[str, Any]:
        """Fetch the key set from WorkOS."""
        url = self.jwks_url(client_id)
        try:
            response = httpx.get(
                url,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
                follow_redirects=True,
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise JWKSFetchError(f"WorkOS JWKS request to {url} failed: {e}")

        if not isinstance(body, dict) or not isinstance(body.get("keys"), list):
            raise JWKSFetchError("Invalid WorkOS JWKS response")

        logger.debug(f"Fetched JWKS from {url}")
        return body

    def get(self, client_id: str, force_refresh: bool = False) -> dict[str, Any]:
        """
        Get the key set for a client id, fetching it when missing or expired.

        Raises:
            JWKSFetchError: If a fetch was needed and failed
        """
        now = time.monotonic()
        cached = self._entries.get(client_id)

        if cached and not force_refresh and (now - cached[1]) < self.ttl_seconds:
            return cached[0]

        if cached and force_refresh:
            last = self._last_forced.get(client_id)
            if last is not None and (now - last) < self.refresh_cooldown:
                logger.debug(f"JWKS refresh for {client_id} skipped (cooldown)")
                return cached[0]
            self._last_forced[client_id] = now

        jwks = self._fetch(client_id)
        self._entries[client_id] = (jwks, now)
        return jwks

    def invalidate(self, client_id: str | None = None) -> None:
        """Forget one client's key set, or all of them."""
        if client_id is None:
            self._entries.clear()
            self._last_forced.clear()
        else:
            self._entries.pop(client_id, None)
            self._last_forced.pop(client_id, None)


jwks_cache = JWKSCache(
    ttl_seconds=settings.JWKS_CACHE_TTL_SECONDS,
    timeout=settings.HTTP_TIMEOUT_SECONDS,
    refresh_cooldown=settings.JWKS_REFRESH_COOLDOWN_SECONDS,
)


def _find_key(jwks: dict[str, Any], kid: str | None) -> dict[str, Any] | None:
    keys = jwks.get("keys", [])
    if kid:
        for key in keys:
            if key.get("kid") == kid:
                return key
        return None
    # Tokens without a kid are only accepted against a single-key set
    return keys[0] if len(keys) == 1 else None


def verify_token(token: str, client_id: str) -> dict[str, Any]:
    """
    Verify a WorkOS access token and return its claims.

    Checks the signature against the client's JWKS plus the standard
    exp / nbf / iat claims. The audience isn't checked.

    Raises:
        JWTError: Bad signature, expired, malformed, or no matching key
        JWKSFetchError: If the key set couldn't be fetched
    """
    header = jwt.get_unverified_header(token)
    kid = header.get("kid")

    key = _find_key(jwks_cache.get(client_id), kid)
    if key is None:
        key = _find_key(jwks_cache.get(client_id, force_refresh=True), kid)
    if key is None:
        raise JWTError(f"No signing key matches kid={kid}")

    algorithm = key.get("alg") or header.get("alg")
    if algorithm not in ALLOWED_ALGORITHMS:
        raise JWTError(f"Unsupported signing algorithm: {algorithm}")

    return jwt.decode(
        token,
        key,
        algorithms=[algorithm],
        options={"verify_aud": False},
    )
