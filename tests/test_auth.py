# =============================================================================
# tests/test_auth.py - Auth Gate Tests
# =============================================================================
# This module contains tests for:
# - Bearer token verification against the WorkOS JWKS
# - JWKS caching, expiry and forced refresh on unknown kid
# - Email resolution (claims, then WorkOS user lookup)
# - Admin allow-list and the /auth/me endpoint
# =============================================================================

import httpx
import pytest
from jose import jwt

from app.auth import jwks as jwks_module
from app.auth import workos
from app.auth.jwks import JWKSCache, JWKSFetchError, jwks_cache
from app.config import settings


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Token Verification Tests
# =============================================================================

class TestTokenVerification:
    """Test /auth/me with various tokens."""

    def test_missing_header(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["error"] == "Missing or invalid authorization"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_non_bearer_scheme(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Basic dXNlcjpwYXNz"})
        assert response.status_code == 401

    def test_admin_token(self, client, make_token, jwks_fetches):
        token = make_token(email="admin@example.com", first_name="Sam", family_name="Lee")

        response = client.get("/api/auth/me", headers=bearer(token))

        assert response.status_code == 200
        assert response.json() == {
            "user": {
                "id": "user_01TEST",
                "email": "admin@example.com",
                "firstName": "Sam",
                "lastName": "Lee",
            },
            "isAdmin": True,
        }
        assert jwks_fetches == ["client_test"]

    def test_non_admin_token(self, client, make_token, jwks_fetches):
        response = client.get("/api/auth/me", headers=bearer(make_token(email="visitor@example.com")))

        assert response.status_code == 200
        assert response.json()["isAdmin"] is False
        assert response.json()["user"]["firstName"] is None

    def test_admin_match_ignores_case_and_whitespace(self, client, make_token, jwks_fetches):
        response = client.get("/api/auth/me", headers=bearer(make_token(email="  OWNER@example.COM ")))
        assert response.json()["isAdmin"] is True

    def test_expired_token(self, client, make_token, jwks_fetches):
        response = client.get("/api/auth/me", headers=bearer(make_token(exp_offset=-60)))

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid or expired token"

    def test_wrong_signing_key(self, client, make_token, jwks_fetches, other_signing_key):
        response = client.get("/api/auth/me", headers=bearer(make_token(key=other_signing_key)))
        assert response.status_code == 401

    def test_symmetric_token_rejected(self, client, jwks_fetches):
        token = jwt.encode(
            {"sub": "user_01TEST", "email": "admin@example.com"},
            "shared-secret",
            algorithm="HS256",
            headers={"kid": "test-key"},
        )

        response = client.get("/api/auth/me", headers=bearer(token))

        assert response.status_code == 401

    def test_malformed_token(self, client, jwks_fetches):
        response = client.get("/api/auth/me", headers=bearer("not-a-jwt"))
        assert response.status_code == 401

    def test_missing_sub(self, client, make_token, jwks_fetches):
        response = client.get("/api/auth/me", headers=bearer(make_token(sub=None)))
        assert response.status_code == 401

    def test_missing_client_id(self, client, make_token, jwks_fetches, monkeypatch):
        monkeypatch.setattr(settings, "WORKOS_CLIENT_ID", None)

        response = client.get("/api/auth/me", headers=bearer(make_token()))

        assert response.status_code == 500
        assert response.json()["error"] == "Server misconfiguration"
        assert jwks_fetches == []

    def test_missing_header_checked_before_config(self, client, monkeypatch):
        monkeypatch.setattr(settings, "WORKOS_CLIENT_ID", None)
        assert client.get("/api/auth/me").status_code == 401

    def test_jwks_unavailable(self, client, make_token, monkeypatch):
        def failing_fetch(client_id):
            raise JWKSFetchError("WorkOS down")

        jwks_cache.invalidate()
        monkeypatch.setattr(jwks_cache, "_fetch", failing_fetch)

        response = client.get("/api/auth/me", headers=bearer(make_token()))

        assert response.status_code == 401


# =============================================================================
# JWKS Cache Tests
# =============================================================================

class TestJWKSCache:
    """Test key set caching."""

    def test_keys_are_cached(self, client, make_token, jwks_fetches):
        for _ in range(3):
            client.get("/api/auth/me", headers=bearer(make_token()))

        assert jwks_fetches == ["client_test"]

    def test_unknown_kid_forces_one_refresh(self, client, make_token, jwks_fetches):
        client.get("/api/auth/me", headers=bearer(make_token()))

        response = client.get("/api/auth/me", headers=bearer(make_token(kid="rotated-key")))

        assert response.status_code == 401
        assert jwks_fetches == ["client_test", "client_test"]

    def test_unknown_kid_refresh_cooldown(self, client, make_token, jwks_fetches):
        client.get("/api/auth/me", headers=bearer(make_token()))

        for _ in range(5):
            response = client.get("/api/auth/me", headers=bearer(make_token(kid="unknown-key")))
            assert response.status_code == 401

        # Known keys keep verifying from the cached set
        assert client.get("/api/auth/me", headers=bearer(make_token())).status_code == 200
        assert jwks_fetches == ["client_test", "client_test"]

    def test_forced_refresh_after_cooldown(self, monkeypatch):
        cache = JWKSCache(ttl_seconds=3600, timeout=1, refresh_cooldown=60)
        fetches = []
        monkeypatch.setattr(cache, "_fetch", lambda cid: fetches.append(cid) or {"keys": []})
        clock = [1000.0]
        monkeypatch.setattr(jwks_module.time, "monotonic", lambda: clock[0])

        cache.get("a")
        cache.get("a", force_refresh=True)
        cache.get("a", force_refresh=True)
        clock[0] += 61
        cache.get("a", force_refresh=True)

        assert fetches == ["a", "a", "a"]

    def test_ttl_expiry(self, monkeypatch):
        cache = JWKSCache(ttl_seconds=0, timeout=1)
        fetches = []
        monkeypatch.setattr(cache, "_fetch", lambda cid: fetches.append(cid) or {"keys": []})

        cache.get("a")
        cache.get("a")

        assert fetches == ["a", "a"]

    def test_invalidate(self, monkeypatch):
        cache = JWKSCache(ttl_seconds=3600, timeout=1)
        fetches = []
        monkeypatch.setattr(cache, "_fetch", lambda cid: fetches.append(cid) or {"keys": []})

        cache.get("a")
        cache.get("b")
        cache.get("a")
        cache.invalidate("a")
        cache.get("a")
        cache.get("b")
        cache.invalidate()
        cache.get("b")

        assert fetches == ["a", "b", "a", "b"]

    def test_fetch_url_and_timeout(self, monkeypatch):
        calls = []

        def fake_get(url, **kwargs):
            calls.append((url, kwargs))
            return httpx.Response(200, json={"keys": []}, request=httpx.Request("GET", url))

        monkeypatch.setattr(jwks_module.httpx, "get", fake_get)

        JWKSCache(ttl_seconds=60, timeout=2.5).get("client_abc")

        url, kwargs = calls[0]
        assert url == "https://api.workos.com/sso/jwks/client_abc"
        assert kwargs["timeout"] == 2.5

    def test_fetch_rejects_malformed_body(self, monkeypatch):
        def fake_get(url, **kwargs):
            return httpx.Response(200, json={"keys": "nope"}, request=httpx.Request("GET", url))

        monkeypatch.setattr(jwks_module.httpx, "get", fake_get)

        with pytest.raises(JWKSFetchError):
            JWKSCache(ttl_seconds=60, timeout=1).get("client_abc")

    def test_fetch_http_error(self, monkeypatch):
        def fake_get(url, **kwargs):
            return httpx.Response(503, request=httpx.Request("GET", url))

        monkeypatch.setattr(jwks_module.httpx, "get", fake_get)

        with pytest.raises(JWKSFetchError):
            JWKSCache(ttl_seconds=60, timeout=1).get("client_abc")


# =============================================================================
# Email Resolution Tests
# =============================================================================

class TestEmailResolution:
    """Test email claims and the WorkOS fallback."""

    def test_claim_priority(self):
        claims = {"upn": "c@x.com", "preferred_username": "b@x.com", "email_address": "A@X.com"}
        assert workos.email_from_claims(claims) == "a@x.com"

    def test_blank_claims_skipped(self):
        assert workos.email_from_claims({"email": "  ", "upn": "u@x.com"}) == "u@x.com"
        assert workos.email_from_claims({}) == ""

    def test_workos_lookup_fallback(self, client, make_token, jwks_fetches, monkeypatch):
        looked_up = []

        def fake_fetch_user(user_id):
            looked_up.append(user_id)
            return {"id": user_id, "email": "Admin@Example.com"}

        monkeypatch.setattr(workos, "fetch_user", fake_fetch_user)

        response = client.get("/api/auth/me", headers=bearer(make_token(email=None)))

        assert response.json()["isAdmin"] is True
        assert response.json()["user"]["email"] == "admin@example.com"
        assert looked_up == ["user_01TEST"]

    def test_workos_lookup_failure_is_not_fatal(self, client, make_token, jwks_fetches, monkeypatch):
        def failing_fetch_user(user_id):
            raise httpx.ConnectError("unreachable")

        monkeypatch.setattr(workos, "fetch_user", failing_fetch_user)

        response = client.get("/api/auth/me", headers=bearer(make_token(email=None)))

        assert response.status_code == 200
        assert response.json()["isAdmin"] is False
        assert response.json()["user"]["email"] is None

    def test_fetch_user_without_api_key(self, monkeypatch):
        monkeypatch.setattr(settings, "WORKOS_API_KEY", None)
        assert workos.fetch_user("user_1") is None

    def test_fetch_user_request(self, monkeypatch):
        calls = []

        def fake_get(url, **kwargs):
            calls.append((url, kwargs))
            return httpx.Response(200, json={"email": "x@y.com"}, request=httpx.Request("GET", url))

        monkeypatch.setattr(settings, "WORKOS_API_KEY", "sk_test")
        monkeypatch.setattr(workos.httpx, "get", fake_get)

        assert workos.lookup_email("user_1") == "x@y.com"

        url, kwargs = calls[0]
        assert url == "https://api.workos.com/user_management/users/user_1"
        assert kwargs["headers"]["Authorization"] == "Bearer sk_test"
        assert kwargs["timeout"] == settings.HTTP_TIMEOUT_SECONDS


# =============================================================================
# Admin Gate Tests
# =============================================================================

class TestAdminGate:
    """Test require_admin on an admin route."""

    def test_anonymous(self, client):
        assert client.get("/api/admin/sections").status_code == 401

    def test_non_admin(self, client, user_headers):
        response = client.get("/api/admin/sections", headers=user_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "Admin access required"

    def test_admin(self, client, admin_headers):
        response = client.get("/api/admin/sections", headers=admin_headers)

        assert response.status_code == 200
        assert "projects" in response.json()["sections"]

    def test_empty_allow_list(self, client, admin_headers, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_EMAILS", "")
        assert client.get("/api/admin/sections", headers=admin_headers).status_code == 403
