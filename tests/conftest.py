# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Swaps the Supabase singleton for an in-memory fake
# - Signs WorkOS-style access tokens with a throwaway RSA key
# =============================================================================

import os
import time

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("WORKOS_CLIENT_ID", "client_test")
os.environ.setdefault("ADMIN_EMAILS", "admin@example.com, Owner@Example.com")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient
from jose import jwk, jwt

from app.auth.jwks import jwks_cache
from app.main import app
from app.rate_limit import limiter
from lib.supabase_client import SupabaseClient
from tests.fakes import FakeSupabase, seed_portfolio

KID = "test-key"


# =============================================================================
# Keys and Tokens
# =============================================================================

def _generate_rsa_pem() -> tuple[bytes, bytes]:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return private_pem, public_pem


@pytest.fixture(scope="session")
def key_pair() -> tuple[bytes, dict]:
    """Private PEM plus the public JWK served as the WorkOS key set."""
    private_pem, public_pem = _generate_rsa_pem()
    public_jwk = {
        **jwk.construct(public_pem, "RS256").to_dict(),
        "kid": KID,
        "use": "sig",
    }
    return private_pem, public_jwk


@pytest.fixture(scope="session")
def other_signing_key() -> bytes:
    """A key WorkOS never published."""
    private_pem, _ = _generate_rsa_pem()
    return private_pem


@pytest.fixture
def jwks_fetches(monkeypatch, key_pair):
    """
    Serve the test key from the JWKS cache instead of WorkOS.

    Returns the list of client ids fetched, one entry per fetch.
    """
    _, public_jwk = key_pair
    fetches = []

    def fake_fetch(client_id):
        fetches.append(client_id)
        return {"keys": [public_jwk]}

    jwks_cache.invalidate()
    monkeypatch.setattr(jwks_cache, "_fetch", fake_fetch)
    yield fetches
    jwks_cache.invalidate()


@pytest.fixture
def make_token(key_pair):
    """
    Build a signed access token.

    Usage:
        make_token(email="admin@example.com")
        make_token(email=None, exp_offset=-60)
    """
    def _make(
        sub="user_01TEST",
        email="admin@example.com",
        exp_offset=3600,
        key=None,
        kid=KID,
        **claims,
    ) -> str:
        now = int(time.time())
        payload = {"sub": sub, "iat": now, "exp": now + exp_offset, **claims}
        if email is not None:
            payload["email"] = email
        if sub is None:
            payload.pop("sub")
        headers = {"kid": kid} if kid else None
        return jwt.encode(payload, key or key_pair[0], algorithm="RS256", headers=headers)

    return _make


@pytest.fixture
def admin_headers(make_token, jwks_fetches):
    return {"Authorization": f"Bearer {make_token(email='admin@example.com')}"}


@pytest.fixture
def user_headers(make_token, jwks_fetches):
    return {"Authorization": f"Bearer {make_token(email='visitor@example.com')}"}


# =============================================================================
# Supabase
# =============================================================================

@pytest.fixture
def fake_supabase(monkeypatch):
    """Empty in-memory Supabase installed as the client singleton."""
    fake = FakeSupabase()
    monkeypatch.setattr(SupabaseClient, "_instance", fake)
    return fake


@pytest.fixture
def portfolio(fake_supabase):
    """fake_supabase seeded with a small portfolio."""
    return seed_portfolio(fake_supabase)


@pytest.fixture
def assets_bucket(portfolio):
    return portfolio.storage.from_("assets")


# =============================================================================
# HTTP
# =============================================================================

@pytest.fixture
def client():
    """TestClient with a fresh rate limiter."""
    limiter.reset()
    return TestClient(app)
