# =============================================================================
# tests/test_contact.py - Contact Form and Inbox Tests
# =============================================================================
# This module contains tests for:
# - Contact form validation and storage
# - Per-IP rate limiting
# - The admin inbox (list / delete)
# =============================================================================

import pytest

from app.exceptions import ValidationFailedError
from core.models.contact import ContactRequest
from core.services.contact_service import ContactService

VALID_FORM = {
    "firstName": "Grace",
    "lastName": "Hopper",
    "email": "grace@example.com",
    "subject": "Compilers",
    "message": "Nice portfolio!",
}


# =============================================================================
# Service Tests
# =============================================================================

class TestContactService:
    """Test ContactService directly."""

    def test_submit_trims_and_stores(self, fake_supabase):
        form = ContactRequest(**{**VALID_FORM, "firstName": "  Grace "})

        row = ContactService.submit(form, ip_address="10.0.0.1", user_agent="pytest")

        assert row["first_name"] == "Grace"
        assert row["status"] == "pending"
        assert row["ip_address"] == "10.0.0.1"
        assert isinstance(row["id"], str)

    def test_submit_reports_missing_fields(self, fake_supabase):
        form = ContactRequest(firstName="Grace", message="   ")

        with pytest.raises(ValidationFailedError) as exc_info:
            ContactService.submit(form)

        assert exc_info.value.details["missing"] == ["last_name", "email", "subject", "message"]
        assert fake_supabase.rows("emails") == []

    def test_list_newest_first(self, portfolio):
        rows = ContactService.list_submissions()
        assert [r["first_name"] for r in rows] == ["Alan", "Ada"]


# =============================================================================
# Contact Endpoint Tests
# =============================================================================

class TestContactEndpoint:
    """Test POST /contact."""

    def test_success(self, client, fake_supabase):
        response = client.post("/api/contact", json=VALID_FORM)

        assert response.status_code == 201
        assert response.json() == {"success": True}

        stored = fake_supabase.rows("emails")[0]
        assert stored["email"] == "grace@example.com"
        assert stored["ip_address"] == "testclient"
        assert stored["user_agent"] == "testclient"

    def test_blank_message_rejected(self, client, fake_supabase):
        response = client.post("/api/contact", json={**VALID_FORM, "message": "   \n"})

        assert response.status_code == 400
        assert response.json()["error"] == "All fields are required"
        assert fake_supabase.rows("emails") == []

    def test_missing_fields_rejected(self, client, fake_supabase):
        response = client.post("/api/contact", json={})
        assert response.status_code == 400

    def test_sixth_submission_rate_limited(self, client, fake_supabase):
        for _ in range(5):
            assert client.post("/api/contact", json=VALID_FORM).status_code == 201

        response = client.post("/api/contact", json=VALID_FORM)

        assert response.status_code == 429
        assert response.json()["error"] == "Too many submissions. Please try again later."
        assert len(fake_supabase.rows("emails")) == 5

    @pytest.mark.parametrize("kwargs", [
        {"json": {"message": ""}},
        {"json": []},
        {"json": {"firstName": 123}},
        {},
        {"content": b"not json", "headers": {"Content-Type": "application/json"}},
    ])
    def test_invalid_submissions_count_toward_limit(self, client, fake_supabase, kwargs):
        for _ in range(5):
            assert client.post("/api/contact", **kwargs).status_code == 400

        response = client.post("/api/contact", json=VALID_FORM)

        assert response.status_code == 429
        assert fake_supabase.rows("emails") == []

    @pytest.mark.parametrize("kwargs", [
        {"json": {"firstName": 123}},
        {"json": []},
        {},
    ])
    def test_sixth_submission_limited_whatever_the_body(self, client, fake_supabase, kwargs):
        for _ in range(5):
            assert client.post("/api/contact", json=VALID_FORM).status_code == 201

        response = client.post("/api/contact", **kwargs)

        assert response.status_code == 429
        assert response.json()["code"] == "RATE_LIMITED"

    def test_non_string_field_rejected(self, client, fake_supabase):
        response = client.post("/api/contact", json={**VALID_FORM, "firstName": 123})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert response.json()["details"]["errors"][0]["field"] == "firstName"
        assert fake_supabase.rows("emails") == []

    def test_non_object_body_rejected(self, client, fake_supabase):
        response = client.post("/api/contact", json=["Grace", "Hopper"])

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_missing_body_rejected(self, client, fake_supabase):
        response = client.post("/api/contact")

        assert response.status_code == 400
        assert response.json()["error"] == "Request body must be a JSON object"

    def test_database_failure(self, client, fake_supabase):
        fake_supabase.fail_tables["emails"] = RuntimeError("insert failed")

        response = client.post("/api/contact", json=VALID_FORM)

        assert response.status_code == 500
        assert response.json()["code"] == "UPSTREAM_ERROR"


# =============================================================================
# Inbox Tests
# =============================================================================

class TestInbox:
    """Test the admin inbox."""

    def test_list(self, client, admin_headers, portfolio):
        response = client.get("/api/admin/emails", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert [e["first_name"] for e in body] == ["Alan", "Ada"]
        assert "ip_address" not in body[0]

    def test_delete(self, client, admin_headers, portfolio):
        email_id = "0b8f6c1e-0000-4000-8000-000000000001"

        response = client.delete(f"/api/admin/emails/{email_id}", headers=admin_headers)

        assert response.status_code == 204
        assert [e["id"] for e in portfolio.rows("emails")] == ["0b8f6c1e-0000-4000-8000-000000000002"]

    def test_delete_missing(self, client, admin_headers, portfolio):
        response = client.delete("/api/admin/emails/nope", headers=admin_headers)
        assert response.status_code == 404

    def test_requires_admin(self, client, user_headers, portfolio):
        assert client.get("/api/admin/emails", headers=user_headers).status_code == 403
