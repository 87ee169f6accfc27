# =============================================================================
# core/services/contact_service.py - Contact Form Submissions
# =============================================================================
# Stores public contact form submissions in the "emails" table and serves
# them to the admin inbox.
# =============================================================================

import logging
from typing import Any

from app.exceptions import RowNotFoundError, UpstreamError, ValidationFailedError
from core.models.contact import ContactRequest
from lib.supabase_client import SupabaseClient, execute_query

logger = logging.getLogger(__name__)

TABLE = "emails"

# Form field -> column
CONTACT_COLUMNS = {
    "first_name": "first_name",
    "last_name": "last_name",
    "email": "email",
    "subject": "subject",
    "message": "message",
}


class ContactService:
    """Service for contact submissions."""

    @staticmethod
    def submit(
        form: ContactRequest,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> dict[str, Any]:
        """
        Validate and store a contact submission.

        Every field must be non-empty after trimming.

        Raises:
            ValidationFailedError: If a field is missing or blank
            DatabaseNotConfiguredError: If Supabase isn't configured
        """
        values = {
            column: (getattr(form, attr) or "").strip()
            for attr, column in CONTACT_COLUMNS.items()
        }
        missing = [column for column, value in values.items() if not value]
        if missing:
            raise ValidationFailedError("All fields are required", details={"missing": missing})

        client = SupabaseClient.get_client()
        row = {
            **values,
            "ip_address": ip_address,
            "user_agent": user_agent,
            "status": "pending",
        }
        response = execute_query(client.table(TABLE).insert([row]), "Submission failed")
        if not response.data:
            raise UpstreamError("Submission failed", "insert returned no data")

        logger.info(f"Stored contact submission from {ip_address or 'unknown address'}")
        return response.data[0]

    @staticmethod
    def list_submissions() -> list[dict[str, Any]]:
        """Submissions, newest first."""
        client = SupabaseClient.get_client()
        response = execute_query(
            client.table(TABLE)
            .select("id, first_name, last_name, email, subject, message, created_at")
            .order("created_at", desc=True),
            "Failed to load emails",
        )
        return response.data or []

    @staticmethod
    def delete_submission(submission_id: str) -> None:
        client = SupabaseClient.get_client()
        response = execute_query(
            client.table(TABLE).delete().eq("id", submission_id),
            "Failed to delete email",
        )
        if not response.data:
            raise RowNotFoundError(f"No email with id {submission_id}", TABLE, submission_id)
        logger.info(f"Deleted contact submission {submission_id}")
