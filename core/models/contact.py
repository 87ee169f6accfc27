# =============================================================================
# core/models/contact.py - Contact Form Schemas
# =============================================================================
# - ContactRequest: public contact form body
# - ContactSubmission: stored row as returned to the admin inbox
#
# ContactRequest fields are all optional at the schema level; emptiness is
# checked by ContactService. The contact route parses the body itself, after
# the rate limiter has counted the request.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ContactRequest(BaseModel):
    """
    Contact form submission.

    Example:
        {
            "firstName": "Ada",
            "lastName": "Lovelace",
            "email": "ada@example.com",
            "subject": "Hello",
            "message": "Loved the projects page."
        }
    """

    model_config = ConfigDict(populate_by_name=True)

    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    email: str | None = None
    subject: str | None = None
    message: str | None = None


class ContactSubmission(BaseModel):
    """Row of the emails table, as listed in the admin inbox."""
    id: str
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    subject: str | None = None
    message: str | None = None
    created_at: datetime | None = None
