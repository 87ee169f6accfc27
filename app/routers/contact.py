# =============================================================================
# app/routers/contact.py - Public Contact Form
# =============================================================================
# Endpoints:
# - POST /contact - Store a contact form submission (rate limited per IP)
#
# The body is read inside the handler rather than declared as a parameter,
# so the limiter counts every request before any parsing or validation.
# =============================================================================

import logging

from fastapi import APIRouter, Request, status
from pydantic import ValidationError

from app.config import settings
from app.exceptions import ValidationFailedError
from app.rate_limit import limiter
from core.models.contact import ContactRequest
from core.services.contact_service import ContactService

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_form(request: Request) -> ContactRequest:
    """Parse the JSON body into a ContactRequest, or raise a 400."""
    try:
        payload = await request.json()
    except ValueError:
        raise ValidationFailedError("Request body must be a JSON object")

    try:
        return ContactRequest.model_validate(payload)
    except ValidationError as e:
        errors = [
            {
                "field": ".".join(str(loc) for loc in err.get("loc", [])),
                "message": err.get("msg", ""),
            }
            for err in e.errors()
        ]
        raise ValidationFailedError("All fields are required", details={"errors": errors})


@router.post("/contact", status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.CONTACT_RATE_LIMIT)
async def submit_contact(request: Request):
    """
    Submit the contact form.

    Body: {firstName, lastName, email, subject, message}, all required.
    Each client IP may submit a limited number of times per window
    (CONTACT_RATE_LIMIT, "5/15minutes" by default), valid or not;
    further requests get 429.
    """
    form = await _read_form(request)
    ContactService.submit(
        form,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return {"success": True}
