# =============================================================================
# app/routers/emails.py - Admin Inbox
# =============================================================================
# Endpoints:
# - GET    /emails       - Contact submissions, newest first
# - DELETE /emails/{id}  - Delete a submission
# =============================================================================

from fastapi import APIRouter, Depends, Path, Response, status

from app.auth import require_admin
from core.models.contact import ContactSubmission
from core.services.contact_service import ContactService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/emails", response_model=list[ContactSubmission])
async def list_emails():
    """List contact form submissions, newest first."""
    return ContactService.list_submissions()


@router.delete(
    "/emails/{email_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_email(email_id: str = Path(..., description="Submission id")):
    ContactService.delete_submission(email_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
