# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Sign-in itself is handled by WorkOS AuthKit client-side.
# These routes report who the token belongs to.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, MeResponse, MeUser

logger = logging.getLogger(__name__)

router = APIRouter()


def _first_claim(claims: dict, *names: str) -> str | None:
    for name in names:
        value = claims.get(name)
        if value is not None:
            return value
    return None


@router.get("/me", response_model=MeResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> MeResponse:
    """
    Get the current authenticated user and whether they are an admin.

    Raises:
        401: If not authenticated
    """
    return MeResponse(
        user=MeUser(
            id=user.id,
            email=user.email or user.claims.get("email") or None,
            firstName=_first_claim(user.claims, "first_name", "given_name"),
            lastName=_first_claim(user.claims, "last_name", "family_name"),
        ),
        isAdmin=user.is_admin,
    )
