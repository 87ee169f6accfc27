# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """
    Authenticated caller extracted from a verified WorkOS JWT.

    email is "" when neither the token nor the WorkOS user record had one.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    email: str = ""
    is_admin: bool = False
    claims: dict[str, Any] = Field(default_factory=dict, repr=False)


class MeUser(BaseModel):
    """Profile fields returned by /auth/me."""
    id: str
    email: str | None = None
    firstName: str | None = None
    lastName: str | None = None


class MeResponse(BaseModel):
    """
    Response of /auth/me.

    Example:
        {
            "user": {"id": "user_01H...", "email": "sam@example.com",
                     "firstName": "Sam", "lastName": "Lee"},
            "isAdmin": true
        }
    """
    user: MeUser
    isAdmin: bool
