# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
#   get_current_user  - requires a valid WorkOS bearer token (401 otherwise)
#   require_admin     - additionally requires an allow-listed email (403)
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, ExpiredSignatureError

from app.auth.jwks import JWKSFetchError, verify_token
from app.auth.models import AuthUser
from app.auth.workos import email_from_claims, lookup_email
from app.config import settings
from app.exceptions import AuthMisconfiguredError, ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)

# Missing credentials are reported by get_current_user itself (401)
security = HTTPBearer(auto_error=False)


def is_admin_email(email: str) -> bool:
    """Case-insensitive membership in the ADMIN_EMAILS allow-list."""
    email = (email or "").strip().lower()
    return bool(email) and email in settings.admin_emails_list


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Extract and validate the caller from a WorkOS JWT.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies it against the client's JWKS (signature, exp, nbf)
    3. Resolves the email from the claims, or from WorkOS by `sub`
    4. Flags the caller as admin if the email is allow-listed

    Raises:
        UnauthorizedError: 401 if the token is missing, invalid or expired
        AuthMisconfiguredError: 500 if WORKOS_CLIENT_ID isn't set
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()

    client_id = settings.WORKOS_CLIENT_ID
    if not client_id:
        logger.error("WORKOS_CLIENT_ID is not set; rejecting authenticated request")
        raise AuthMisconfiguredError()

    try:
        claims = verify_token(credentials.credentials, client_id)

    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise UnauthorizedError("Invalid or expired token")

    except (JWTError, JWKSFetchError) as e:
        logger.warning(f"Token verification failed: {e}")
        raise UnauthorizedError("Invalid or expired token")

    user_id = claims.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise UnauthorizedError("Invalid token: missing user ID")

    email = email_from_claims(claims)
    if not email:
        email = lookup_email(str(user_id))

    user = AuthUser(
        id=str(user_id),
        email=email,
        is_admin=is_admin_email(email),
        claims=claims,
    )
    logger.debug(f"Authenticated user: {user.id} (admin={user.is_admin})")
    return user


async def require_admin(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """
    Require an authenticated admin.

    Raises:
        ForbiddenError: 403 if the caller isn't on the allow-list
    """
    if not user.is_admin:
        logger.warning(f"Non-admin {user.email or user.id} denied admin access")
        raise ForbiddenError()
    return user
