# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides WorkOS JWT authentication and the admin gate.
#
# Usage:
#   from app.auth import require_admin, AuthUser
#
#   @router.get("/admin-only")
#   async def admin_only(user: AuthUser = Depends(require_admin)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import get_current_user, require_admin
from app.auth.models import AuthUser, MeResponse

__all__ = [
    "get_current_user",
    "require_admin",
    "AuthUser",
    "MeResponse",
]
