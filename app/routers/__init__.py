# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - contact.py: Public contact form (rate limited)
# - content.py: Public read of live section content
# - admin.py: Section / child item / nested item editing
# - assets.py: Storage listing and image upload
# - emails.py: Contact submission inbox
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import contact
from . import content
from . import admin
from . import assets
from . import emails

__all__ = [
    "health",
    "contact",
    "content",
    "admin",
    "assets",
    "emails",
]
