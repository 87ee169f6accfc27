# =============================================================================
# app/rate_limit.py - Request Rate Limiting
# =============================================================================
# slowapi limiter shared by the app and the routers that use it.
#
# Usage:
#   from app.rate_limit import limiter
#
#   @router.post("/contact")
#   @limiter.limit(settings.CONTACT_RATE_LIMIT)
#   async def submit(request: Request, ...):
#       ...
# =============================================================================

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

logger = logging.getLogger(__name__)

# Limits are counted per client IP, in memory
limiter = Limiter(key_func=get_remote_address)

RATE_LIMIT_MESSAGE = "Too many submissions. Please try again later."


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Answer 429 with the contact form's error body."""
    logger.warning(f"Rate limit exceeded for {get_remote_address(request)} on {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={"error": RATE_LIMIT_MESSAGE, "code": "RATE_LIMITED"},
    )
