# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Portfolio Admin API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload --port 3001
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.exceptions import (
    PortfolioException,
    portfolio_exception_handler,
    validation_exception_handler,
)
from app.rate_limit import limiter, rate_limit_exceeded_handler
from app.routers import admin, assets, contact, content, emails, health
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the effective configuration on startup; there is nothing to tear
    down on shutdown.
    """
    logger.info(f"Starting Portfolio API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    if not settings.supabase_configured:
        logger.warning("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY not set; database routes will answer 503")
    if not settings.WORKOS_CLIENT_ID:
        logger.warning("WORKOS_CLIENT_ID not set; authenticated routes will answer 500")
    if not settings.admin_emails_list:
        logger.warning("ADMIN_EMAILS is empty; nobody can use the admin API")

    yield

    logger.info("Shutting down Portfolio API")


# Create FastAPI application
app = FastAPI(
    title="Portfolio API",
    description="""
## Portfolio Content API

Serves the portfolio site's content and lets the site owner edit it.

### Public

- **Health** - liveness and readiness probes
- **Contact** - contact form (rate limited per IP)
- **Content** - live section content as rendered by the site

### Admin

Requires a WorkOS access token whose email is listed in `ADMIN_EMAILS`.

| Resource | Path |
|----------|------|
| Sections | `/api/admin/sections` |
| Child items | `/api/admin/sections/{section}/items` |
| Nested items | `/api/admin/sections/{section}/nested/{parentTable}/{parentId}/{nestedType}` |
| Gallery rows | `/api/admin/sections/gallery/rows` |
| Assets | `/api/admin/storage/list`, `/api/admin/upload` |
| Inbox | `/api/admin/emails` |
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Who the bearer token belongs to",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
        {
            "name": "Contact",
            "description": "Public contact form",
        },
        {
            "name": "Content",
            "description": "Public read of live section content",
        },
        {
            "name": "Admin",
            "description": "Section, item and nested item editing",
        },
        {
            "name": "Assets",
            "description": "Image storage listing and upload",
        },
        {
            "name": "Inbox",
            "description": "Contact submissions",
        },
    ],
)

app.state.limiter = limiter


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Storage-Cleanup"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(PortfolioException)
async def handle_portfolio_exception(request: Request, exc: PortfolioException):
    """Handle custom portfolio exceptions."""
    return await portfolio_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies and parameters."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(RateLimitExceeded)
async def handle_rate_limit(request: Request, exc: RateLimitExceeded):
    """Handle rate limit violations."""
    return await rate_limit_exceeded_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api",
    tags=["Health"]
)

# Contact form
app.include_router(
    contact.router,
    prefix="/api",
    tags=["Contact"]
)

# Public content
app.include_router(
    content.router,
    prefix="/api",
    tags=["Content"]
)

# Admin content editing
app.include_router(
    admin.router,
    prefix="/api/admin",
    tags=["Admin"]
)

# Admin asset storage
app.include_router(
    assets.router,
    prefix="/api/admin",
    tags=["Assets"]
)

# Admin inbox
app.include_router(
    emails.router,
    prefix="/api/admin",
    tags=["Inbox"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Portfolio API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }
