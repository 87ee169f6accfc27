# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App entry point, middleware setup, error handlers
# - config.py: Environment variable loading and settings
# - exceptions.py: Error taxonomy and JSON error responses
# - rate_limit.py: slowapi limiter for public endpoints
# - auth/: WorkOS JWT verification and the admin gate
# - routers/: API endpoint definitions organized by feature
#
# The app layer is thin - it handles HTTP concerns and delegates
# content logic to the core/ package.
# =============================================================================
