# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error leaves the API as a JSON body with an "error" message, a
# machine-readable "code" and, where useful, a suggestion on how to fix it.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.config import settings

logger = logging.getLogger(__name__)


class PortfolioException(Exception):
    """
    Base exception for the portfolio API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "PORTFOLIO_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}
        self.headers = headers

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "error": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Registry Exceptions
# =============================================================================

class UnknownSectionError(PortfolioException):
    """Raised when a section name isn't in the registry."""

    def __init__(self, section: str, known: list[str]):
        super().__init__(
            message=f"Unknown section: {section}",
            code="UNKNOWN_SECTION",
            status_code=400,
            suggestion=f"Use one of: {', '.join(known)}",
            details={"section": section},
        )


class ItemTypeRequiredError(PortfolioException):
    """Raised when a section has several child relations and none was chosen."""

    def __init__(self, section: str, item_types: list[str]):
        super().__init__(
            message=f"itemType is required for section: {section}",
            code="ITEM_TYPE_REQUIRED",
            status_code=400,
            suggestion=f"Pass itemType as one of: {', '.join(item_types)}",
            details={"section": section, "item_types": item_types},
        )


class UnknownItemTypeError(PortfolioException):
    """Raised when an itemType isn't configured for a section."""

    def __init__(self, section: str, item_type: str, item_types: list[str]):
        super().__init__(
            message=f"Unknown section or itemType: {section}/{item_type}",
            code="UNKNOWN_ITEM_TYPE",
            status_code=400,
            suggestion=(
                f"Use one of: {', '.join(item_types)}" if item_types
                else f"Section {section} has no child items"
            ),
            details={"section": section, "item_type": item_type},
        )


class UnknownNestedTypeError(PortfolioException):
    """Raised when a (parentTable, nestedType) pair isn't configured."""

    def __init__(self, parent_table: str, nested_type: str):
        super().__init__(
            message=f"Unknown nested type: {parent_table}/{nested_type}",
            code="UNKNOWN_NESTED_TYPE",
            status_code=400,
            details={"parent_table": parent_table, "nested_type": nested_type},
        )


# =============================================================================
# Row Exceptions
# =============================================================================

class RowNotFoundError(PortfolioException):
    """Raised when a row lookup or a single-row write matches nothing."""

    def __init__(self, message: str, table: str, row_id: Any = None):
        details: dict[str, Any] = {"table": table}
        if row_id is not None:
            details["id"] = row_id
        super().__init__(
            message=message,
            code="ROW_NOT_FOUND",
            status_code=404,
            details=details,
        )


class ValidationFailedError(PortfolioException):
    """Raised when a request body is well-formed but unusable."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details=details,
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class UnauthorizedError(PortfolioException):
    """Raised when the bearer token is missing, invalid or expired."""

    def __init__(self, message: str = "Missing or invalid authorization"):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(PortfolioException):
    """Raised when an authenticated caller isn't on the admin allow-list."""

    def __init__(self):
        super().__init__(
            message="Admin access required",
            code="FORBIDDEN",
            status_code=403,
            suggestion="Sign in with an email listed in ADMIN_EMAILS",
        )


class AuthMisconfiguredError(PortfolioException):
    """Raised when token verification can't run because of missing config."""

    def __init__(self):
        super().__init__(
            message="Server misconfiguration",
            code="AUTH_MISCONFIGURED",
            status_code=500,
            suggestion="Set WORKOS_CLIENT_ID in the server environment",
        )


# =============================================================================
# Upstream Exceptions
# =============================================================================

class DatabaseNotConfiguredError(PortfolioException):
    """Raised when Supabase credentials are missing."""

    def __init__(self):
        super().__init__(
            message="Database not configured",
            code="DATABASE_NOT_CONFIGURED",
            status_code=503,
            suggestion="Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY in your .env file",
        )


class UpstreamError(PortfolioException):
    """Raised when a database or storage call fails."""

    def __init__(self, operation: str, error: Exception | str):
        super().__init__(
            message=f"{operation}: {error}",
            code="UPSTREAM_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"operation": operation},
        )
        self.operation = operation


class FileTooLargeError(PortfolioException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb},
        )


class StorageDeleteError(PortfolioException):
    """
    Raised when a storage object can't be removed.

    Row deletions catch this and record it as a warning instead of failing.
    """

    def __init__(self, key: str, error: Exception | str):
        super().__init__(
            message=f"Failed to delete storage object {key}: {error}",
            code="STORAGE_DELETE_ERROR",
            status_code=500,
            details={"key": key},
        )
        self.key = key


# =============================================================================
# Exception Handlers
# =============================================================================

async def portfolio_exception_handler(
    request: Request,
    exc: PortfolioException
) -> JSONResponse:
    """
    Convert PortfolioException to JSON response.

    Upstream failure messages are only surfaced outside production.
    """
    content = exc.to_dict()
    if isinstance(exc, UpstreamError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        if settings.is_production:
            content = {"error": exc.operation, "code": exc.code}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Request bodies that don't parse are client errors, answered with 400.
    """
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation error",
            "code": "VALIDATION_ERROR",
            "details": {"errors": errors},
        }
    )
