# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# Portfolio API configuration, read by pydantic-settings from the process
# environment and, when present, a .env file in the working directory
# (process environment wins).
#
# Usage:
#   from app.config import settings
#   bucket = settings.STORAGE_BUCKET
#
# Supabase and WorkOS credentials are optional at startup. Missing database
# credentials make content routes answer 503; a missing WorkOS client id makes
# every authenticated request answer 500.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Portfolio API settings.

    Import the module-level `settings` instance rather than instantiating this.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------

    SUPABASE_URL: str | None = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_ROLE_KEY: str | None = Field(
        default=None,
        description="Supabase service_role key (bypasses RLS)"
    )

    STORAGE_BUCKET: str = Field(
        default="assets",
        description="Storage bucket holding portfolio images"
    )

    STORAGE_ROOT_PREFIX: str = Field(
        default="assets",
        description="Top-level folder inside the bucket every upload lands under"
    )

    DEFAULT_LANGUAGE_CODE: str = Field(
        default="en",
        description="languageCode of the rows the admin API edits"
    )

    # -------------------------------------------------------------------------
    # WorkOS Configuration
    # -------------------------------------------------------------------------

    WORKOS_API_KEY: str | None = Field(
        default=None,
        description="WorkOS API key (used for user lookups when the JWT has no email)"
    )

    WORKOS_CLIENT_ID: str | None = Field(
        default=None,
        description="WorkOS client id; selects the JWKS used to verify tokens"
    )

    WORKOS_API_HOSTNAME: str = Field(
        default="api.workos.com",
        description="WorkOS API hostname"
    )

    JWKS_CACHE_TTL_SECONDS: int = Field(
        default=3600,
        ge=0,
        description="How long a fetched JWKS is trusted before it is refetched"
    )

    JWKS_REFRESH_COOLDOWN_SECONDS: int = Field(
        default=60,
        ge=0,
        description="Minimum gap between refetches forced by an unknown kid"
    )

    HTTP_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for outbound HTTP calls (JWKS, WorkOS user lookup)"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=3001,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    # Admin allow-list (comma-separated emails)
    ADMIN_EMAILS: str = Field(
        default="",
        description="Emails allowed to use the admin API (comma-separated)"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    CONTACT_RATE_LIMIT: str = Field(
        default="5/15minutes",
        description="Contact form quota per client IP (slowapi limit string)"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum file upload size in MB"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def admin_emails_list(self) -> list[str]:
        """Admin allow-list, trimmed and lowercased."""
        return [email.strip().lower() for email in self.ADMIN_EMAILS.split(",") if email.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        """Upload limit in bytes."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def workos_base_url(self) -> str:
        return f"https://{self.WORKOS_API_HOSTNAME}"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_SERVICE_ROLE_KEY)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Build Settings once and reuse it.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
