# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module owns the single Supabase client used by the API.
# It implements the singleton pattern to reuse one client connection,
# created lazily from the service_role credentials.
#
# When SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY are missing, the API still
# starts; every database-backed route then answers 503.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   client = SupabaseClient.get_client()
#   rows = client.table("home").select("*").execute().data
# =============================================================================

from __future__ import annotations

import logging

from supabase import create_client, Client

from app.config import settings
from app.exceptions import DatabaseNotConfiguredError, PortfolioException, UpstreamError

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClient:
    """
    Singleton holder for the Supabase client.

    All methods are class methods for easy access without instantiation.
    Tests swap the client by assigning `SupabaseClient._instance`.
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Returns:
            Client: Supabase client instance

        Raises:
            DatabaseNotConfiguredError: If credentials are missing
            UpstreamError: If client creation fails
        """
        if cls._instance is None:
            if not settings.supabase_configured:
                raise DatabaseNotConfiguredError()
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_ROLE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise UpstreamError("Failed to create Supabase client", e)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (next call recreates it)."""
        cls._instance = None


def execute_query(query, operation: str):
    """
    Run a PostgREST query, wrapping client errors as UpstreamError.

    Args:
        query: Built query (anything with .execute())
        operation: Human-readable description used in the error message
    """
    try:
        return query.execute()
    except PortfolioException:
        raise
    except Exception as e:
        logger.error(f"{operation}: {e}")
        raise UpstreamError(operation, e)
