# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - naming.py: camelCase / snake_case / flattened key matching
# - storage_paths.py: Upload path derivation and public URL helpers
# - supabase_client.py: Singleton Supabase client and query wrapper
#
# naming and storage_paths are pure and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, execute_query

__all__ = [
    "SupabaseClient",
    "execute_query",
]
