# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Portfolio API:
# - test_naming.py / test_storage_paths.py / test_registry.py: pure helpers
# - test_section_service.py: Section CRUD against the Supabase fake
# - test_auth.py: Token verification, JWKS cache and the admin gate
# - test_admin_api.py / test_assets_api.py / test_contact.py: HTTP routes
# - fakes.py: In-memory Supabase client used by the tests above
#
# Run tests with: pytest
# =============================================================================
