# =============================================================================
# core/ - Content Logic Package
# =============================================================================
# This package contains the portfolio's content logic:
# - registry.py: Sections, child relations and nested relations
# - models/: Pydantic request/response schemas
# - services/: Section CRUD, asset storage and contact submissions
#
# Services raise app.exceptions types; routers map them to HTTP responses.
# =============================================================================
