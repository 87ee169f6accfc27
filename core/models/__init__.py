# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - content.py: Section row / item bodies and storage responses
# - contact.py: Contact form and inbox schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Content Models - Admin editing and assets
# -----------------------------------------------------------------------------
from .content import (
    AssetFile,
    GalleryRowBody,
    ItemBody,
    NestedBody,
    RowPatch,
    SectionsResponse,
    StorageListResponse,
    UploadResponse,
)

# -----------------------------------------------------------------------------
# Contact Models - Public form and admin inbox
# -----------------------------------------------------------------------------
from .contact import (
    ContactRequest,
    ContactSubmission,
)

__all__ = [
    # Content
    "AssetFile",
    "GalleryRowBody",
    "ItemBody",
    "NestedBody",
    "RowPatch",
    "SectionsResponse",
    "StorageListResponse",
    "UploadResponse",
    # Contact
    "ContactRequest",
    "ContactSubmission",
]
