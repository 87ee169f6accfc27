# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .section_service import DeletionOutcome, SectionService
from .storage_service import StorageService
from .contact_service import ContactService

__all__ = [
    "DeletionOutcome",
    "SectionService",
    "StorageService",
    "ContactService",
]
