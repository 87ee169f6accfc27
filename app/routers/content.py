# =============================================================================
# app/routers/content.py - Public Content Read
# =============================================================================
# Endpoints:
# - GET /content/{section} - Live rows of a section with child items embedded
# =============================================================================

from typing import Any

from fastapi import APIRouter, Path

from core.services.section_service import SectionService

router = APIRouter()


@router.get("/content/{section}")
async def get_section_content(
    section: str = Path(..., description="Section name, e.g. projects"),
) -> list[dict[str, Any]]:
    """
    Read a section as the site renders it.

    Returns the live (English, active) parent rows, each with its child
    relations embedded. Project items also carry their technologies and
    highlights; gallery rows carry their categories.
    """
    return SectionService.get_section_content(section)
