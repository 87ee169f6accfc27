# =============================================================================
# app/routers/admin.py - Admin Content Endpoints
# =============================================================================
# Generic CRUD over portfolio sections, their child items and nested items.
# Every route requires an authenticated admin (401 / 403 otherwise).
#
# Endpoints:
# - GET    /sections                                   - Known sections
# - GET    /sections/gallery/rows                      - Live gallery rows
# - POST   /sections/gallery/rows                      - Create gallery row
# - PATCH  /sections/gallery/rows/{id}                 - Update gallery row
# - DELETE /sections/gallery/rows/{id}                 - Delete gallery row
# - PATCH  /sections/{section}                         - Update default row
# - PATCH  /sections/{section}/rows/{id}               - Update row by id
# - GET    /sections/{section}/items                   - List child items
# - POST   /sections/{section}/items                   - Create child item
# - PATCH  /sections/{section}/items/{id}              - Update child item
# - DELETE /sections/{section}/items/{id}              - Delete child item
# - GET    /sections/{section}/nested/{table}/{parentId}/{nestedType}
# - POST   /sections/{section}/nested/{table}/{parentId}/{nestedType}
# - PATCH  /sections/{section}/nested/{table}/{parentId}/{nestedType}/{id}
# - DELETE /sections/{section}/nested/{table}/{parentId}/{nestedType}/{id}
#
# The gallery routes are declared before the {section} routes so that
# /sections/gallery/rows/{id} isn't taken for a parent row patch.
# =============================================================================

from typing import Any

from fastapi import APIRouter, Depends, Path, Query, Response, status

from app.auth import require_admin
from core.models.content import (
    GalleryRowBody,
    ItemBody,
    NestedBody,
    RowPatch,
    SectionsResponse,
)
from core.registry import list_sections, resolve_section
from core.services.section_service import DeletionOutcome, SectionService

router = APIRouter(dependencies=[Depends(require_admin)])

STORAGE_CLEANUP_HEADER = "X-Storage-Cleanup"


def _no_content(outcome: DeletionOutcome) -> Response:
    """204 response; a failed image cleanup is reported in X-Storage-Cleanup."""
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    if outcome.storage_warning:
        response.headers[STORAGE_CLEANUP_HEADER] = "failed"
    return response


# =============================================================================
# Sections
# =============================================================================

@router.get("/sections", response_model=SectionsResponse)
async def get_sections():
    """List the sections the admin can edit."""
    return SectionsResponse(sections=list_sections())


# =============================================================================
# Gallery rows
# =============================================================================

@router.get("/sections/gallery/rows")
async def list_gallery_rows() -> list[dict[str, Any]]:
    """Live gallery rows ordered by sortOrder, with their categories."""
    return SectionService.list_gallery_rows()


@router.post("/sections/gallery/rows", status_code=status.HTTP_201_CREATED)
async def create_gallery_row(body: GalleryRowBody) -> dict[str, Any]:
    """
    Create a gallery row.

    Missing title / description / imageUrl default to "", sortOrder to 0.
    The row is created live (English, active).
    """
    return SectionService.create_gallery_row(body.columns())


@router.patch("/sections/gallery/rows/{row_id}")
async def patch_gallery_row(
    body: GalleryRowBody,
    row_id: int = Path(..., description="Gallery row id"),
) -> dict[str, Any]:
    return SectionService.patch_gallery_row(row_id, body.columns())


@router.delete(
    "/sections/gallery/rows/{row_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_gallery_row(row_id: int = Path(..., description="Gallery row id")):
    """Delete a gallery row and, best effort, its image."""
    return _no_content(SectionService.delete_gallery_row(row_id))


# =============================================================================
# Parent rows
# =============================================================================

@router.patch("/sections/{section}")
async def patch_section(body: RowPatch, section: str = Path(...)) -> dict[str, Any]:
    """
    Update the section's default live row.

    The body's keys are written as columns; image fields given as bare
    storage paths are stored as full public URLs.
    """
    return SectionService.patch_parent_row(section, body.columns())


@router.patch("/sections/{section}/rows/{row_id}")
async def patch_section_row(
    body: RowPatch,
    section: str = Path(...),
    row_id: int = Path(..., description="Parent row id"),
) -> dict[str, Any]:
    """Update a specific parent row of the section."""
    return SectionService.patch_parent_row_by_id(section, row_id, body.columns())


# =============================================================================
# Child items
# =============================================================================

@router.get("/sections/{section}/items")
async def list_items(
    section: str = Path(...),
    item_type: str | None = Query(None, alias="itemType"),
    parent_id: int | None = Query(None, alias="parentId"),
) -> list[dict[str, Any]]:
    """
    List child items of a section.

    itemType may be omitted when the section has a single child relation;
    parentId defaults to the section's live row.
    """
    return SectionService.list_child_items(section, item_type, parent_id)


@router.post("/sections/{section}/items", status_code=status.HTTP_201_CREATED)
async def create_item(
    body: ItemBody,
    section: str = Path(...),
    item_type: str | None = Query(None, alias="itemType"),
    parent_id: int | None = Query(None, alias="parentId"),
) -> dict[str, Any]:
    """
    Create a child item.

    itemType and parentId are read from the query string or the body.
    Only the relation's whitelisted columns are written.
    """
    return SectionService.create_child_item(
        section,
        item_type or body.item_type,
        body.columns(),
        parent_id=parent_id if parent_id is not None else body.parent_id,
    )


@router.patch("/sections/{section}/items/{item_id}")
async def patch_item(
    body: ItemBody,
    section: str = Path(...),
    item_id: int = Path(..., description="Child item id"),
    item_type: str | None = Query(None, alias="itemType"),
) -> dict[str, Any]:
    return SectionService.patch_child_item(
        section,
        item_type or body.item_type,
        item_id,
        body.columns(),
    )


@router.delete(
    "/sections/{section}/items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_item(
    section: str = Path(...),
    item_id: int = Path(..., description="Child item id"),
    item_type: str | None = Query(None, alias="itemType"),
):
    """Delete a child item and, best effort, its image."""
    return _no_content(SectionService.delete_child_item(section, item_type, item_id))


# =============================================================================
# Nested items
# =============================================================================

NESTED_PATH = "/sections/{section}/nested/{parent_table}/{parent_id}/{nested_type}"


@router.get(NESTED_PATH)
async def list_nested(
    section: str = Path(...),
    parent_table: str = Path(...),
    parent_id: int = Path(...),
    nested_type: str = Path(...),
) -> list[dict[str, Any]]:
    resolve_section(section)
    return SectionService.list_nested(parent_table, parent_id, nested_type)


@router.post(NESTED_PATH, status_code=status.HTTP_201_CREATED)
async def create_nested(
    body: NestedBody,
    section: str = Path(...),
    parent_table: str = Path(...),
    parent_id: int = Path(...),
    nested_type: str = Path(...),
) -> dict[str, Any]:
    """Create a nested item under a child item (or gallery row)."""
    resolve_section(section)
    return SectionService.create_nested(parent_table, parent_id, nested_type, body.columns())


@router.patch(NESTED_PATH + "/{item_id}")
async def patch_nested(
    body: NestedBody,
    section: str = Path(...),
    parent_table: str = Path(...),
    parent_id: int = Path(...),
    nested_type: str = Path(...),
    item_id: int = Path(...),
) -> dict[str, Any]:
    resolve_section(section)
    return SectionService.patch_nested(parent_table, nested_type, item_id, body.columns())


@router.delete(
    NESTED_PATH + "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_nested(
    section: str = Path(...),
    parent_table: str = Path(...),
    parent_id: int = Path(...),
    nested_type: str = Path(...),
    item_id: int = Path(...),
):
    resolve_section(section)
    return _no_content(SectionService.delete_nested(parent_table, nested_type, item_id))
