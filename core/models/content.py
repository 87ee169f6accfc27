# =============================================================================
# core/models/content.py - Content Request/Response Schemas
# =============================================================================
# These models define the API contract for the admin content endpoints:
# - RowPatch: partial update of a parent row (columns passed through)
# - ItemBody: child item create/update (extra keys whitelisted later)
# - NestedBody: nested item create/update
# - GalleryRowBody: gallery row create/update
# - AssetFile / StorageListResponse / UploadResponse: object storage
#
# Relation bodies accept arbitrary extra keys in any naming convention; the
# service keeps only the relation's whitelisted columns.
# =============================================================================

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class _OpenBody(BaseModel):
    """A JSON object whose undeclared keys are kept as column candidates."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def columns(self) -> dict[str, Any]:
        """Undeclared keys, as sent by the caller."""
        return dict(self.model_extra or {})


class RowPatch(_OpenBody):
    """
    Partial update of a section's parent row.

    The parent table's own columns are the contract, so keys are passed
    through unchanged (after image URL normalization).

    Example:
        {"title": "Hi, I'm Sam", "imageUrl": "images/home/me.png"}
    """


class ItemBody(_OpenBody):
    """
    Child item body.

    Example:
        {"itemType": "skills", "skill": "Rust"}
    """

    item_type: str | None = Field(
        default=None,
        alias="itemType",
        description="Child relation (skills, interests, organizations, ...)"
    )

    parent_id: int | None = Field(
        default=None,
        validation_alias=AliasChoices("parentId", "parent_id", "education_id"),
        description="Parent row id; defaults to the section's live row"
    )


class NestedBody(_OpenBody):
    """
    Nested item body.

    Example:
        {"course": "Compilers", "courseUrl": "https://..."}
    """


class GalleryRowBody(_OpenBody):
    """
    Gallery row body.

    Example:
        {"title": "Sunset", "imageUrl": "images/gallery/sunset.jpg", "sortOrder": 3}
    """


class SectionsResponse(BaseModel):
    """Known section names."""
    sections: list[str]


class AssetFile(BaseModel):
    """One file in the storage bucket."""
    name: str
    path: str
    url: str


class StorageListResponse(BaseModel):
    """Files under a storage prefix."""
    files: list[AssetFile] = Field(default_factory=list)


class UploadResponse(BaseModel):
    """
    Result of an asset upload.

    Example:
        {
            "path": "assets/images/gallery/1718000000000.png",
            "url": "https://xxx.supabase.co/storage/v1/object/public/assets/assets/images/gallery/1718000000000.png"
        }
    """
    path: str
    url: str
