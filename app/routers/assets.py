# =============================================================================
# app/routers/assets.py - Admin Asset Storage
# =============================================================================
# Endpoints:
# - GET  /storage/list?prefix=  - Files under a bucket prefix
# - POST /upload                - Upload an image (multipart)
#
# Upload destinations are decided by lib.storage_paths from the section,
# the experience sub-type and the optional caller path.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from app.auth import require_admin
from app.exceptions import ValidationFailedError
from core.models.content import AssetFile, StorageListResponse, UploadResponse
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/storage/list", response_model=StorageListResponse)
async def list_storage(
    prefix: str | None = Query(None, description="Folder under the assets root, e.g. images/home"),
):
    """List files directly under a prefix (folders are skipped)."""
    files = StorageService.list_assets(prefix)
    return StorageListResponse(files=[AssetFile(**f) for f in files])


@router.post("/upload", response_model=UploadResponse)
async def upload_asset(
    file: Annotated[UploadFile | None, File(description="Image to upload")] = None,
    section: Annotated[str | None, Form()] = None,
    experience_type: Annotated[str | None, Form(alias="experienceType")] = None,
    path: Annotated[str | None, Form(description="Relative destination path")] = None,
):
    """
    Upload an asset to the storage bucket.

    This endpoint:
    1. Rejects requests without a file (400) or over the size limit (413)
    2. Resolves the destination from section / experienceType / path
    3. Uploads, overwriting any existing object at that key

    Returns the object key and its public URL.
    """
    if file is None or not file.filename:
        raise ValidationFailedError("No file uploaded")

    content = await file.read()
    result = StorageService.upload_asset(
        content,
        original_filename=file.filename,
        content_type=file.content_type,
        section=section,
        sub_type=experience_type,
        caller_path=path,
    )
    return UploadResponse(**result)
