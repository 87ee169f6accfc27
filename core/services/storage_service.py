# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles portfolio asset uploads, listings and removals in Supabase Storage.
# Where a file goes is decided by lib.storage_paths; this module only talks
# to the bucket.
# =============================================================================

import logging

from app.config import settings
from app.exceptions import FileTooLargeError, StorageDeleteError, UpstreamError
from lib.storage_paths import (
    ensure_full_storage_url,
    public_url,
    resolve_upload_path,
    root_prefix,
)
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# Maximum entries returned by one listing
LIST_LIMIT = 200


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles uploading, listing and deleting portfolio images.
    """

    @staticmethod
    def _bucket():
        client = SupabaseClient.get_client()
        return client.storage.from_(settings.STORAGE_BUCKET)

    @staticmethod
    def public_url(path: str) -> str:
        """Public URL for an object key in the portfolio bucket."""
        return public_url(path, settings.SUPABASE_URL, settings.STORAGE_BUCKET)

    @staticmethod
    def normalize_image_url(value):
        """Turn a bare storage path into the full public URL stored on rows."""
        return ensure_full_storage_url(
            value,
            settings.SUPABASE_URL,
            bucket=settings.STORAGE_BUCKET,
            root=settings.STORAGE_ROOT_PREFIX,
        )

    @staticmethod
    def upload_asset(
        content: bytes,
        original_filename: str | None,
        content_type: str | None,
        section: str | None,
        sub_type: str | None = None,
        caller_path: str | None = None,
        timestamp_ms: int | None = None,
    ) -> dict[str, str]:
        """
        Upload an asset, overwriting any object already at the same key.

        Args:
            content: File bytes
            original_filename: Uploaded filename (extension source)
            content_type: MIME type stored with the object
            section: Portfolio section the asset belongs to
            sub_type: experience sub-type (professional / leadership)
            caller_path: Optional relative path requested by the caller
            timestamp_ms: Override for the generated filename

        Returns:
            {"path": object key, "url": public URL}

        Raises:
            FileTooLargeError: If content exceeds MAX_UPLOAD_SIZE_MB
            UpstreamError: If the upload fails
        """
        size_bytes = len(content)
        if size_bytes > settings.max_upload_size_bytes:
            raise FileTooLargeError(size_bytes / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

        path = resolve_upload_path(
            section,
            sub_type=sub_type,
            caller_path=caller_path,
            original_filename=original_filename,
            timestamp_ms=timestamp_ms,
            root=settings.STORAGE_ROOT_PREFIX,
        )

        bucket = StorageService._bucket()
        try:
            bucket.upload(
                path=path,
                file=content,
                file_options={
                    "content-type": content_type or "application/octet-stream",
                    "upsert": "true",
                },
            )
        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise UpstreamError("Upload failed", e)

        logger.info(f"Uploaded asset to storage: {path} ({size_bytes} bytes)")
        return {"path": path, "url": StorageService.public_url(path)}

    @staticmethod
    def list_assets(prefix: str | None) -> list[dict[str, str]]:
        """
        List files directly under a prefix.

        The prefix is sanitized and rooted under the storage root; folder
        entries (no metadata) are skipped.

        Returns:
            List of {"name", "path", "url"} dicts
        """
        folder = root_prefix(prefix, settings.STORAGE_ROOT_PREFIX)
        bucket = StorageService._bucket()

        try:
            entries = bucket.list(folder, {"limit": LIST_LIMIT}) or []
        except Exception as e:
            logger.error(f"Storage list failed for {folder}: {e}")
            raise UpstreamError("List failed", e)

        files = []
        for entry in entries:
            name = entry.get("name")
            if not name or entry.get("metadata") is None:
                continue
            path = f"{folder}/{name}"
            files.append({"name": name, "path": path, "url": StorageService.public_url(path)})

        logger.debug(f"Listed {len(files)} files under {folder}")
        return files

    @staticmethod
    def remove_asset(key: str) -> None:
        """
        Delete one object.

        Raises:
            StorageDeleteError: If the removal fails
        """
        bucket = StorageService._bucket()
        try:
            bucket.remove([key])
        except Exception as e:
            raise StorageDeleteError(key, e)

        logger.info(f"Deleted file from storage: {key}")
