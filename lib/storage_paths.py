# =============================================================================
# lib/storage_paths.py - Storage Path Resolver
# =============================================================================
# Derives where an uploaded asset lives in the storage bucket, builds the
# public URL stored on content rows, and turns such a URL back into the
# object key used to delete it.
#
# Bucket layout (everything under one root prefix, "assets" by default):
#   assets/images/education/...              education items
#   assets/images/gallery/...                gallery rows
#   assets/images/projects/...               project items
#   assets/images/experiences/<type>/...     professional / leadership logos
#   assets/images/home/...                   experience uploads without a type
#   assets/<section>/<timestamp>.<ext>       anything else without a path
#
# Pure functions, no I/O.
# =============================================================================

from __future__ import annotations

import re
import time
from urllib.parse import quote, unquote

DEFAULT_BUCKET = "assets"
DEFAULT_ROOT = "assets"

# Sections whose uploads always go to a fixed directory
FIXED_DIRECTORIES: dict[str, str] = {
    "education": "images/education",
    "gallery": "images/gallery",
    "projects": "images/projects",
}

EXPERIENCE_SUB_TYPES = ("professional", "leadership")

_SEGMENT_RE = re.compile(r"[^A-Za-z0-9_-]")
_SLASHES_RE = re.compile(r"/+")
_EXT_RE = re.compile(r"[^A-Za-z0-9]")


def sanitize_segment(value: str | None) -> str:
    """Keep only letters, digits, "_" and "-" (form fields like section)."""
    return _SEGMENT_RE.sub("", value or "")


def sanitize_path(path: str | None) -> str:
    """
    Clean a caller-supplied relative path.

    Removes ".." sequences, collapses repeated slashes and strips leading and
    trailing slashes: "//images/../home//a.png" -> "images/home/a.png".
    """
    if not path:
        return ""
    cleaned = path.strip().replace("..", "")
    cleaned = _SLASHES_RE.sub("/", cleaned)
    return cleaned.strip("/")


def timestamp_filename(original_filename: str | None, timestamp_ms: int | None = None) -> str:
    """
    Generated filename "<epoch millis>.<ext>".

    The extension comes from the original filename; "bin" when there is none.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)

    ext = ""
    if original_filename and "." in original_filename:
        ext = _EXT_RE.sub("", original_filename.rsplit(".", 1)[-1])

    return f"{timestamp_ms}.{ext or 'bin'}"


def _strip_target_prefix(path: str, directory: str, root: str) -> str:
    """Drop a leading copy of the target directory so it isn't nested twice."""
    last = directory.rsplit("/", 1)[-1]
    for prefix in (f"{root}/{directory}", directory, last):
        if path == prefix:
            return ""
        if path.startswith(prefix + "/"):
            return path[len(prefix) + 1:]
    return path


def resolve_upload_path(
    section: str | None,
    sub_type: str | None = None,
    caller_path: str | None = None,
    original_filename: str | None = None,
    timestamp_ms: int | None = None,
    root: str = DEFAULT_ROOT,
) -> str:
    """
    Resolve the object key for an upload.

    Args:
        section: Portfolio section the asset belongs to ("misc" if empty)
        sub_type: experience sub-type ("professional" / "leadership")
        caller_path: Optional relative path requested by the caller
        original_filename: Uploaded filename, used for the extension
        timestamp_ms: Override for the generated filename (tests)
        root: Top-level prefix every key is rooted under

    Returns:
        Object key, always starting with "<root>/"

    Example:
        resolve_upload_path("gallery", original_filename="a.png", timestamp_ms=1)
        # "assets/images/gallery/1.png"
    """
    section = sanitize_segment(section) or "misc"
    sub_type = sanitize_segment(sub_type).lower()
    path = sanitize_path(caller_path)
    generated = timestamp_filename(original_filename, timestamp_ms)

    if section in FIXED_DIRECTORIES:
        directory = FIXED_DIRECTORIES[section]
        basename = _strip_target_prefix(path, directory, root) if path else ""
        return f"{root}/{directory}/{basename or generated}"

    if section == "experience":
        if sub_type in EXPERIENCE_SUB_TYPES:
            return f"{root}/images/experiences/{sub_type}/{generated}"
        directory = "images/home"
        basename = _strip_target_prefix(path, directory, root) if path else ""
        return f"{root}/{directory}/{basename or generated}"

    if path:
        return path if path.startswith(f"{root}/") else f"{root}/{path}"

    return f"{root}/{section}/{generated}"


def root_prefix(prefix: str | None, root: str = DEFAULT_ROOT) -> str:
    """Sanitize a listing prefix and root it: "images/home" -> "assets/images/home"."""
    cleaned = sanitize_path(prefix)
    if not cleaned or cleaned == root:
        return root
    return cleaned if cleaned.startswith(f"{root}/") else f"{root}/{cleaned}"


def public_url(path: str, base_url: str | None, bucket: str = DEFAULT_BUCKET) -> str:
    """
    Public object URL for a key, each path segment percent-encoded.

    Returns "" when no Supabase base URL is configured.
    """
    if not base_url:
        return ""
    encoded = "/".join(quote(segment, safe="!'()*") for segment in path.split("/"))
    return f"{base_url.rstrip('/')}/storage/v1/object/public/{bucket}/{encoded}"


def ensure_full_storage_url(
    value,
    base_url: str | None,
    bucket: str = DEFAULT_BUCKET,
    root: str = DEFAULT_ROOT,
):
    """
    Normalize an image field value to a full public URL.

    Full http(s) URLs pass through. Bare paths are rooted under the root
    prefix and turned into public URLs. Non-strings, blank strings, or a
    missing base URL leave the value as it was.
    """
    if not isinstance(value, str):
        return value
    s = value.strip()
    if not s or s.startswith(("http://", "https://")):
        return s
    if not base_url:
        return s
    path = s.lstrip("/")
    if not path.startswith(f"{root}/"):
        path = f"{root}/{path}"
    return public_url(path, base_url, bucket)


def storage_key_for(url_or_path, bucket: str = DEFAULT_BUCKET) -> str | None:
    """
    Reverse a stored image value into the object key to delete.

    A public URL yields the percent-decoded text after
    "/object/public/<bucket>/"; anything else is taken as a key already.
    Bare values are not rooted under "assets/": rows written before uploads
    were rooted hold keys relative to the bucket, and removal must hit them.

    Returns:
        The key, or None for empty / non-string input. Never raises.
    """
    if not isinstance(url_or_path, str):
        return None
    s = url_or_path.strip()
    if not s:
        return None

    marker = f"/object/public/{bucket}/"
    if marker in s:
        tail = s.split(marker, 1)[1].split("?", 1)[0].split("#", 1)[0]
        return unquote(tail) or s

    return s.lstrip("/") or s
