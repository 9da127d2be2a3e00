"""
File and naming utilities.

Provides helpers for deriving draft branch names and for mapping media
file names to extensions and content types.
"""

import re
from pathlib import PurePosixPath
from uuid import uuid4

from docpush.core.logging import get_logger

logger = get_logger(__name__)

DRAFT_BRANCH_PREFIX = "draft/"

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
}


def short_id() -> str:
    """Random 8-character hex identifier."""
    return uuid4().hex[:8]


def generate_branch_name(doc_path: str, suffix: str | None = None) -> str:
    """
    Generate a unique branch name for a draft of a document.

    The random part keeps concurrent drafts of the same path apart.

    Args:
        doc_path: Target document path
        suffix: Unique part (random if not provided)

    Returns:
        Branch name

    Example:
        >>> generate_branch_name("guides/Setup.md", "1a2b3c4d")
        'draft/1a2b3c4d-guides-Setup-md'
    """
    slug = re.sub(r"[^a-z0-9]", "-", doc_path, flags=re.IGNORECASE)
    return f"{DRAFT_BRANCH_PREFIX}{suffix or short_id()}-{slug}"


def media_extension(filename: str | None, content_type: str | None) -> str:
    """
    Determine the extension for an uploaded media file.

    The original file name wins; otherwise the content type is used,
    defaulting to .png.

    Args:
        filename: Original file name, if the client sent one
        content_type: Request content type

    Returns:
        Lower-case extension including the dot
    """
    if filename:
        return PurePosixPath(filename).suffix.lower()

    content_type = (content_type or "").lower()
    if "jpeg" in content_type or "jpg" in content_type:
        return ".jpg"
    if "gif" in content_type:
        return ".gif"
    if "webp" in content_type:
        return ".webp"
    if "svg" in content_type:
        return ".svg"
    return ".png"


def guess_content_type(path: str) -> str:
    """Map a media path to its content type."""
    return CONTENT_TYPES.get(PurePosixPath(path).suffix.lower(), "application/octet-stream")
