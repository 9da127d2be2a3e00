"""
Validation utilities for input validation.

Provides functions to validate document paths, comment content
and uploaded media.
"""

from pathlib import PurePosixPath

from docpush.core.exceptions import ValidationError
from docpush.core.logging import get_logger

logger = get_logger(__name__)

DOCUMENT_EXTENSIONS = (".md", ".mdx")
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg")


def validate_file_path(path: str, extensions: tuple[str, ...] = DOCUMENT_EXTENSIONS) -> None:
    """
    Validate a repository path for security and format.

    Args:
        path: Path relative to the documentation root
        extensions: Allowed file extensions (empty to allow any)

    Raises:
        ValidationError: If path is invalid or unsafe
    """
    if not path:
        raise ValidationError("Path cannot be empty")

    # Check for null bytes
    if "\x00" in path:
        raise ValidationError("Path cannot contain null bytes")

    # Check for leading slash
    if path.startswith("/"):
        raise ValidationError("Path should not start with /")

    # Check for parent directory references
    if ".." in PurePosixPath(path).parts:
        raise ValidationError("Path cannot contain parent directory references (..)")

    # Check for invalid characters
    invalid_chars = ["<", ">", ":", '"', "|", "?", "*", "\\"]
    for char in invalid_chars:
        if char in path:
            raise ValidationError(f"Path cannot contain character: {char}")

    # Check for consecutive slashes
    if "//" in path:
        raise ValidationError("Path cannot contain consecutive slashes")

    # Validate file extension
    if extensions and not path.lower().endswith(extensions):
        raise ValidationError(f"File must have one of the extensions: {', '.join(extensions)}")


def validate_text(value: str, field: str) -> str:
    """
    Ensure a free-text field is not empty or whitespace only.

    Args:
        value: Text to validate
        field: Field name used in the error message

    Returns:
        The original value

    Raises:
        ValidationError: If the value is blank
    """
    if not value or not value.strip():
        raise ValidationError(f"{field} cannot be empty", details={"field": field})
    return value
