"""Utilities package."""

from docpush.utils.commit_messages import (
    format_rejection_comment,
    generate_commit_message,
    generate_pull_request,
)
from docpush.utils.file_helpers import generate_branch_name, guess_content_type, media_extension
from docpush.utils.validators import validate_file_path, validate_text

__all__ = [
    "format_rejection_comment",
    "generate_commit_message",
    "generate_pull_request",
    "generate_branch_name",
    "guess_content_type",
    "media_extension",
    "validate_file_path",
    "validate_text",
]
