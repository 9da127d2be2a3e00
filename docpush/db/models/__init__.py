"""Database models package."""

from docpush.db.models.draft import Comment, Draft, DraftStatus

__all__ = ["Comment", "Draft", "DraftStatus"]
