"""
Document and repository schemas.

Defines the value types returned by the repository adapter and the
response models for the published-docs endpoints.
"""

from typing import Literal

from pydantic import BaseModel, Field


class TreeEntry(BaseModel):
    """One path under the documentation root."""

    path: str = Field(..., description="Path relative to the documentation root")
    type: Literal["file", "dir"] = Field(..., description="Entry kind")


class FileContent(BaseModel):
    """Decoded file content together with its concurrency fingerprint."""

    path: str = Field(..., description="Path relative to the documentation root")
    content: str = Field(..., description="Decoded UTF-8 content")
    fingerprint: str | None = Field(
        None, description="Blob SHA used for optimistic concurrency (None if absent)"
    )
    ref: str = Field(..., description="Branch or commit the content was read from")


class CommitResult(BaseModel):
    """Outcome of a single-file commit."""

    path: str = Field(..., description="Path relative to the documentation root")
    fingerprint: str = Field(..., description="Blob SHA of the newly written content")
    commit_sha: str = Field(..., description="SHA of the created commit")


class Revision(BaseModel):
    """One entry in a file's commit history."""

    revision_id: str = Field(..., description="Commit SHA")
    message: str = Field(..., description="Commit message")
    timestamp: str = Field(..., description="ISO-8601 author date")
    author: str = Field(..., description="Commit author name")


class TreeResponse(BaseModel):
    """Schema for the documentation tree endpoint."""

    tree: list[TreeEntry]


class DocumentResponse(BaseModel):
    """Schema for a published document."""

    path: str
    content: str
    fingerprint: str | None = None


class HistoryResponse(BaseModel):
    """Schema for a document's revision history."""

    path: str
    history: list[Revision]
