"""
Draft schemas.

Defines request/response models for draft operations
including creation, edits, review and comments.
"""

from pydantic import BaseModel, Field, field_validator

from docpush.db.models.draft import DraftStatus


class DraftCreate(BaseModel):
    """Schema for creating a new draft."""

    doc_path: str = Field(
        ...,
        min_length=1,
        description="Target document path relative to the docs root (e.g., 'guides/setup.md')",
    )
    title: str = Field(..., min_length=1, max_length=500, description="Draft title")
    content: str | None = Field(None, description="Initial markdown content")


class DraftUpdate(BaseModel):
    """Schema for committing new content to a draft."""

    content: str = Field(..., min_length=1, description="Full markdown content")
    expected_fingerprint: str | None = Field(
        None, description="Fingerprint last read by the client (omit to overwrite)"
    )
    message: str | None = Field(None, max_length=500, description="Custom commit message")
    title: str | None = Field(None, min_length=1, max_length=500, description="New title")

    @field_validator("content")
    @classmethod
    def validate_content_not_empty(cls, v: str) -> str:
        """Ensure content is not just whitespace."""
        if not v.strip():
            raise ValueError("Content cannot be empty or whitespace only")
        return v


class DraftReject(BaseModel):
    """Schema for rejecting a draft."""

    reason: str | None = Field(None, description="Reason recorded as a comment")


class CommentCreate(BaseModel):
    """Schema for adding a comment."""

    content: str = Field(..., min_length=1, description="Comment text")


class DraftResponse(BaseModel):
    """Schema for draft response data."""

    id: str
    doc_path: str
    branch_name: str
    title: str
    author_id: str | None
    author_email: str | None
    status: DraftStatus
    created_at: int
    updated_at: int

    model_config = {"from_attributes": True}


class CommentResponse(BaseModel):
    """Schema for comment response data."""

    id: str
    draft_id: str
    user_id: str | None
    user_email: str | None
    user_name: str | None
    content: str
    created_at: int

    model_config = {"from_attributes": True}


class DraftListResponse(BaseModel):
    """Schema for listing drafts."""

    drafts: list[DraftResponse]


class DraftDetailResponse(BaseModel):
    """Schema for a draft with its current content and comments."""

    draft: DraftResponse
    content: str
    fingerprint: str | None
    comments: list[CommentResponse]


class DraftUpdateResponse(BaseModel):
    """Schema for the result of a content commit."""

    draft: DraftResponse
    fingerprint: str = Field(..., description="Fingerprint to send with the next edit")


class DraftApprovalResponse(BaseModel):
    """Schema for an approved draft."""

    draft: DraftResponse
    pr_number: int


class CommentListResponse(BaseModel):
    """Schema for listing comments."""

    comments: list[CommentResponse]
