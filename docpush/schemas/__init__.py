"""Pydantic schemas package for request/response validation."""

from docpush.schemas.auth import Credentials, Principal, Role, TokenResponse
from docpush.schemas.common import ErrorResponse, HealthCheckResponse, SuccessResponse
from docpush.schemas.document import (
    CommitResult,
    DocumentResponse,
    FileContent,
    HistoryResponse,
    Revision,
    TreeEntry,
    TreeResponse,
)
from docpush.schemas.draft import (
    CommentCreate,
    CommentResponse,
    DraftApprovalResponse,
    DraftCreate,
    DraftDetailResponse,
    DraftReject,
    DraftResponse,
    DraftUpdate,
    DraftUpdateResponse,
)
from docpush.schemas.media import MediaUploadResponse

__all__ = [
    # Auth schemas
    "Credentials",
    "Principal",
    "Role",
    "TokenResponse",
    # Common schemas
    "ErrorResponse",
    "HealthCheckResponse",
    "SuccessResponse",
    # Document schemas
    "CommitResult",
    "DocumentResponse",
    "FileContent",
    "HistoryResponse",
    "Revision",
    "TreeEntry",
    "TreeResponse",
    # Draft schemas
    "CommentCreate",
    "CommentResponse",
    "DraftApprovalResponse",
    "DraftCreate",
    "DraftDetailResponse",
    "DraftReject",
    "DraftResponse",
    "DraftUpdate",
    "DraftUpdateResponse",
    # Media schemas
    "MediaUploadResponse",
]
