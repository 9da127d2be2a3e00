"""
Draft management endpoints.

Handles the draft lifecycle: create, edit, review (approve/reject),
delete, and discussion comments.
"""

from fastapi import APIRouter, Body, Query

from docpush.api.dependencies import AdminDep, DraftServiceDep, EditorDep
from docpush.core.exceptions import ConflictError
from docpush.core.logging import get_logger
from docpush.db.models.draft import DraftStatus
from docpush.schemas.common import SuccessResponse
from docpush.schemas.draft import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    DraftApprovalResponse,
    DraftCreate,
    DraftDetailResponse,
    DraftListResponse,
    DraftReject,
    DraftResponse,
    DraftUpdate,
    DraftUpdateResponse,
)

logger = get_logger(__name__)
router = APIRouter()


@router.get("", response_model=DraftListResponse)
async def list_drafts(
    _: EditorDep,
    draft_service: DraftServiceDep,
    status: DraftStatus | None = Query(None, description="Filter by status"),
) -> DraftListResponse:
    """
    List drafts, most recently updated first.

    Args:
        status: Optional status filter

    Returns:
        Drafts matching the filter
    """
    drafts = await draft_service.list_drafts(status)
    return DraftListResponse(drafts=[DraftResponse.model_validate(d) for d in drafts])


@router.post("", response_model=DraftResponse, status_code=201)
async def create_draft(
    draft: DraftCreate,
    principal: EditorDep,
    draft_service: DraftServiceDep,
) -> DraftResponse:
    """
    Create a new draft on its own branch.

    Args:
        draft: Draft creation data
        principal: Current principal

    Returns:
        Created draft
    """
    created = await draft_service.create_draft(
        doc_path=draft.doc_path,
        title=draft.title,
        content=draft.content,
        author=principal,
    )
    return DraftResponse.model_validate(created)


@router.get("/{draft_id}", response_model=DraftDetailResponse)
async def get_draft(
    draft_id: str,
    _: EditorDep,
    draft_service: DraftServiceDep,
) -> DraftDetailResponse:
    """
    Get a draft with its current content and comments.

    The returned fingerprint is what the client sends back with its next edit.
    """
    draft = await draft_service.get_draft(draft_id)
    content = await draft_service.get_draft_content(draft_id)
    comments = await draft_service.list_comments(draft_id)

    return DraftDetailResponse(
        draft=DraftResponse.model_validate(draft),
        content=content.content,
        fingerprint=content.fingerprint,
        comments=[CommentResponse.model_validate(c) for c in comments],
    )


@router.put("/{draft_id}", response_model=DraftUpdateResponse)
async def update_draft(
    draft_id: str,
    draft_update: DraftUpdate,
    _: EditorDep,
    draft_service: DraftServiceDep,
) -> DraftUpdateResponse:
    """
    Commit new content to a draft.

    On a fingerprint conflict the error details carry the content and
    fingerprint currently on the branch so the client can reconcile.

    Args:
        draft_id: Draft ID
        draft_update: New content, expected fingerprint and optional title

    Returns:
        Updated draft and the new fingerprint
    """
    try:
        draft, result = await draft_service.update_draft(
            draft_id,
            draft_update.content,
            expected_fingerprint=draft_update.expected_fingerprint,
            message=draft_update.message,
        )
    except ConflictError as e:
        current = await draft_service.get_draft_content(draft_id)
        e.details["current_content"] = current.content
        e.details["current_fingerprint"] = current.fingerprint
        raise

    if draft_update.title is not None:
        draft = await draft_service.rename_draft(draft_id, draft_update.title)

    return DraftUpdateResponse(
        draft=DraftResponse.model_validate(draft),
        fingerprint=result.fingerprint,
    )


@router.delete("/{draft_id}", response_model=SuccessResponse)
async def delete_draft(
    draft_id: str,
    _: EditorDep,
    draft_service: DraftServiceDep,
) -> SuccessResponse:
    """Delete a draft in any status, with its branch and comments."""
    await draft_service.delete_draft(draft_id)
    return SuccessResponse(message="Draft deleted")


@router.post("/{draft_id}/approve", response_model=DraftApprovalResponse)
async def approve_draft(
    draft_id: str,
    principal: AdminDep,
    draft_service: DraftServiceDep,
) -> DraftApprovalResponse:
    """
    Approve and publish a draft (admin only).

    Returns:
        Approved draft and the merged pull request number
    """
    logger.info(f"Draft {draft_id} approval requested by {principal.email or principal.id}")
    draft, pr_number = await draft_service.approve_draft(draft_id)
    return DraftApprovalResponse(draft=DraftResponse.model_validate(draft), pr_number=pr_number)


@router.post("/{draft_id}/reject", response_model=DraftResponse)
async def reject_draft(
    draft_id: str,
    principal: AdminDep,
    draft_service: DraftServiceDep,
    rejection: DraftReject | None = Body(None),
) -> DraftResponse:
    """
    Reject a draft (admin only).

    Args:
        draft_id: Draft ID
        rejection: Optional reason, recorded as a comment
    """
    draft = await draft_service.reject_draft(
        draft_id,
        reason=rejection.reason if rejection else None,
        reviewer=principal,
    )
    return DraftResponse.model_validate(draft)


@router.get("/{draft_id}/comments", response_model=CommentListResponse)
async def list_comments(
    draft_id: str,
    _: EditorDep,
    draft_service: DraftServiceDep,
) -> CommentListResponse:
    """List comments on a draft, oldest first."""
    comments = await draft_service.list_comments(draft_id)
    return CommentListResponse(comments=[CommentResponse.model_validate(c) for c in comments])


@router.post("/{draft_id}/comments", response_model=CommentResponse, status_code=201)
async def add_comment(
    draft_id: str,
    comment: CommentCreate,
    principal: EditorDep,
    draft_service: DraftServiceDep,
) -> CommentResponse:
    """Add a comment to a draft."""
    created = await draft_service.add_comment(draft_id, comment.content, author=principal)
    return CommentResponse.model_validate(created)
