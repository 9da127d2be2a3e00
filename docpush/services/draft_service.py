"""
Draft service implementing the draft lifecycle.

Each draft is backed by its own Git branch. Drafts are created pending,
edited by committing to their branch, and end either approved (pull
request squash-merged into the base branch, branch deleted) or rejected
(branch deleted). Status checks are read-then-act; terminal transitions
are written conditionally so a draft can only leave pending once.
"""

from docpush.core.exceptions import (
    BaseAPIError,
    InvalidStateError,
    NotFoundError,
    RemoteClientError,
    RemoteError,
)
from docpush.core.logging import get_logger
from docpush.db.models.draft import Comment, Draft, DraftStatus
from docpush.db.store import DraftStore
from docpush.schemas.auth import Principal
from docpush.schemas.document import CommitResult, FileContent
from docpush.services.github_service import GitHubService
from docpush.utils.commit_messages import (
    format_rejection_comment,
    generate_commit_message,
    generate_pull_request,
)
from docpush.utils.file_helpers import generate_branch_name
from docpush.utils.validators import validate_file_path, validate_text

logger = get_logger(__name__)


class DraftService:
    """
    Service for draft lifecycle operations.

    Orchestrates the record store and the GitHub service. Performs no
    authorization; callers check permissions before invoking.
    """

    def __init__(self, github: GitHubService, store: DraftStore) -> None:
        """
        Initialize draft service with dependencies.

        Args:
            github: Repository adapter
            store: Draft record store
        """
        self.github = github
        self.store = store

    async def get_draft(self, draft_id: str) -> Draft:
        """
        Get draft by ID.

        Raises:
            NotFoundError: If draft doesn't exist
        """
        draft = await self.store.get_draft(draft_id)
        if not draft:
            raise NotFoundError("Draft", draft_id)
        return draft

    async def list_drafts(self, status: DraftStatus | None = None) -> list[Draft]:
        """List drafts, optionally filtered by status."""
        return await self.store.list_drafts(status)

    def _require_pending(self, draft: Draft, action: str) -> None:
        if draft.status.is_terminal:
            raise InvalidStateError(
                f"Cannot {action} draft with status: {draft.status.value}",
                details={"draft_id": draft.id, "status": draft.status.value},
            )

    async def create_draft(
        self,
        doc_path: str,
        title: str,
        content: str | None = None,
        author: Principal | None = None,
    ) -> Draft:
        """
        Create a new draft on its own branch.

        If the branch cannot be created nothing is persisted. If the initial
        commit fails the draft is still persisted (with no content on its
        branch) and the commit error is re-raised carrying the draft_id.

        Args:
            doc_path: Target document path relative to the docs root
            title: Draft title
            content: Initial document content
            author: Principal creating the draft (None for anonymous)

        Returns:
            Created pending draft

        Raises:
            ValidationError: If the path or title is invalid
            RemoteError: If branch creation fails
        """
        validate_file_path(doc_path)
        validate_text(title, "Title")

        branch_name = generate_branch_name(doc_path)
        logger.info(f"Creating draft for {doc_path} on branch {branch_name}")

        await self.github.create_branch(branch_name)

        commit_error: BaseAPIError | None = None
        if content:
            try:
                await self.github.commit_file(
                    branch_name, doc_path, content, generate_commit_message("create", title)
                )
            except BaseAPIError as e:
                logger.error(f"Initial commit failed for {branch_name}: {e.message}")
                commit_error = e

        draft = await self.store.insert_draft(
            doc_path=doc_path,
            branch_name=branch_name,
            title=title,
            author_id=author.id if author else None,
            author_email=author.email if author else None,
        )

        if commit_error is not None:
            commit_error.details["draft_id"] = draft.id
            raise commit_error

        logger.info(f"Draft created with ID: {draft.id}")
        return draft

    async def update_draft(
        self,
        draft_id: str,
        content: str,
        expected_fingerprint: str | None = None,
        message: str | None = None,
    ) -> tuple[Draft, CommitResult]:
        """
        Commit new content to a pending draft's branch.

        Args:
            draft_id: Draft ID
            content: Full new document content
            expected_fingerprint: Fingerprint the caller last read (None: last writer wins)
            message: Commit message (auto-generated if not provided)

        Returns:
            Tuple of (updated draft, commit result with the new fingerprint)

        Raises:
            NotFoundError: If draft doesn't exist
            InvalidStateError: If draft is not pending
            ConflictError: If the document changed since expected_fingerprint
        """
        validate_text(content, "Content")

        draft = await self.get_draft(draft_id)
        self._require_pending(draft, "edit")

        logger.info(f"Updating draft: {draft_id}")

        result = await self.github.commit_file(
            draft.branch_name,
            draft.doc_path,
            content,
            message or generate_commit_message("update", draft.title),
            expected_fingerprint=expected_fingerprint,
        )

        updated = await self.store.update_draft(draft.id)
        if updated is None:
            raise NotFoundError("Draft", draft_id)

        return updated, result

    async def rename_draft(self, draft_id: str, title: str) -> Draft:
        """
        Change the title of a pending draft.

        Raises:
            NotFoundError: If draft doesn't exist
            InvalidStateError: If draft is not pending
        """
        validate_text(title, "Title")

        draft = await self.get_draft(draft_id)
        self._require_pending(draft, "rename")

        updated = await self.store.update_draft(draft.id, title=title)
        if updated is None:
            raise NotFoundError("Draft", draft_id)
        return updated

    async def get_draft_content(self, draft_id: str) -> FileContent:
        """
        Get the current document content for a draft.

        Pending drafts read from their branch, approved drafts from the base
        branch. Rejected drafts and branches without the file yet yield empty
        content with no fingerprint.
        """
        draft = await self.get_draft(draft_id)

        if draft.status == DraftStatus.REJECTED:
            return FileContent(path=draft.doc_path, content="", fingerprint=None, ref="")

        ref = (
            draft.branch_name if draft.status == DraftStatus.PENDING else self.github.base_branch
        )
        try:
            return await self.github.get_file(draft.doc_path, ref)
        except NotFoundError:
            return FileContent(path=draft.doc_path, content="", fingerprint=None, ref=ref)

    async def approve_draft(self, draft_id: str) -> tuple[Draft, int]:
        """
        Publish a pending draft.

        Opens a pull request into the base branch, squash-merges it, deletes
        the draft branch and marks the draft approved. If any remote step
        fails the draft stays pending with its branch intact; re-running
        reuses an open pull request and accepts one that is already merged.

        Returns:
            Tuple of (approved draft, pull request number)

        Raises:
            NotFoundError: If draft doesn't exist
            InvalidStateError: If draft is not pending
            RemoteError: If the pull request cannot be opened or merged
        """
        draft = await self.get_draft(draft_id)
        self._require_pending(draft, "approve")

        logger.info(f"Approving draft: {draft_id}")

        pr_title, pr_body = generate_pull_request(draft.title, draft.doc_path)
        try:
            pr_number = await self.github.open_pull_request(draft.branch_name, pr_title, pr_body)
        except RemoteClientError as e:
            if e.status != 422:
                raise
            existing = await self.github.find_open_pull_request(draft.branch_name)
            if existing is None:
                raise
            logger.info(f"Reusing open pull request #{existing} for draft {draft_id}")
            pr_number = existing

        try:
            await self.github.merge_pull_request(pr_number)
        except RemoteClientError:
            if not await self.github.is_pull_request_merged(pr_number):
                raise
            logger.info(f"Pull request #{pr_number} was already merged")

        await self.github.delete_branch(draft.branch_name)

        approved = await self.store.transition_status(draft.id, DraftStatus.APPROVED)
        if approved is None:
            raise InvalidStateError(
                "Draft left pending status during approval", details={"draft_id": draft_id}
            )

        logger.info(f"Draft {draft_id} approved via pull request #{pr_number}")
        return approved, pr_number

    async def reject_draft(
        self,
        draft_id: str,
        reason: str | None = None,
        reviewer: Principal | None = None,
    ) -> Draft:
        """
        Discard a pending draft.

        Deletes the branch (an already-deleted branch is fine), records the
        reason as a comment when given, and marks the draft rejected.

        Raises:
            NotFoundError: If draft doesn't exist
            InvalidStateError: If draft is not pending
        """
        draft = await self.get_draft(draft_id)
        self._require_pending(draft, "reject")

        logger.info(f"Rejecting draft: {draft_id}")

        await self.github.delete_branch(draft.branch_name)

        if reason and reason.strip():
            await self.store.add_comment(
                draft.id,
                format_rejection_comment(reason),
                user_id=reviewer.id if reviewer else None,
                user_email=reviewer.email if reviewer else None,
                user_name=(reviewer.name or reviewer.email) if reviewer else "Admin",
            )

        rejected = await self.store.transition_status(draft.id, DraftStatus.REJECTED)
        if rejected is None:
            raise InvalidStateError(
                "Draft left pending status during rejection", details={"draft_id": draft_id}
            )

        return rejected

    async def delete_draft(self, draft_id: str) -> None:
        """
        Delete a draft in any status, with its branch and comments.

        Branch deletion is best effort: a remote failure is logged and the
        record is removed anyway.

        Raises:
            NotFoundError: If draft doesn't exist
        """
        draft = await self.get_draft(draft_id)

        logger.info(f"Deleting draft: {draft_id}")

        try:
            await self.github.delete_branch(draft.branch_name)
        except RemoteError as e:
            logger.warning(f"Could not delete branch {draft.branch_name}: {e.message}")

        await self.store.delete_draft(draft.id)

    async def list_comments(self, draft_id: str) -> list[Comment]:
        """
        List comments on a draft.

        Raises:
            NotFoundError: If draft doesn't exist
        """
        draft = await self.get_draft(draft_id)
        return await self.store.list_comments(draft.id)

    async def add_comment(
        self,
        draft_id: str,
        content: str,
        author: Principal | None = None,
    ) -> Comment:
        """
        Add a comment to a draft in any status.

        The draft's updated_at is not changed.

        Raises:
            NotFoundError: If draft doesn't exist
            ValidationError: If content is empty
        """
        validate_text(content, "Content")
        draft = await self.get_draft(draft_id)

        return await self.store.add_comment(
            draft.id,
            content,
            user_id=author.id if author else None,
            user_email=author.email if author else None,
            user_name=(author.name or author.email) if author else "Anonymous",
        )
