"""
GitHub service for repository operations.

Handles all interactions with the GitHub API: reading content and history,
branch management, conflict-aware commits, and pull-request merging.
PyGithub is blocking, so every call runs in a worker thread and goes
through the retry layer.
"""

import asyncio
import itertools
from collections.abc import Callable
from typing import Any, TypeVar

import requests
from github import Auth, Github, GithubException
from github.ContentFile import ContentFile
from github.Repository import Repository

from docpush.core.config import RepositoryConfig
from docpush.core.exceptions import (
    ConflictError,
    NotFoundError,
    RemoteClientError,
    RemoteTransientError,
    ValidationError,
)
from docpush.core.logging import get_logger
from docpush.core.retry import RetryOptions, with_retry
from docpush.schemas.document import CommitResult, FileContent, Revision, TreeEntry

logger = get_logger(__name__)

T = TypeVar("T")

HISTORY_PAGE_SIZE = 50


class GitHubService:
    """
    Service for GitHub repository operations.

    Scoped to a single repository, base branch and documentation root.
    All paths accepted and returned are relative to the documentation root.
    """

    def __init__(
        self,
        config: RepositoryConfig,
        token: str | None = None,
        retry_options: RetryOptions | None = None,
        timeout: int = 15,
        repository: Repository | None = None,
    ) -> None:
        """
        Initialize GitHub service.

        Args:
            config: Repository scope
            token: Personal access token with write scope
            retry_options: Backoff policy applied to every remote call
            timeout: Per-request timeout in seconds
            repository: Pre-built repository object (skips client construction)
        """
        self.config = config
        self._retry = retry_options or RetryOptions()

        if repository is not None:
            self._repo = repository
        else:
            # PyGithub's own retry is disabled; with_retry owns that policy
            client = Github(auth=Auth.Token(token or ""), timeout=timeout, retry=None)
            self._repo = client.get_repo(config.full_name, lazy=True)

        logger.info(f"GitHub service initialized for {config.full_name}@{config.base_branch}")

    @property
    def base_branch(self) -> str:
        """Branch drafts are created from and merged into."""
        return self.config.base_branch

    def _get_full_path(self, path: str) -> str:
        """
        Get full path including docs root prefix.

        Args:
            path: Path relative to the documentation root

        Returns:
            Full path in repository
        """
        path = path.strip("/")
        if not self.config.content_root:
            return path
        return f"{self.config.content_root}/{path}"

    async def _call(
        self, description: str, func: Callable[..., T], *args: Any, **kwargs: Any
    ) -> T:
        """
        Run a blocking PyGithub call in a thread under the retry policy.

        Raises:
            RemoteClientError: Non-retryable 4xx response
            RemoteRateLimitError: Quota exhausted
            RemoteTransientError: Retries exhausted on 5xx or transport failures
        """
        try:
            return await with_retry(
                lambda: asyncio.to_thread(func, *args, **kwargs),
                self._retry,
                description=description,
            )
        except (GithubException, requests.RequestException) as e:
            logger.error(f"GitHub API error during {description}: {e}")
            raise RemoteTransientError(
                message=f"Failed to {description}",
                details={"error": str(e), "status": getattr(e, "status", None)},
            ) from e

    async def _get_contents(self, path: str, ref: str) -> ContentFile:
        """Fetch a single file's content object, mapping 404 to NotFoundError."""
        full_path = self._get_full_path(path)

        try:
            contents = await self._call(
                f"get contents of {full_path}@{ref}", self._repo.get_contents, full_path, ref=ref
            )
        except RemoteClientError as e:
            if e.status == 404:
                raise NotFoundError("Document", path) from e
            raise

        if isinstance(contents, list):
            raise ValidationError(f"Path is a directory, not a file: {path}")

        return contents

    async def list_tree(self) -> list[TreeEntry]:
        """
        List every file and directory under the documentation root.

        Returns:
            Entries from the base branch with the root prefix stripped
        """
        logger.info(f"Listing tree of {self.config.content_root or '/'} on {self.base_branch}")

        def fetch() -> list[Any]:
            return list(self._repo.get_git_tree(self.base_branch, recursive=True).tree)

        elements = await self._call("list repository tree", fetch)
        prefix = f"{self.config.content_root}/" if self.config.content_root else ""

        return [
            TreeEntry(
                path=element.path[len(prefix) :],
                type="dir" if element.type == "tree" else "file",
            )
            for element in elements
            if element.path.startswith(prefix) and element.path != prefix
        ]

    async def get_file(self, path: str, ref: str | None = None) -> FileContent:
        """
        Get decoded file content and its fingerprint.

        Args:
            path: Path relative to the documentation root
            ref: Branch or commit (defaults to the base branch)

        Returns:
            File content with fingerprint

        Raises:
            NotFoundError: If the file doesn't exist at ref
        """
        ref = ref or self.base_branch
        logger.info(f"Fetching file: {path} from {ref}")

        contents = await self._get_contents(path, ref)
        return FileContent(
            path=path,
            content=contents.decoded_content.decode("utf-8", errors="replace"),
            fingerprint=contents.sha,
            ref=ref,
        )

    async def read_file(self, path: str, ref: str | None = None) -> str:
        """Get decoded text content of a file."""
        return (await self.get_file(path, ref)).content

    async def read_binary(self, path: str, ref: str | None = None) -> bytes:
        """Get raw bytes of a file without text decoding."""
        contents = await self._get_contents(path, ref or self.base_branch)
        return contents.decoded_content

    async def get_fingerprint(self, path: str, ref: str) -> str | None:
        """
        Get the current blob SHA of a file.

        Returns:
            Blob SHA, or None when the file doesn't exist yet
        """
        try:
            contents = await self._get_contents(path, ref)
        except NotFoundError:
            return None
        return contents.sha

    async def create_branch(self, name: str) -> str:
        """
        Create a branch pointing at the current head of the base branch.

        Args:
            name: New branch name

        Returns:
            Commit SHA the branch was created at

        Raises:
            RemoteClientError: If the branch already exists or the base is missing
        """
        logger.info(f"Creating branch: {name} from {self.base_branch}")

        def create() -> str:
            source_ref = self._repo.get_git_ref(f"heads/{self.base_branch}")
            source_sha = source_ref.object.sha
            self._repo.create_git_ref(ref=f"refs/heads/{name}", sha=source_sha)
            return source_sha

        return await self._call(f"create branch {name}", create)

    async def commit_file(
        self,
        branch: str,
        path: str,
        content: str,
        message: str,
        expected_fingerprint: str | None = None,
    ) -> CommitResult:
        """
        Create or update a text file on a branch.

        When expected_fingerprint is given the write only happens if it still
        matches the file's current blob SHA; otherwise last writer wins.

        Raises:
            ConflictError: If the file changed since the caller read it
        """
        return await self._write(branch, path, content, message, expected_fingerprint)

    async def upload_binary(
        self,
        path: str,
        data: bytes,
        message: str,
        branch: str | None = None,
        expected_fingerprint: str | None = None,
    ) -> CommitResult:
        """Create or update a binary file, with the same semantics as commit_file."""
        return await self._write(
            branch or self.base_branch, path, data, message, expected_fingerprint
        )

    async def _write(
        self,
        branch: str,
        path: str,
        payload: str | bytes,
        message: str,
        expected_fingerprint: str | None,
    ) -> CommitResult:
        full_path = self._get_full_path(path)
        current = await self.get_fingerprint(path, branch)

        if expected_fingerprint is not None and expected_fingerprint != current:
            logger.warning(
                f"Conflict on {full_path}@{branch}: expected {expected_fingerprint}, "
                f"found {current}"
            )
            raise ConflictError(
                f"Document was modified since it was read: {path}",
                details={"path": path, "expected": expected_fingerprint, "current": current},
            )

        logger.info(f"Committing {full_path} to {branch}")

        try:
            if current:
                result = await self._call(
                    f"update {full_path}",
                    self._repo.update_file,
                    full_path,
                    message,
                    payload,
                    current,
                    branch=branch,
                )
            else:
                result = await self._call(
                    f"create {full_path}",
                    self._repo.create_file,
                    full_path,
                    message,
                    payload,
                    branch=branch,
                )
        except RemoteClientError as e:
            # 409: SHA precondition failed, 422: file appeared since we checked
            if e.status == 409 or (e.status == 422 and not current):
                raise ConflictError(
                    f"Document was modified concurrently: {path}",
                    details={"path": path, "expected": current},
                ) from e
            raise

        return CommitResult(
            path=path,
            fingerprint=result["content"].sha,
            commit_sha=result["commit"].sha,
        )

    async def open_pull_request(self, branch: str, title: str, body: str) -> int:
        """
        Open a pull request from branch into the base branch.

        Returns:
            Pull request number
        """
        logger.info(f"Opening pull request: {branch} -> {self.base_branch}")

        pull = await self._call(
            f"open pull request for {branch}",
            self._repo.create_pull,
            base=self.base_branch,
            head=branch,
            title=title,
            body=body,
        )
        return pull.number

    async def find_open_pull_request(self, branch: str) -> int | None:
        """Find an open pull request from branch into the base branch."""

        def find() -> int | None:
            pulls = self._repo.get_pulls(
                state="open", head=f"{self.config.owner}:{branch}", base=self.base_branch
            )
            for pull in pulls:
                return pull.number
            return None

        return await self._call(f"find pull request for {branch}", find)

    async def merge_pull_request(self, pr_number: int) -> str:
        """
        Squash-merge a pull request.

        Returns:
            SHA of the merge commit

        Raises:
            RemoteClientError: If GitHub refuses the merge (e.g. conflicts)
        """
        logger.info(f"Merging pull request #{pr_number}")

        def merge() -> Any:
            return self._repo.get_pull(pr_number).merge(merge_method="squash")

        status = await self._call(f"merge pull request #{pr_number}", merge)
        if not status.merged:
            raise RemoteClientError(
                status.message or f"Pull request #{pr_number} was not merged", status=409
            )
        return status.sha

    async def is_pull_request_merged(self, pr_number: int) -> bool:
        """Check whether a pull request has already been merged."""

        def check() -> bool:
            return bool(self._repo.get_pull(pr_number).merged)

        return await self._call(f"check pull request #{pr_number}", check)

    async def delete_branch(self, name: str) -> bool:
        """
        Delete a branch.

        Returns:
            True if deleted, False if the branch was already gone
        """
        logger.info(f"Deleting branch: {name}")

        def delete() -> None:
            self._repo.get_git_ref(f"heads/{name}").delete()

        try:
            await self._call(f"delete branch {name}", delete)
        except RemoteClientError as e:
            if e.status == 404 or (e.status == 422 and "does not exist" in e.message):
                logger.info(f"Branch already deleted: {name}")
                return False
            raise

        return True

    async def list_file_history(self, path: str) -> list[Revision]:
        """
        Get commit history for a file on the base branch.

        Returns:
            Up to 50 revisions, most recent first
        """
        full_path = self._get_full_path(path)
        logger.info(f"Fetching commit history for: {full_path}")

        def fetch() -> list[Revision]:
            commits = self._repo.get_commits(sha=self.base_branch, path=full_path)
            return [
                self._format_revision(commit)
                for commit in itertools.islice(commits, HISTORY_PAGE_SIZE)
            ]

        return await self._call(f"fetch history of {full_path}", fetch)

    def _format_revision(self, commit: Any) -> Revision:
        """
        Format commit information as a revision.

        Args:
            commit: GitHub commit object

        Returns:
            Revision summary
        """
        author = commit.commit.author
        return Revision(
            revision_id=commit.sha,
            message=commit.commit.message,
            timestamp=author.date.isoformat() if author and author.date else "",
            author=author.name if author and author.name else "Unknown",
        )

    async def health_check(self) -> dict[str, Any]:
        """
        Check that the repository and its base branch are reachable.

        Returns:
            Dictionary with health check information
        """
        try:
            ref = await self._call(
                "read base branch", self._repo.get_git_ref, f"heads/{self.base_branch}"
            )
            return {
                "status": "healthy",
                "repository": self.config.full_name,
                "base_branch": self.base_branch,
                "head": ref.object.sha,
            }
        except Exception as e:
            logger.error(f"GitHub health check failed: {e}")
            return {"status": "unhealthy", "error": str(e)}
