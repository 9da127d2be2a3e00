"""
Document service for published documentation.

Read-only access to the documentation tree, file content and revision
history on the base branch (or any ref).
"""

from docpush.core.logging import get_logger
from docpush.schemas.document import FileContent, Revision, TreeEntry
from docpush.services.github_service import GitHubService
from docpush.utils.validators import validate_file_path

logger = get_logger(__name__)


class DocumentService:
    """Service for reading published documents."""

    def __init__(self, github: GitHubService) -> None:
        self.github = github

    async def get_tree(self) -> list[TreeEntry]:
        """List all files and directories under the documentation root."""
        return await self.github.list_tree()

    async def get_content(self, path: str, ref: str | None = None) -> FileContent:
        """
        Get a document's content.

        Args:
            path: Path relative to the documentation root
            ref: Branch or commit (defaults to the base branch)

        Raises:
            ValidationError: If the path is unsafe
            NotFoundError: If the document doesn't exist
        """
        validate_file_path(path, extensions=())
        return await self.github.get_file(path, ref)

    async def get_history(self, path: str) -> list[Revision]:
        """Get up to 50 most recent revisions of a document."""
        validate_file_path(path, extensions=())
        return await self.github.list_file_history(path)
