"""
Media service for image uploads.

Stores images in the documentation repository under assets/ on the
base branch and serves them back as raw bytes.
"""

from typing import Any

from docpush.core.exceptions import ValidationError
from docpush.core.logging import get_logger
from docpush.services.github_service import GitHubService
from docpush.utils.commit_messages import generate_commit_message
from docpush.utils.file_helpers import guess_content_type, media_extension, short_id
from docpush.utils.validators import IMAGE_EXTENSIONS, validate_file_path

logger = get_logger(__name__)

ASSETS_DIR = "assets"


class MediaService:
    """
    Service for media file operations.

    Uploaded files get a random name so concurrent uploads never collide.
    """

    def __init__(
        self,
        github: GitHubService,
        max_upload_size: int = 5242880,
        url_prefix: str = "/api/media",
    ) -> None:
        """
        Initialize media service.

        Args:
            github: Repository adapter
            max_upload_size: Largest accepted upload in bytes
            url_prefix: Route the stored images are served from
        """
        self.github = github
        self.max_upload_size = max_upload_size
        self.url_prefix = url_prefix.rstrip("/")

    async def upload_image(
        self,
        file_data: bytes,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> dict[str, Any]:
        """
        Upload an image to the repository.

        Args:
            file_data: Raw image bytes
            filename: Original filename (used for the extension and alt text)
            content_type: Request content type (used when no filename is given)

        Returns:
            Dictionary with the stored path, serving URL and a markdown snippet

        Raises:
            ValidationError: If the data is empty, too large, or not an allowed image type
        """
        if not file_data:
            raise ValidationError("Empty image data")

        if len(file_data) > self.max_upload_size:
            raise ValidationError(
                f"File size exceeds maximum: {self.max_upload_size} bytes",
                details={"size": len(file_data)},
            )

        ext = media_extension(filename, content_type)
        if ext not in IMAGE_EXTENSIONS:
            raise ValidationError(f"File type {ext or 'unknown'} not allowed")

        stored_name = f"{short_id()}{ext}"
        path = f"{ASSETS_DIR}/{stored_name}"

        logger.info(f"Uploading image: {path} ({len(file_data)} bytes)")

        await self.github.upload_binary(
            path, file_data, generate_commit_message("upload", stored_name)
        )

        return {
            "path": path,
            "url": f"{self.url_prefix}/{path}",
            "markdown": f"![{filename or stored_name}](./{path})",
        }

    async def get_image(self, path: str) -> tuple[bytes, str]:
        """
        Get an image from the repository.

        Returns:
            Tuple of (raw bytes, content type)

        Raises:
            NotFoundError: If the file doesn't exist
        """
        validate_file_path(path, extensions=())
        data = await self.github.read_binary(path)
        return data, guess_content_type(path)
