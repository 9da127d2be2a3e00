"""Media upload schemas."""

from pydantic import BaseModel, Field


class MediaUploadResponse(BaseModel):
    """Schema for a stored image."""

    path: str = Field(..., description="Path relative to the documentation root")
    url: str = Field(..., description="URL the image is served from")
    markdown: str = Field(..., description="Markdown snippet embedding the image")
