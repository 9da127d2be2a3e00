"""
Media endpoints.

Stores uploaded images in the documentation repository and serves
them back with long-lived cache headers.
"""

from fastapi import APIRouter, Header, Request, Response

from docpush.api.dependencies import EditorDep, MediaServiceDep
from docpush.core.exceptions import ValidationError
from docpush.core.logging import get_logger
from docpush.schemas.media import MediaUploadResponse

logger = get_logger(__name__)
router = APIRouter()

CACHE_CONTROL = "public, max-age=31536000, immutable"

# SVG can carry script; served images never run it on the API origin
SVG_CONTENT_SECURITY_POLICY = "default-src 'none'; style-src 'unsafe-inline'; sandbox"


async def read_limited_body(request: Request, limit: int) -> bytes:
    """
    Read the request body, stopping as soon as it exceeds limit bytes.

    Raises:
        ValidationError: If the declared or streamed size is over the limit
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise ValidationError(
            f"File size exceeds maximum: {limit} bytes", details={"size": int(declared)}
        )

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise ValidationError(f"File size exceeds maximum: {limit} bytes")
    return bytes(body)


@router.post("", response_model=MediaUploadResponse, status_code=201)
async def upload_media(
    request: Request,
    principal: EditorDep,
    media_service: MediaServiceDep,
    x_filename: str | None = Header(None, description="Original filename"),
) -> MediaUploadResponse:
    """
    Upload an image.

    The request body is the raw image. The extension comes from the
    X-Filename header, falling back to the Content-Type.

    Returns:
        Stored path, serving URL and a markdown snippet
    """
    data = await read_limited_body(request, media_service.max_upload_size)
    result = await media_service.upload_image(
        data,
        filename=x_filename,
        content_type=request.headers.get("content-type"),
    )

    logger.info(f"Image uploaded by {principal.email or principal.id}: {result['path']}")
    return MediaUploadResponse(**result)


@router.get("/{path:path}")
async def get_media(path: str, media_service: MediaServiceDep) -> Response:
    """Serve a stored image."""
    data, content_type = await media_service.get_image(path)

    headers = {"Cache-Control": CACHE_CONTROL, "X-Content-Type-Options": "nosniff"}
    if content_type == "image/svg+xml":
        headers["Content-Security-Policy"] = SVG_CONTENT_SECURITY_POLICY

    return Response(content=data, media_type=content_type, headers=headers)
