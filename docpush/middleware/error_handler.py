"""
Global error handling middleware.

Catches and formats all exceptions into consistent API responses
and logs them.
"""

import traceback
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from docpush.core.exceptions import BaseAPIError, RemoteRateLimitError
from docpush.core.logging import get_logger

logger = get_logger(__name__)


def _error_body(
    request: Request, message: str, status_code: int, details: dict[str, Any]
) -> dict[str, Any]:
    return {
        "error": message,
        "details": details,
        "status_code": status_code,
        "timestamp": datetime.now(UTC).isoformat(),
        "path": request.url.path,
    }


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware for global exception handling.

    Catches unhandled exceptions and returns standardized JSON responses.
    """

    def __init__(self, app: ASGIApp, debug: bool = False) -> None:
        super().__init__(app)
        self.debug = debug

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """
        Dispatch request through middleware chain.

        Args:
            request: Incoming request
            call_next: Next middleware function

        Returns:
            HTTP response
        """
        try:
            return await call_next(request)
        except BaseAPIError as e:
            # Handle application-specific exceptions
            log = logger.error if e.status_code >= 500 else logger.warning
            log(f"API error: {e.message}", extra={"path": request.url.path})

            headers = None
            if isinstance(e, RemoteRateLimitError) and e.retry_after is not None:
                headers = {"Retry-After": str(int(e.retry_after))}

            return JSONResponse(
                status_code=e.status_code,
                content=_error_body(request, e.message, e.status_code, e.details),
                headers=headers,
            )

        except ValueError as e:
            # Handle validation errors
            logger.warning(
                f"Validation error: {str(e)}",
                extra={"path": request.url.path, "method": request.method},
            )

            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content=_error_body(
                    request,
                    "Validation error",
                    status.HTTP_422_UNPROCESSABLE_ENTITY,
                    {"message": str(e)},
                ),
            )

        except Exception as e:
            # Handle unexpected errors
            error_id = datetime.now(UTC).isoformat()

            logger.error(
                f"Unhandled exception [{error_id}]: {str(e)}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "error_type": type(e).__name__,
                    "traceback": traceback.format_exc(),
                },
            )

            # In production, don't expose internal error details
            error_details: dict[str, Any] = {"error_id": error_id}

            if self.debug:
                error_details["message"] = str(e)
                error_details["type"] = type(e).__name__
                error_details["traceback"] = traceback.format_exc()

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=_error_body(
                    request,
                    "Internal server error",
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    error_details,
                ),
            )
