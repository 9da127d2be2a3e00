"""
Custom exception classes for the application.

Defines domain-specific exceptions with appropriate HTTP status codes
and error messages for consistent error handling across the engine
and the API layer.
"""

from typing import Any


class BaseAPIError(Exception):
    """Base exception class for all application exceptions."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize API exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code
            details: Additional error details
        """
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(BaseAPIError):
    """Raised when authentication fails."""

    def __init__(
        self,
        message: str = "Authentication failed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, status_code=401, details=details)


class AuthorizationError(BaseAPIError):
    """Raised when the principal lacks required permissions."""

    def __init__(
        self,
        message: str = "Insufficient permissions",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, status_code=403, details=details)


class NotFoundError(BaseAPIError):
    """Raised when a draft, document or remote ref doesn't exist."""

    def __init__(self, resource: str, identifier: str | None = None) -> None:
        message = f"{resource} not found"
        if identifier:
            message += f": {identifier}"
        super().__init__(message=message, status_code=404)


class InvalidStateError(BaseAPIError):
    """Raised when an operation is attempted against a draft in an incompatible status."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, status_code=409, details=details)


class ConflictError(BaseAPIError):
    """Raised when an optimistic-concurrency fingerprint check fails."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, status_code=409, details=details)


class ValidationError(BaseAPIError):
    """Raised when input validation fails."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, status_code=422, details=details)


class RemoteError(BaseAPIError):
    """Base class for failures reported by the GitHub API."""

    def __init__(
        self,
        message: str,
        status_code: int = 502,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=f"GitHub API error: {message}", status_code=status_code, details=details
        )


class RemoteClientError(RemoteError):
    """Raised on a non-retryable 4xx response; carries the remote status."""

    def __init__(
        self, message: str, status: int, details: dict[str, Any] | None = None
    ) -> None:
        self.status = status
        super().__init__(message=message, details={"status": status, **(details or {})})


class RemoteRateLimitError(RemoteError):
    """Raised when the API quota is exhausted; carries seconds until reset."""

    def __init__(
        self, message: str = "Rate limit exceeded", retry_after: float | None = None
    ) -> None:
        self.retry_after = retry_after
        details = {"retry_after": retry_after} if retry_after is not None else {}
        super().__init__(message=message, status_code=503, details=details)


class RemoteTransientError(RemoteError):
    """Raised when retries are exhausted after 5xx or network failures."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, details=details)
