"""
Retry utilities for GitHub API calls.

Wraps remote operations with bounded exponential backoff, honors the
rate-limit reset window reported by the API, and classifies failures
into the typed remote errors used across the application.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from pydantic import BaseModel, Field

from docpush.core.exceptions import BaseAPIError, RemoteClientError, RemoteRateLimitError
from docpush.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Waits at or beyond this many seconds are reported instead of slept through
RATE_LIMIT_MAX_WAIT = 60.0


class RetryOptions(BaseModel):
    """Backoff policy for a remote call. Delays are in seconds."""

    model_config = {"frozen": True}

    max_retries: int = Field(default=3, ge=1, description="Total attempts allowed")
    base_delay: float = Field(default=1.0, gt=0, description="Delay before the second attempt")
    max_delay: float = Field(default=10.0, gt=0, description="Upper bound for any delay")


def backoff_delay(attempt: int, options: RetryOptions) -> float:
    """
    Compute the delay after a failed attempt.

    Args:
        attempt: Zero-based index of the attempt that just failed
        options: Retry policy

    Returns:
        Seconds to wait before the next attempt
    """
    return min(options.base_delay * 2**attempt, options.max_delay)


def _status_of(error: Exception) -> int | None:
    """Extract the HTTP status carried by a library exception, if any."""
    status = getattr(error, "status", None)
    return status if isinstance(status, int) else None


def _message_of(error: Exception) -> str:
    """Prefer the API's own message over the exception's repr."""
    data = getattr(error, "data", None)
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return str(error) or type(error).__name__


def _rate_limit_wait(error: Exception, clock: Callable[[], float]) -> float | None:
    """
    Read the quota signals from a failed response.

    Returns:
        Seconds until the quota resets when it is exhausted, else None
    """
    headers: dict[str, Any] = {
        str(key).lower(): value for key, value in (getattr(error, "headers", None) or {}).items()
    }
    remaining = headers.get("x-ratelimit-remaining")
    reset = headers.get("x-ratelimit-reset")

    if remaining is None or str(remaining) != "0" or reset is None:
        return None

    try:
        return float(reset) - clock()
    except (TypeError, ValueError):
        return None


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    options: RetryOptions | None = None,
    *,
    description: str = "GitHub request",
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    clock: Callable[[], float] = time.time,
) -> T:
    """
    Execute a remote operation with retry, backoff and rate-limit handling.

    Client errors (4xx other than 429) fail immediately as RemoteClientError.
    An exhausted quota with a reset under a minute away is waited out without
    spending an attempt; a longer wait raises RemoteRateLimitError. Anything
    else is retried with exponential backoff, and the last underlying error
    is re-raised once every attempt has failed.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt
        options: Retry policy (defaults to 3 attempts, 1s base, 10s cap)
        description: Label used in log messages
        sleep: Awaitable sleep function
        clock: Wall clock returning epoch seconds

    Returns:
        Result of the first successful attempt

    Raises:
        RemoteClientError: On a non-retryable client error
        RemoteRateLimitError: When the quota reset is too far away
        Exception: The last underlying error once retries are exhausted
    """
    options = options or RetryOptions()
    attempt = 0

    while True:
        try:
            return await operation()
        except BaseAPIError:
            # Already classified by the operation itself
            raise
        except Exception as e:
            status = _status_of(e)

            if status in (403, 429):
                wait = _rate_limit_wait(e, clock)
                if wait is not None:
                    if 0 < wait < RATE_LIMIT_MAX_WAIT:
                        logger.warning(f"Rate limited. Waiting {wait:.1f}s before {description}")
                        await sleep(wait)
                        continue
                    raise RemoteRateLimitError(
                        "GitHub API rate limit exceeded", retry_after=max(wait, 0.0)
                    ) from e

            if status is not None and 400 <= status < 500 and status != 429:
                raise RemoteClientError(_message_of(e), status=status) from e

            if attempt >= options.max_retries - 1:
                logger.error(f"{description} failed after {options.max_retries} attempts")
                raise

            delay = backoff_delay(attempt, options)
            logger.warning(
                f"{description} attempt {attempt + 1} failed: {_message_of(e)}. "
                f"Retrying in {delay:.1f}s..."
            )
            await sleep(delay)
            attempt += 1
