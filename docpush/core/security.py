"""
Security utilities for principal tokens and authorization.

Provides JWT token generation and validation for authenticated
principals, and role checks for the review workflow.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from docpush.core.config import Settings
from docpush.core.exceptions import AuthenticationError, AuthorizationError
from docpush.core.logging import get_logger
from docpush.schemas.auth import Principal, Role

logger = get_logger(__name__)


def create_access_token(
    principal: Principal,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token for a principal.

    Args:
        principal: Authenticated principal
        settings: Application settings (secret, algorithm, expiry)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    issued_at = datetime.now(UTC)
    expire = issued_at + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    to_encode: dict[str, Any] = {
        "sub": principal.id,
        "email": principal.email,
        "name": principal.name,
        "role": principal.role.value,
        "exp": expire,
        "iat": issued_at,
        "type": "access",
    }

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str, settings: Settings) -> Principal:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token string to decode
        settings: Application settings

    Returns:
        Principal encoded in the token

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"Token decode error: {e}")
        raise AuthenticationError(
            message="Invalid or expired token", details={"error": str(e)}
        ) from e

    if payload.get("type") != "access" or not payload.get("sub"):
        raise AuthenticationError("Token missing principal identifier")

    try:
        role = Role(payload.get("role", Role.EDITOR.value))
    except ValueError as e:
        raise AuthenticationError("Token carries an unknown role") from e

    return Principal(
        id=payload["sub"],
        email=payload.get("email"),
        name=payload.get("name"),
        role=role,
    )


def check_permission(principal: Principal, required_role: Role) -> None:
    """
    Check if a principal has the required role.

    Raises:
        AuthorizationError: If the principal lacks the role
    """
    if required_role == Role.ADMIN and not principal.is_admin:
        raise AuthorizationError(
            message=f"Requires {required_role.value} role",
            details={"role": principal.role.value, "required_role": required_role.value},
        )
