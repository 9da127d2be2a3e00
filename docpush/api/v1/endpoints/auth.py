"""
Authentication endpoints.

Exchanges credentials for a bearer token and reports the current
principal.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from docpush.api.dependencies import AuthenticatorDep, SettingsDep, get_current_principal
from docpush.core.exceptions import AuthenticationError
from docpush.core.logging import get_logger
from docpush.core.security import create_access_token
from docpush.schemas.auth import Credentials, Principal, TokenResponse

logger = get_logger(__name__)
router = APIRouter()


@router.post("/token", response_model=TokenResponse)
async def issue_token(
    credentials: Credentials,
    settings: SettingsDep,
    authenticator: AuthenticatorDep,
) -> TokenResponse:
    """
    Exchange credentials for a bearer token.

    Only available in public mode, where the admin password unlocks the
    admin role. Other modes issue tokens from their external sign-in flow.

    Args:
        credentials: Optional email/name and the admin password

    Returns:
        Bearer token and the principal it carries

    Raises:
        AuthenticationError: If the mode does not issue tokens here or the
            password is wrong
    """
    if not authenticator.allows_anonymous:
        raise AuthenticationError("Sign in through the configured identity provider")

    principal = await authenticator.authenticate(credentials)
    logger.info(f"Issued token for {principal.id} ({principal.role.value})")

    return TokenResponse(
        access_token=create_access_token(principal, settings),
        principal=principal,
    )


@router.get("/me", response_model=Principal)
async def get_me(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """Get the principal making the request."""
    return principal
