"""
FastAPI dependency injection functions.

Provides reusable dependencies for the services built at startup,
principal resolution from bearer tokens, and role checks.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from docpush.core.config import Settings
from docpush.core.logging import get_logger
from docpush.core.security import check_permission, decode_token
from docpush.schemas.auth import Principal, Role
from docpush.services.auth_service import Authenticator
from docpush.services.document_service import DocumentService
from docpush.services.draft_service import DraftService
from docpush.services.media_service import MediaService

logger = get_logger(__name__)

# Missing tokens are resolved by the authenticator, not rejected up front
security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_authenticator(request: Request) -> Authenticator:
    return request.app.state.authenticator


def get_draft_service(request: Request) -> DraftService:
    return request.app.state.draft_service


def get_document_service(request: Request) -> DocumentService:
    return request.app.state.document_service


def get_media_service(request: Request) -> MediaService:
    return request.app.state.media_service


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_settings)],
    authenticator: Annotated[Authenticator, Depends(get_authenticator)],
) -> Principal:
    """
    Get the principal making the request.

    A bearer token is decoded when present. Without one, the configured
    auth mode decides whether the caller acts anonymously.

    Args:
        credentials: Optional bearer token from the request
        settings: Application settings
        authenticator: Authenticator for the configured mode

    Returns:
        Principal for the request

    Raises:
        AuthenticationError: If the token is invalid, or missing where
            anonymous access is not allowed
    """
    if credentials is not None:
        return decode_token(credentials.credentials, settings)

    return authenticator.anonymous()


async def get_current_editor(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """Require a principal with at least the editor role."""
    check_permission(principal, Role.EDITOR)
    return principal


async def get_current_admin(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """
    Require an admin principal.

    Raises:
        AuthorizationError: If the principal is not an admin
    """
    check_permission(principal, Role.ADMIN)
    return principal


SettingsDep = Annotated[Settings, Depends(get_settings)]
AuthenticatorDep = Annotated[Authenticator, Depends(get_authenticator)]
DraftServiceDep = Annotated[DraftService, Depends(get_draft_service)]
DocumentServiceDep = Annotated[DocumentService, Depends(get_document_service)]
MediaServiceDep = Annotated[MediaService, Depends(get_media_service)]
EditorDep = Annotated[Principal, Depends(get_current_editor)]
AdminDep = Annotated[Principal, Depends(get_current_admin)]
