"""Services package for business logic and external integrations."""

from docpush.services.auth_service import Authenticator, build_authenticator
from docpush.services.document_service import DocumentService
from docpush.services.draft_service import DraftService
from docpush.services.github_service import GitHubService
from docpush.services.media_service import MediaService

__all__ = [
    "Authenticator",
    "build_authenticator",
    "DocumentService",
    "DraftService",
    "GitHubService",
    "MediaService",
]
