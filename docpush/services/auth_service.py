"""
Authentication strategies.

Each configured auth mode maps to one Authenticator that turns presented
credentials into a Principal. The rest of the application only sees the
Authenticator interface.
"""

import hashlib
import hmac
from abc import ABC, abstractmethod

from docpush.core.config import (
    AuthConfig,
    DomainRestrictedAuthConfig,
    OAuthAuthConfig,
    PublicAuthConfig,
)
from docpush.core.exceptions import AuthenticationError
from docpush.core.logging import get_logger
from docpush.schemas.auth import Credentials, Principal, Role

logger = get_logger(__name__)


def _principal_id(email: str) -> str:
    """Stable identifier derived from a normalized email."""
    return hashlib.sha256(email.encode("utf-8")).hexdigest()[:32]


def _email_domain(email: str) -> str:
    return email.rsplit("@", 1)[-1].lower()


class Authenticator(ABC):
    """Turns credentials into a principal."""

    def __init__(self, admin_emails: list[str] | None = None) -> None:
        self.admin_emails = {email.lower() for email in admin_emails or []}

    @property
    def allows_anonymous(self) -> bool:
        """Whether requests without a token act as an anonymous editor."""
        return False

    @abstractmethod
    async def authenticate(self, credentials: Credentials) -> Principal:
        """
        Authenticate credentials.

        Raises:
            AuthenticationError: If the credentials are not acceptable
        """

    def anonymous(self) -> Principal:
        """Principal used for unauthenticated requests when allowed."""
        raise AuthenticationError("Authentication required")

    def _principal_for_email(self, email: str, name: str | None) -> Principal:
        email = email.strip().lower()
        role = Role.ADMIN if email in self.admin_emails else Role.EDITOR
        return Principal(id=_principal_id(email), email=email, name=name, role=role)


class PublicAuthenticator(Authenticator):
    """Anyone may edit anonymously; the shared admin password grants review rights."""

    def __init__(self, config: PublicAuthConfig, admin_emails: list[str] | None = None) -> None:
        super().__init__(admin_emails)
        self.config = config

    @property
    def allows_anonymous(self) -> bool:
        return True

    def anonymous(self) -> Principal:
        return Principal(id="anonymous", email=None, name="Anonymous", role=Role.EDITOR)

    async def authenticate(self, credentials: Credentials) -> Principal:
        if credentials.password is None:
            # Unverified emails are recorded for attribution but never grant admin
            if credentials.email:
                email = credentials.email.strip().lower()
                return Principal(
                    id=_principal_id(email), email=email, name=credentials.name, role=Role.EDITOR
                )
            return self.anonymous()

        if not hmac.compare_digest(
            credentials.password.encode("utf-8"), self.config.admin_password.encode("utf-8")
        ):
            logger.warning("Rejected admin login with wrong password")
            raise AuthenticationError("Invalid admin password")

        return Principal(
            id="admin",
            email=credentials.email,
            name=credentials.name or "Admin",
            role=Role.ADMIN,
        )


class DomainRestrictedAuthenticator(Authenticator):
    """
    Only verified emails from the allowed domains are accepted.

    The magic-link flow runs outside this service: once it has verified an
    email, it calls authenticate() and signs the resulting principal with
    create_access_token(). POST /auth/token does not issue tokens in this mode.
    """

    def __init__(
        self, config: DomainRestrictedAuthConfig, admin_emails: list[str] | None = None
    ) -> None:
        super().__init__(admin_emails)
        self.allowed_domains = {domain.lower() for domain in config.allowed_domains}

    async def authenticate(self, credentials: Credentials) -> Principal:
        if not credentials.email:
            raise AuthenticationError("Email required")

        if _email_domain(credentials.email) not in self.allowed_domains:
            raise AuthenticationError(
                "Email domain not allowed", details={"email": credentials.email}
            )

        return self._principal_for_email(credentials.email, credentials.name)


class OAuthAuthenticator(Authenticator):
    """
    Accepts identities verified by one of the configured OAuth providers.

    The OAuth redirect and callback run outside this service: the callback
    passes the verified identity to authenticate() and signs the resulting
    principal with create_access_token(). POST /auth/token does not issue
    tokens in this mode.
    """

    def __init__(self, config: OAuthAuthConfig, admin_emails: list[str] | None = None) -> None:
        super().__init__(admin_emails)
        self.providers = set(config.providers)
        self.allowed_domains = (
            {domain.lower() for domain in config.allowed_domains}
            if config.allowed_domains
            else None
        )

    async def authenticate(self, credentials: Credentials) -> Principal:
        if credentials.provider not in self.providers:
            raise AuthenticationError(
                "OAuth provider not enabled", details={"provider": credentials.provider}
            )

        if not credentials.email:
            raise AuthenticationError("OAuth identity has no email")

        if self.allowed_domains and _email_domain(credentials.email) not in self.allowed_domains:
            raise AuthenticationError(
                "Email domain not allowed", details={"email": credentials.email}
            )

        return self._principal_for_email(credentials.email, credentials.name)


def build_authenticator(config: AuthConfig, admin_emails: list[str] | None = None) -> Authenticator:
    """
    Map the configured auth mode to its authenticator.

    Args:
        config: Auth configuration variant
        admin_emails: Emails granted the admin role

    Returns:
        Authenticator for the mode
    """
    match config:
        case PublicAuthConfig():
            return PublicAuthenticator(config, admin_emails)
        case DomainRestrictedAuthConfig():
            return DomainRestrictedAuthenticator(config, admin_emails)
        case OAuthAuthConfig():
            return OAuthAuthenticator(config, admin_emails)
    raise ValueError(f"Unsupported auth mode: {config!r}")
