"""
Core configuration module for the DocPush draft engine.

This module defines all application settings using Pydantic BaseSettings,
enabling configuration through environment variables with type validation.
Settings are loaded from .env files and environment variables, constructed
once at process start and passed explicitly into the services that need them.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class RepositoryConfig(BaseModel):
    """Target repository scope for all remote operations."""

    owner: str = Field(..., min_length=1, description="GitHub repository owner/organization")
    name: str = Field(..., min_length=1, description="GitHub repository name")
    base_branch: str = Field(default="main", description="Published branch drafts merge into")
    content_root: str = Field(default="docs", description="Documentation root in the repository")

    @field_validator("content_root")
    @classmethod
    def strip_slashes(cls, v: str) -> str:
        """Normalize the content root to have no leading or trailing slash."""
        return v.strip("/")

    @property
    def full_name(self) -> str:
        """Repository in owner/name form."""
        return f"{self.owner}/{self.name}"


class PublicAuthConfig(BaseModel):
    """Anyone may edit; admins unlock review with a shared password."""

    mode: Literal["public"] = "public"
    admin_password: str = Field(..., min_length=1, description="Password granting admin role")


class DomainRestrictedAuthConfig(BaseModel):
    """Only verified emails from the allowed domains may edit."""

    mode: Literal["domain-restricted"] = "domain-restricted"
    allowed_domains: list[str] = Field(..., min_length=1)
    email_from: str = Field(..., description="Sender address for magic-link emails")


class OAuthAuthConfig(BaseModel):
    """Editors sign in through one of the configured OAuth providers."""

    mode: Literal["oauth"] = "oauth"
    providers: list[Literal["github", "google"]] = Field(..., min_length=1)
    allowed_domains: list[str] | None = None


AuthConfig = Annotated[
    PublicAuthConfig | DomainRestrictedAuthConfig | OAuthAuthConfig,
    Field(discriminator="mode"),
]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All sensitive configuration (tokens, secrets) should be
    provided via environment variables, never hardcoded.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application Settings
    APP_NAME: str = Field(default="DocPush Draft Engine", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    DEBUG: bool = Field(default=False, description="Debug mode flag")
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment (development/staging/production)",
    )

    # Server Settings
    HOST: str = Field(default="0.0.0.0", description="Server host")  # noqa: S104
    PORT: int = Field(default=8000, description="Server port")
    API_PREFIX: str = Field(default="/api", description="API route prefix")

    # CORS Settings
    CORS_ORIGINS: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Allowed CORS origins",
    )

    # Security Settings
    SECRET_KEY: str = Field(..., description="Secret key for signing principal tokens")
    ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=1440, description="Access token expiry (24 hours)"
    )

    # Authentication
    AUTH: AuthConfig = Field(..., description="Authentication mode configuration")
    ADMIN_EMAILS: Annotated[list[str], NoDecode] = Field(
        default_factory=list, description="Emails granted the admin role"
    )

    # Record store
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./.docpush/drafts.db",
        description="SQLAlchemy async URL for the draft record store",
    )
    DATABASE_ECHO: bool = Field(default=False, description="Echo SQL queries (dev only)")

    # GitHub Settings
    GITHUB_TOKEN: str = Field(..., description="GitHub Personal Access Token with repo write scope")
    GITHUB_OWNER: str = Field(..., description="GitHub repository owner/organization")
    GITHUB_REPO: str = Field(..., description="GitHub repository holding the documentation")
    GITHUB_BRANCH: str = Field(default="main", description="Base branch drafts are merged into")
    GITHUB_TIMEOUT: int = Field(default=15, description="Per-request timeout in seconds")

    # Retry policy for GitHub calls
    GITHUB_MAX_RETRIES: int = Field(default=3, ge=1, description="Attempts per remote call")
    GITHUB_RETRY_BASE_DELAY: float = Field(
        default=1.0, gt=0, description="Initial backoff delay in seconds"
    )
    GITHUB_RETRY_MAX_DELAY: float = Field(
        default=10.0, gt=0, description="Backoff delay cap in seconds"
    )

    # Document Settings
    DOCS_ROOT_PATH: str = Field(
        default="docs", description="Root path in Git repo for documentation"
    )

    # File Upload Settings
    MAX_UPLOAD_SIZE: int = Field(default=5242880, description="Max media upload in bytes (5MB)")

    # Logging Settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    LOG_FILE: str | None = Field(default=None, description="Log file path (None for stdout only)")

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        """Parse CORS origins from a comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return list(v)

    @field_validator("ADMIN_EMAILS", mode="before")
    @classmethod
    def parse_admin_emails(cls, v: Any) -> list[str]:
        """Parse admin emails from a comma-separated string or list."""
        if isinstance(v, str):
            return [email.strip().lower() for email in v.split(",") if email.strip()]
        return [str(email).lower() for email in v]

    @property
    def repository(self) -> RepositoryConfig:
        """Repository scope derived from the GitHub settings."""
        return RepositoryConfig(
            owner=self.GITHUB_OWNER,
            name=self.GITHUB_REPO,
            base_branch=self.GITHUB_BRANCH,
            content_root=self.DOCS_ROOT_PATH,
        )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT.lower() == "development"
