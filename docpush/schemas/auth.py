"""
Authentication schemas.

Defines the principal produced by every authentication strategy and
the request/response models for token exchange.
"""

from enum import StrEnum

from pydantic import BaseModel, Field


class Role(StrEnum):
    """Roles for access control. Admins review; editors propose."""

    EDITOR = "editor"
    ADMIN = "admin"


class Principal(BaseModel):
    """Authenticated caller as seen by the draft engine."""

    id: str = Field(..., description="Stable principal identifier")
    email: str | None = Field(None, description="Email (None for anonymous editors)")
    name: str | None = Field(None, description="Display name")
    role: Role = Field(default=Role.EDITOR, description="Access role")

    @property
    def is_admin(self) -> bool:
        """Check if the principal may review drafts."""
        return self.role == Role.ADMIN


class Credentials(BaseModel):
    """Identity assertions presented to an authenticator."""

    email: str | None = Field(None, description="Verified email address")
    name: str | None = Field(None, description="Display name")
    provider: str | None = Field(None, description="OAuth provider that verified the email")
    password: str | None = Field(None, description="Admin password (public mode)")


class TokenResponse(BaseModel):
    """Schema for an issued bearer token."""

    access_token: str
    token_type: str = "bearer"
    principal: Principal
