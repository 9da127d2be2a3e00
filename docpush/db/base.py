"""
SQLAlchemy base configuration and declarative base.

This module provides the declarative base class for all record models
and the integer-second timestamp helpers shared by them.
"""

import time

from sqlalchemy import Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def now() -> int:
    """Current time as integer epoch seconds."""
    return int(time.time())


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""


class TimestampMixin:
    """Mixin to add integer-second timestamp fields to models."""

    created_at: Mapped[int] = mapped_column(
        Integer,
        default=now,
        nullable=False,
        doc="Epoch seconds when record was created",
    )

    updated_at: Mapped[int] = mapped_column(
        Integer,
        default=now,
        nullable=False,
        doc="Epoch seconds when record was last updated",
    )
