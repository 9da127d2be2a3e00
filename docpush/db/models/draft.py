"""
Draft and comment models.

A draft is one proposed change to one document, backed by its own Git
branch. The record holds only lifecycle state; the content itself lives
on the branch.
"""

from enum import StrEnum
from uuid import uuid4

from sqlalchemy import Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from docpush.db.base import Base, TimestampMixin, now


class DraftStatus(StrEnum):
    """Status of a draft. Approved and rejected are terminal."""

    PENDING = "pending"  # Branch live, open for edits
    APPROVED = "approved"  # Merged into the base branch
    REJECTED = "rejected"  # Discarded, branch deleted

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition is allowed."""
        return self is not DraftStatus.PENDING


def _new_id() -> str:
    return str(uuid4())


class Draft(Base, TimestampMixin):
    """
    Draft record for a proposed documentation change.

    The branch_name maps 1:1 to a live Git branch while the draft is pending.
    """

    __tablename__ = "drafts"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=_new_id, doc="Draft unique identifier"
    )

    doc_path: Mapped[str] = mapped_column(
        Text, nullable=False, index=True, doc="Target document path relative to the docs root"
    )

    branch_name: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, doc="Backing Git branch"
    )

    title: Mapped[str] = mapped_column(String(500), nullable=False, doc="Human label")

    author_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True, doc="Author principal ID"
    )

    author_email: Mapped[str | None] = mapped_column(
        String(255), nullable=True, doc="Author email"
    )

    status: Mapped[DraftStatus] = mapped_column(
        Enum(DraftStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=DraftStatus.PENDING,
        nullable=False,
        index=True,
        doc="Current lifecycle status",
    )

    def __repr__(self) -> str:
        """String representation of draft."""
        return f"<Draft(id={self.id}, doc_path={self.doc_path}, status={self.status})>"


class Comment(Base):
    """Reviewer or contributor comment on a draft. Immutable once created."""

    __tablename__ = "draft_comments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    draft_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("drafts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Owning draft",
    )

    user_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    user_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    user_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    content: Mapped[str] = mapped_column(Text, nullable=False, doc="Comment text")

    created_at: Mapped[int] = mapped_column(Integer, default=now, nullable=False)

    def __repr__(self) -> str:
        """String representation of comment."""
        return f"<Comment(id={self.id}, draft_id={self.draft_id})>"
