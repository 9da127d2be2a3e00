"""
Draft record store.

Keyed persistence for Draft and Comment records. Every method runs in its
own transaction, so each record mutation is atomic; nothing spans more
than one draft.
"""

from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docpush.core.logging import get_logger
from docpush.db.base import now
from docpush.db.models.draft import Comment, Draft, DraftStatus

logger = get_logger(__name__)

# Fields fixed at creation time
IMMUTABLE_FIELDS = frozenset({"id", "doc_path", "branch_name", "created_at"})


class DraftStore:
    """Persistence for drafts and their comments."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_drafts(self, status: DraftStatus | None = None) -> list[Draft]:
        """
        List drafts, most recently updated first.

        Args:
            status: Only return drafts in this status

        Returns:
            Matching drafts
        """
        stmt = select(Draft)
        if status:
            stmt = stmt.where(Draft.status == status)
        stmt = stmt.order_by(Draft.updated_at.desc(), Draft.created_at.desc())

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get_draft(self, draft_id: str) -> Draft | None:
        """Get a draft by ID, or None."""
        async with self._session_factory() as session:
            return await session.get(Draft, draft_id)

    async def insert_draft(
        self,
        doc_path: str,
        branch_name: str,
        title: str,
        author_id: str | None = None,
        author_email: str | None = None,
    ) -> Draft:
        """Persist a new pending draft."""
        timestamp = now()
        draft = Draft(
            doc_path=doc_path,
            branch_name=branch_name,
            title=title,
            author_id=author_id,
            author_email=author_email,
            status=DraftStatus.PENDING,
            created_at=timestamp,
            updated_at=timestamp,
        )

        async with self._session_factory() as session:
            session.add(draft)
            await session.commit()
            await session.refresh(draft)

        return draft

    async def update_draft(self, draft_id: str, **fields: Any) -> Draft | None:
        """
        Partially update a draft and bump updated_at.

        Args:
            draft_id: Draft ID
            **fields: Mutable columns to change (may be empty to only touch)

        Returns:
            Updated draft, or None if it doesn't exist
        """
        forbidden = IMMUTABLE_FIELDS.intersection(fields)
        if forbidden:
            raise ValueError(f"Cannot update immutable draft fields: {sorted(forbidden)}")

        async with self._session_factory() as session:
            draft = await session.get(Draft, draft_id)
            if not draft:
                return None

            for field, value in fields.items():
                setattr(draft, field, value)
            draft.updated_at = now()

            await session.commit()
            await session.refresh(draft)
            return draft

    async def transition_status(self, draft_id: str, status: DraftStatus) -> Draft | None:
        """
        Move a pending draft to a terminal status.

        The write is conditional on the stored status still being pending,
        so concurrent reviewers cannot both transition the same draft.

        Returns:
            Updated draft, or None if it is missing or no longer pending
        """
        async with self._session_factory() as session:
            result = await session.execute(
                update(Draft)
                .where(Draft.id == draft_id, Draft.status == DraftStatus.PENDING)
                .values(status=status, updated_at=now())
            )
            await session.commit()

            if result.rowcount == 0:
                return None

            return await session.get(Draft, draft_id, populate_existing=True)

    async def delete_draft(self, draft_id: str) -> bool:
        """
        Delete a draft and its comments.

        Returns:
            True if a draft was deleted
        """
        async with self._session_factory() as session:
            await session.execute(delete(Comment).where(Comment.draft_id == draft_id))
            result = await session.execute(delete(Draft).where(Draft.id == draft_id))
            await session.commit()
            return result.rowcount > 0

    async def list_comments(self, draft_id: str) -> list[Comment]:
        """List comments on a draft, oldest first."""
        stmt = (
            select(Comment)
            .where(Comment.draft_id == draft_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def add_comment(
        self,
        draft_id: str,
        content: str,
        user_id: str | None = None,
        user_email: str | None = None,
        user_name: str | None = None,
    ) -> Comment:
        """Append a comment to a draft. The draft itself is not touched."""
        comment = Comment(
            draft_id=draft_id,
            content=content,
            user_id=user_id,
            user_email=user_email,
            user_name=user_name,
            created_at=now(),
        )

        async with self._session_factory() as session:
            session.add(comment)
            await session.commit()
            await session.refresh(comment)

        return comment
