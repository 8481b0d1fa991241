"""Repository for Posting entity."""

from uuid import UUID

from sqlalchemy import or_, update
from sqlmodel import col, select

from src.research_hub.models import Posting
from src.research_hub.repositories.base import BaseRepository


class PostingRepository(BaseRepository[Posting]):
    """Repository for Posting entity."""

    model = Posting

    async def find(
        self,
        status: str | None = None,
        author_email: str | None = None,
        author_id: UUID | None = None,
        search: str | None = None,
    ) -> list[Posting]:
        """List postings newest first.

        Args:
            status: Exact status to match, or None for every status
            author_email: Restrict to one author's postings
            author_id: Restrict to one author's postings (used for scoping)
            search: Case-insensitive substring over title and description
        """
        query = select(Posting)
        if status is not None:
            query = query.where(Posting.status == status)
        if author_email is not None:
            query = query.where(Posting.author_email == author_email.lower())
        if author_id is not None:
            query = query.where(Posting.author_id == author_id)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(col(Posting.title).ilike(pattern), col(Posting.description).ilike(pattern))
            )
        query = query.order_by(col(Posting.created_at).desc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def increment_views(self, posting_id: UUID) -> int:
        """Atomically add one view and return the new count.

        The increment is computed by the database, so concurrent readers never
        lose updates.
        """
        await self.session.execute(
            update(Posting)
            .where(col(Posting.id) == posting_id)
            .values(views=col(Posting.views) + 1)
        )
        result = await self.session.execute(
            select(Posting.views).where(Posting.id == posting_id)
        )
        return int(result.scalar_one())
