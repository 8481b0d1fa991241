"""Repository for BlogPost entity."""

from uuid import UUID

from sqlalchemy import or_, update
from sqlmodel import col, select

from src.research_hub.models import BlogPost
from src.research_hub.repositories.base import BaseRepository


class BlogPostRepository(BaseRepository[BlogPost]):
    """Repository for BlogPost entity."""

    model = BlogPost

    async def find(
        self,
        published_only: bool = True,
        author_email: str | None = None,
        author_id: UUID | None = None,
        search: str | None = None,
    ) -> list[BlogPost]:
        """List blog posts newest first.

        Tag filtering happens in the service since tags are a JSON column.
        """
        query = select(BlogPost)
        if published_only:
            query = query.where(BlogPost.published == True)  # noqa: E712
        if author_email is not None:
            query = query.where(BlogPost.author_email == author_email.lower())
        if author_id is not None:
            query = query.where(BlogPost.author_id == author_id)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    col(BlogPost.title).ilike(pattern),
                    col(BlogPost.content).ilike(pattern),
                    col(BlogPost.excerpt).ilike(pattern),
                )
            )
        query = query.order_by(col(BlogPost.created_at).desc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def increment_views(self, post_id: UUID) -> int:
        """Atomically add one view and return the new count."""
        await self.session.execute(
            update(BlogPost)
            .where(col(BlogPost.id) == post_id)
            .values(views=col(BlogPost.views) + 1)
        )
        result = await self.session.execute(
            select(BlogPost.views).where(BlogPost.id == post_id)
        )
        return int(result.scalar_one())
