"""Blog service - articles written by students and faculty."""

import math
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.research_hub.core.authorization import Action, authorize, enforce
from src.research_hub.core.exceptions import Forbidden, NotFound, Unauthenticated
from src.research_hub.core.logging import get_logger
from src.research_hub.models import AttachmentKind, BlogPost, Role, UserProfile
from src.research_hub.models.base import utc_now
from src.research_hub.repositories import BlogPostRepository
from src.research_hub.schemas.blog import BlogPostCreate, BlogPostUpdate
from src.research_hub.services.attachment_service import AttachmentService

logger = get_logger(__name__)

WORDS_PER_MINUTE = 200


def estimate_read_time(content: str) -> int:
    """Minutes to read `content` at 200 words per minute, at least 1.

    >>> estimate_read_time("word " * 401)
    3
    """
    return max(1, math.ceil(len(content.split()) / WORDS_PER_MINUTE))


class BlogService:
    def __init__(
        self,
        blog_repo: BlogPostRepository,
        attachments: AttachmentService,
        session: AsyncSession,
    ):
        self.blog_repo = blog_repo
        self.attachments = attachments
        self.session = session

    async def _get_or_404(self, post_id: UUID) -> BlogPost:
        post = await self.blog_repo.get_by_id(post_id)
        if post is None:
            raise NotFound("Blog post not found")
        return post

    def _check_pdf(self, pdf_url: str | None, principal: UserProfile) -> None:
        if pdf_url and not self.attachments.owns(pdf_url, principal.id, AttachmentKind.DOCUMENT):
            raise Forbidden("PDF must be one of your uploads")

    async def list(
        self,
        principal: UserProfile | None = None,
        author_email: str | None = None,
        tag: str | None = None,
        search: str | None = None,
        include_unpublished: bool = False,
    ) -> list[BlogPost]:
        """Published posts by default; drafts only for their author (or admins)."""
        author_id: UUID | None = None
        if include_unpublished:
            if principal is None:
                raise Unauthenticated("Authentication required")
            if principal.role != Role.ADMIN.value:
                author_id = principal.id

        posts = await self.blog_repo.find(
            published_only=not include_unpublished,
            author_email=author_email,
            author_id=author_id,
            search=search.strip() if search else None,
        )
        if tag:
            wanted = tag.strip().lower()
            posts = [p for p in posts if any(t.lower() == wanted for t in p.tags)]
        return posts

    async def get_by_id(self, post_id: UUID, principal: UserProfile | None) -> BlogPost:
        post = await self._get_or_404(post_id)
        enforce(authorize(principal, Action.READ_BLOG_POST, blog_post=post))

        try:
            views = await self.blog_repo.increment_views(post_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        post.views = views
        return post

    async def create(self, data: BlogPostCreate, principal: UserProfile | None) -> BlogPost:
        enforce(authorize(principal, Action.CREATE_BLOG_POST))
        assert principal is not None
        self._check_pdf(data.pdf_url, principal)

        post = BlogPost(
            **data.model_dump(),
            author_id=principal.id,
            author_email=principal.email,
            author_name=principal.name,
            read_time=estimate_read_time(data.content),
        )
        try:
            self.blog_repo.add(post)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(post)
        logger.info("Blog post created", post_id=str(post.id), published=post.published)
        return post

    async def update(
        self, post_id: UUID, data: BlogPostUpdate, principal: UserProfile | None
    ) -> BlogPost:
        post = await self._get_or_404(post_id)
        enforce(authorize(principal, Action.UPDATE_BLOG_POST, blog_post=post))
        assert principal is not None

        update_data = data.model_dump(exclude_unset=True)
        if "pdf_url" in update_data:
            self._check_pdf(update_data["pdf_url"], principal)
        replaced_pdf = None
        if "pdf_url" in update_data and update_data["pdf_url"] != post.pdf_url:
            replaced_pdf = post.pdf_url

        for field, value in update_data.items():
            if value is None and field != "pdf_url":
                continue
            setattr(post, field, value)
        if update_data.get("content"):
            post.read_time = estimate_read_time(post.content)
        post.updated_at = utc_now()

        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(post)
        if replaced_pdf:
            await self.attachments.delete(replaced_pdf, AttachmentKind.DOCUMENT)
        return post

    async def delete(self, post_id: UUID, principal: UserProfile | None) -> None:
        post = await self._get_or_404(post_id)
        enforce(authorize(principal, Action.DELETE_BLOG_POST, blog_post=post))

        pdf_url = post.pdf_url
        try:
            await self.blog_repo.delete(post)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Blog post deleted", post_id=str(post_id))
        await self.attachments.delete(pdf_url, AttachmentKind.DOCUMENT)
