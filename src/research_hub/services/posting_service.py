"""Posting service - research opportunities authored by teachers."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.research_hub.core.authorization import Action, authorize, enforce
from src.research_hub.core.exceptions import Forbidden, NotFound, ValidationFailed
from src.research_hub.core.logging import get_logger
from src.research_hub.models import AttachmentKind, Posting, PostingStatus, Role, UserProfile
from src.research_hub.models.base import utc_now
from src.research_hub.repositories import ApplicationRepository, PostingRepository
from src.research_hub.schemas.posting import PostingCreate, PostingUpdate
from src.research_hub.services.attachment_service import AttachmentService

logger = get_logger(__name__)

STATUS_ALL = "all"
_VALID_STATUSES = {s.value for s in PostingStatus}
# Patchable columns that accept an explicit null
_NULLABLE_FIELDS = frozenset({"deadline", "stipend", "outcome", "document_url"})


class PostingService:
    def __init__(
        self,
        posting_repo: PostingRepository,
        application_repo: ApplicationRepository,
        attachments: AttachmentService,
        session: AsyncSession,
    ):
        self.posting_repo = posting_repo
        self.application_repo = application_repo
        self.attachments = attachments
        self.session = session

    async def _get_or_404(self, posting_id: UUID) -> Posting:
        posting = await self.posting_repo.get_by_id(posting_id)
        if posting is None:
            raise NotFound("Project not found")
        return posting

    async def list(
        self,
        principal: UserProfile | None,
        status: str | None = None,
        author_email: str | None = None,
        search: str | None = None,
    ) -> list[Posting]:
        """List postings, newest first.

        Status defaults to active. ``status=all`` lifts the status filter.
        Anything other than active listings needs a caller and, for non-admins,
        is scoped to the caller's own postings.
        """
        status = (status or PostingStatus.ACTIVE.value).lower()
        if status != STATUS_ALL and status not in _VALID_STATUSES:
            raise ValidationFailed(f"Unknown status '{status}'", field="status")

        enforce(authorize(principal, Action.LIST_POSTINGS, listing_status=status))

        author_id: UUID | None = None
        if status != PostingStatus.ACTIVE.value:
            assert principal is not None
            if principal.role != Role.ADMIN.value:
                author_id = principal.id

        return await self.posting_repo.find(
            status=None if status == STATUS_ALL else status,
            author_email=author_email,
            author_id=author_id,
            search=search.strip() if search else None,
        )

    async def get_by_id(self, posting_id: UUID, principal: UserProfile | None) -> Posting:
        """Read a posting and count the view."""
        posting = await self._get_or_404(posting_id)
        enforce(authorize(principal, Action.READ_POSTING, posting=posting))

        try:
            views = await self.posting_repo.increment_views(posting_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        posting.views = views
        return posting

    def _check_document(self, document_url: str | None, principal: UserProfile) -> None:
        if document_url and not self.attachments.owns(
            document_url, principal.id, AttachmentKind.DOCUMENT
        ):
            raise Forbidden("Document must be one of your uploads")

    async def create(self, data: PostingCreate, principal: UserProfile | None) -> Posting:
        enforce(authorize(principal, Action.CREATE_POSTING))
        assert principal is not None
        self._check_document(data.document_url, principal)

        posting = Posting(
            **data.model_dump(exclude={"department"}),
            department=data.department or principal.department or "Unknown",
            author_id=principal.id,
            author_email=principal.email,
            author_name=principal.name,
            views=0,
        )
        try:
            self.posting_repo.add(posting)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(posting)
        logger.info("Posting created", posting_id=str(posting.id), status=posting.status)
        return posting

    async def update(
        self, posting_id: UUID, data: PostingUpdate, principal: UserProfile | None
    ) -> Posting:
        """Merge the provided fields. Owner fields are never patched."""
        posting = await self._get_or_404(posting_id)
        enforce(authorize(principal, Action.UPDATE_POSTING, posting=posting))
        assert principal is not None

        update_data = data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is None and field not in _NULLABLE_FIELDS:
                raise ValidationFailed(f"{field} cannot be null", field=field)
        if "document_url" in update_data:
            self._check_document(update_data["document_url"], principal)

        for field, value in update_data.items():
            setattr(posting, field, value)
        posting.updated_at = utc_now()

        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(posting)
        logger.info("Posting updated", posting_id=str(posting.id), fields=sorted(update_data))
        return posting

    async def delete(self, posting_id: UUID, principal: UserProfile | None) -> None:
        """Delete a posting with all its applications, then clean up their files."""
        posting = await self._get_or_404(posting_id)
        enforce(authorize(principal, Action.DELETE_POSTING, posting=posting))

        applications = await self.application_repo.list_by_project(posting_id)
        resume_urls = [a.resume_url for a in applications if a.resume_url]
        document_url = posting.document_url

        try:
            removed = await self.application_repo.delete_by_project(posting_id)
            await self.posting_repo.delete(posting)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Posting deleted",
            posting_id=str(posting_id),
            applications_removed=removed,
        )

        for url in resume_urls:
            await self.attachments.delete(url, AttachmentKind.RESUME)
        if document_url:
            await self.attachments.delete(document_url, AttachmentKind.DOCUMENT)
