"""Application service - student submissions and teacher review."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.research_hub.core.authorization import Action, authorize, enforce
from src.research_hub.core.exceptions import (
    DuplicateApplication,
    Forbidden,
    NotFound,
    ValidationFailed,
)
from src.research_hub.core.logging import get_logger
from src.research_hub.models import (
    Application,
    ApplicationStatus,
    AttachmentKind,
    Posting,
    Role,
    UserProfile,
)
from src.research_hub.models.base import utc_now
from src.research_hub.repositories import ApplicationRepository, PostingRepository
from src.research_hub.schemas.application import ApplicationCreate
from src.research_hub.services.attachment_service import AttachmentService

logger = get_logger(__name__)

_DECISIONS = {ApplicationStatus.ACCEPTED.value, ApplicationStatus.REJECTED.value}


class ApplicationService:
    """Application lifecycle: pending, then accepted or rejected (both terminal)."""

    def __init__(
        self,
        application_repo: ApplicationRepository,
        posting_repo: PostingRepository,
        attachments: AttachmentService,
        session: AsyncSession,
    ):
        self.application_repo = application_repo
        self.posting_repo = posting_repo
        self.attachments = attachments
        self.session = session

    async def _get_or_404(self, application_id: UUID) -> Application:
        application = await self.application_repo.get_by_id(application_id)
        if application is None:
            raise NotFound("Application not found")
        return application

    async def _get_posting(self, posting_id: UUID) -> Posting:
        posting = await self.posting_repo.get_by_id(posting_id)
        if posting is None:
            raise NotFound("Project not found")
        return posting

    async def list(
        self,
        principal: UserProfile,
        project_id: UUID | None = None,
        student_id: UUID | None = None,
        teacher_id: UUID | None = None,
        status: str | None = None,
    ) -> list[Application]:
        """List applications visible to the caller, newest first.

        Explicit filters narrow the visible set; they never widen it. Students
        see their own applications, teachers those on their postings, admins all.
        """
        if status is not None and status not in {s.value for s in ApplicationStatus}:
            raise ValidationFailed(f"Unknown status '{status}'", field="status")

        if principal.role == Role.STUDENT.value:
            if student_id is not None and student_id != principal.id:
                return []
            student_id = principal.id
        elif principal.role == Role.TEACHER.value:
            if teacher_id is not None and teacher_id != principal.id:
                return []
            teacher_id = principal.id

        return await self.application_repo.find(
            project_id=project_id,
            student_id=student_id,
            teacher_id=teacher_id,
            status=status,
        )

    async def get(self, application_id: UUID, principal: UserProfile) -> Application:
        application = await self._get_or_404(application_id)
        posting = await self.posting_repo.get_by_id(application.project_id)
        enforce(
            authorize(
                principal, Action.READ_APPLICATION, application=application, posting=posting
            )
        )
        return application

    async def create(self, data: ApplicationCreate, principal: UserProfile) -> Application:
        """Submit an application to an active posting.

        Raises:
            NotFound: the posting does not exist.
            ValidationFailed: the posting is not accepting applications.
            Forbidden: the caller is not a student, or the resume is not theirs.
            DuplicateApplication: the caller already applied.
        """
        posting = await self._get_posting(data.project_id)
        already_applied = await self.application_repo.exists_for(principal.id, posting.id)
        enforce(
            authorize(
                principal,
                Action.CREATE_APPLICATION,
                posting=posting,
                already_applied=already_applied,
            )
        )

        if data.resume_url and not self.attachments.owns(
            data.resume_url, principal.id, AttachmentKind.RESUME
        ):
            raise Forbidden("Resume must be one of your uploads")

        application = Application(
            student_id=principal.id,
            student_email=principal.email,
            student_name=principal.name,
            student_phone=principal.phone or "",
            student_year=principal.year or "",
            student_gpa=principal.gpa or 0,
            project_id=posting.id,
            project_title=posting.title,
            teacher_id=posting.author_id,
            teacher_email=posting.author_email,
            cover_letter=data.cover_letter,
            skills=data.skills,
            resume_url=data.resume_url,
            status=ApplicationStatus.PENDING.value,
        )
        try:
            self.application_repo.add(application)
            await self.session.commit()
        except IntegrityError as e:
            # Concurrent submission won the unique (student_id, project_id) race
            await self.session.rollback()
            raise DuplicateApplication("You have already applied to this project") from e
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(application)
        logger.info(
            "Application submitted",
            application_id=str(application.id),
            project_id=str(posting.id),
        )
        return application

    async def update_status(
        self, application_id: UUID, new_status: str, principal: UserProfile
    ) -> Application:
        """Decide a pending application. Only the posting owner may do this."""
        if new_status not in _DECISIONS:
            raise ValidationFailed(
                "Status must be 'accepted' or 'rejected'", field="status"
            )

        application = await self._get_or_404(application_id)
        posting = await self._get_posting(application.project_id)
        enforce(
            authorize(
                principal,
                Action.UPDATE_APPLICATION_STATUS,
                application=application,
                posting=posting,
            )
        )

        application.status = new_status
        application.updated_at = utc_now()
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(application)
        logger.info(
            "Application decided",
            application_id=str(application.id),
            status=new_status,
        )
        return application

    async def delete(self, application_id: UUID, principal: UserProfile) -> None:
        """Withdraw an application, then remove its resume."""
        application = await self._get_or_404(application_id)
        enforce(authorize(principal, Action.DELETE_APPLICATION, application=application))

        resume_url = application.resume_url
        try:
            await self.application_repo.delete(application)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Application withdrawn", application_id=str(application_id))
        await self.attachments.delete(resume_url, AttachmentKind.RESUME)

    async def download_resume(
        self, application_id: UUID, principal: UserProfile
    ) -> tuple[str, bytes]:
        """Return (file name, PDF bytes) of the application's resume."""
        application = await self._get_or_404(application_id)
        posting = await self._get_posting(application.project_id)
        enforce(
            authorize(
                principal, Action.DOWNLOAD_RESUME, application=application, posting=posting
            )
        )
        if not application.resume_url:
            raise NotFound("No resume file found for this application")
        return await self.attachments.download(application.resume_url, AttachmentKind.RESUME)
