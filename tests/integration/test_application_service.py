"""Integration tests for ApplicationService."""

from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.research_hub.core.exceptions import (
    Conflict,
    DuplicateApplication,
    Forbidden,
    NotFound,
    ValidationFailed,
)
from src.research_hub.models import ApplicationStatus, AttachmentKind
from src.research_hub.models.base import utc_now
from src.research_hub.repositories import ApplicationRepository, PostingRepository
from src.research_hub.schemas.application import ApplicationCreate
from src.research_hub.services import ApplicationService, AttachmentService
from src.research_hub.services.attachment_service import PDF_CONTENT_TYPE
from tests.helpers import (
    PDF_BYTES,
    create_application,
    create_posting,
    resume_url_for,
)

pytestmark = pytest.mark.integration


@pytest.fixture
def service(db_session: AsyncSession, attachments: AttachmentService) -> ApplicationService:
    return ApplicationService(
        ApplicationRepository(db_session),
        PostingRepository(db_session),
        attachments,
        db_session,
    )


def _apply(posting_id, **overrides) -> ApplicationCreate:
    data = {"project_id": posting_id, "cover_letter": "Keen to contribute.", "skills": ["Rust"]}
    data.update(overrides)
    return ApplicationCreate(**data)


class TestCreate:
    async def test_snapshot_is_taken_at_submission(self, service, db_session, teacher, student):
        posting = await create_posting(db_session, teacher, title="Compilers")

        application = await service.create(_apply(posting.id), student)

        assert application.status == ApplicationStatus.PENDING.value
        assert application.student_email == student.email
        assert application.student_name == student.name
        assert application.student_gpa == student.gpa
        assert application.project_title == "Compilers"
        assert application.teacher_id == teacher.id
        assert application.teacher_email == teacher.email

        student.name = "Renamed Later"
        await db_session.commit()
        stored = await service.get(application.id, student)
        assert stored.student_name != "Renamed Later"

    async def test_unknown_posting(self, service, student):
        with pytest.raises(NotFound):
            await service.create(_apply(uuid4()), student)

    @pytest.mark.parametrize("status", ["draft", "closed"])
    async def test_non_active_posting(self, service, db_session, teacher, student, status):
        posting = await create_posting(db_session, teacher, status=status)

        with pytest.raises(ValidationFailed, match="not accepting"):
            await service.create(_apply(posting.id), student)

    async def test_teacher_cannot_apply(self, service, db_session, teacher, other_teacher):
        posting = await create_posting(db_session, teacher)

        with pytest.raises(Forbidden):
            await service.create(_apply(posting.id), other_teacher)

    async def test_duplicate(self, service, db_session, teacher, student):
        posting = await create_posting(db_session, teacher)
        await service.create(_apply(posting.id), student)

        with pytest.raises(DuplicateApplication):
            await service.create(_apply(posting.id), student)

    async def test_resume_must_be_own_upload(
        self, service, db_session, attachments, teacher, student, other_student
    ):
        posting = await create_posting(db_session, teacher)

        with pytest.raises(Forbidden):
            await service.create(
                _apply(posting.id, resume_url=resume_url_for(other_student.id)), student
            )

        resume = await attachments.upload(
            student, AttachmentKind.RESUME, "cv.pdf", PDF_CONTENT_TYPE, PDF_BYTES
        )
        application = await service.create(_apply(posting.id, resume_url=resume.url), student)
        assert application.resume_url == resume.url


class TestList:
    async def test_visibility_by_role(
        self, service, db_session, teacher, other_teacher, student, other_student, admin
    ):
        mine = await create_posting(db_session, teacher)
        theirs = await create_posting(db_session, other_teacher)
        a1 = await create_application(db_session, student, mine)
        a2 = await create_application(db_session, other_student, mine)
        a3 = await create_application(db_session, student, theirs)

        assert {a.id for a in await service.list(student)} == {a1.id, a3.id}
        assert {a.id for a in await service.list(teacher)} == {a1.id, a2.id}
        assert {a.id for a in await service.list(admin)} == {a1.id, a2.id, a3.id}

    async def test_filters_never_widen_visibility(
        self, service, db_session, teacher, student, other_student
    ):
        posting = await create_posting(db_session, teacher)
        await create_application(db_session, other_student, posting)

        assert await service.list(student, student_id=other_student.id) == []
        assert await service.list(student, project_id=posting.id) == []

    async def test_newest_first_with_status_filter(self, service, db_session, teacher, student):
        now = utc_now()
        p1 = await create_posting(db_session, teacher)
        p2 = await create_posting(db_session, teacher)
        p3 = await create_posting(db_session, teacher)
        old = await create_application(
            db_session, student, p1, applied_at=now - timedelta(hours=2)
        )
        new = await create_application(
            db_session, student, p2, applied_at=now - timedelta(hours=1)
        )
        await create_application(db_session, student, p3, status="accepted")

        pending = await service.list(teacher, status="pending")

        assert [a.id for a in pending] == [new.id, old.id]

    async def test_unknown_status(self, service, teacher):
        with pytest.raises(ValidationFailed):
            await service.list(teacher, status="waitlisted")


class TestDecide:
    async def test_owner_accepts(self, service, db_session, teacher, student):
        posting = await create_posting(db_session, teacher)
        application = await create_application(db_session, student, posting)

        decided = await service.update_status(application.id, "accepted", teacher)

        assert decided.status == ApplicationStatus.ACCEPTED.value
        assert decided.updated_at >= application.applied_at

    @pytest.mark.parametrize("status", ["pending", "withdrawn", "ACCEPTED"])
    async def test_only_accept_or_reject(self, service, db_session, teacher, student, status):
        posting = await create_posting(db_session, teacher)
        application = await create_application(db_session, student, posting)

        with pytest.raises(ValidationFailed):
            await service.update_status(application.id, status, teacher)

    async def test_decision_is_terminal(self, service, db_session, teacher, student):
        posting = await create_posting(db_session, teacher)
        application = await create_application(db_session, student, posting)
        await service.update_status(application.id, "rejected", teacher)

        with pytest.raises(Conflict):
            await service.update_status(application.id, "accepted", teacher)

    async def test_non_owner_cannot_decide(
        self, service, db_session, teacher, other_teacher, student, admin
    ):
        posting = await create_posting(db_session, teacher)
        application = await create_application(db_session, student, posting)

        for caller in (other_teacher, student, admin):
            with pytest.raises(Forbidden):
                await service.update_status(application.id, "accepted", caller)


class TestWithdrawAndResume:
    async def test_withdraw_removes_row_and_resume(
        self, service, db_session, attachments, object_store, teacher, student
    ):
        resume = await attachments.upload(
            student, AttachmentKind.RESUME, "cv.pdf", PDF_CONTENT_TYPE, PDF_BYTES
        )
        posting = await create_posting(db_session, teacher)
        application = await create_application(db_session, student, posting, resume_url=resume.url)

        await service.delete(application.id, student)

        assert await ApplicationRepository(db_session).find() == []
        assert object_store.objects == {}

    async def test_only_applicant_withdraws(self, service, db_session, teacher, student):
        posting = await create_posting(db_session, teacher)
        application = await create_application(db_session, student, posting)

        with pytest.raises(Forbidden):
            await service.delete(application.id, teacher)

    async def test_owner_downloads_resume(
        self, service, db_session, attachments, teacher, student
    ):
        resume = await attachments.upload(
            student, AttachmentKind.RESUME, "cv.pdf", PDF_CONTENT_TYPE, PDF_BYTES
        )
        posting = await create_posting(db_session, teacher)
        application = await create_application(db_session, student, posting, resume_url=resume.url)

        file_name, data = await service.download_resume(application.id, teacher)

        assert file_name == resume.file_name
        assert data == PDF_BYTES

    async def test_no_resume(self, service, db_session, teacher, student):
        posting = await create_posting(db_session, teacher)
        application = await create_application(db_session, student, posting)

        with pytest.raises(NotFound, match="No resume"):
            await service.download_resume(application.id, teacher)

    async def test_applicant_cannot_download(self, service, db_session, teacher, student):
        posting = await create_posting(db_session, teacher)
        application = await create_application(
            db_session, student, posting, resume_url=resume_url_for(student.id)
        )

        with pytest.raises(Forbidden):
            await service.download_resume(application.id, student)
