"""Test doubles and helper functions for common data creation patterns."""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.research_hub.core.security import create_access_token
from src.research_hub.models import Application, Posting, UserProfile
from src.research_hub.services.oauth_client import OAuthExchangeError, OAuthIdentity
from src.research_hub.storage import ObjectNotFoundError, StorageError
from tests.factories import ApplicationFactory, PostingFactory

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n"


class InMemoryObjectStore:
    """ObjectStore that keeps objects in a dict keyed by (bucket, key)."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.content_types: dict[tuple[str, str], str] = {}
        self.deleted: list[tuple[str, str]] = []
        self.fail_puts = False
        self.fail_deletes = False

    async def put(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        if self.fail_puts:
            raise StorageError("put refused")
        self.objects[(bucket, key)] = data
        self.content_types[(bucket, key)] = content_type

    async def get(self, bucket: str, key: str) -> bytes:
        try:
            return self.objects[(bucket, key)]
        except KeyError as e:
            raise ObjectNotFoundError(key) from e

    async def delete(self, bucket: str, key: str) -> None:
        if self.fail_deletes:
            raise StorageError("delete refused")
        self.objects.pop((bucket, key), None)
        self.deleted.append((bucket, key))


class StubOAuthClient:
    """Stands in for OAuthClient. Configure `identity` or `error` per test."""

    def __init__(self) -> None:
        self.identity: OAuthIdentity | None = None
        self.error: str | None = None
        self.codes: list[str] = []

    async def exchange_code(self, code: str) -> OAuthIdentity:
        self.codes.append(code)
        if self.error is not None:
            raise OAuthExchangeError(self.error)
        if self.identity is None:
            raise OAuthExchangeError("No identity configured")
        return self.identity


def auth_headers(profile: UserProfile) -> dict[str, str]:
    """Bearer header for a profile, as the frontend would send it."""
    return {"Authorization": f"Bearer {create_access_token(profile.id, profile.email)}"}


async def save(session: AsyncSession, *entities: Any) -> None:
    """Persist entities and commit."""
    session.add_all(entities)
    await session.commit()
    for entity in entities:
        await session.refresh(entity)


async def create_posting(
    session: AsyncSession, author: UserProfile, **posting_kwargs: Any
) -> Posting:
    """Create a posting owned by `author`.

    Args:
        session: Database session
        author: Teacher profile stamped as the owner
        **posting_kwargs: Additional args passed to PostingFactory

    Returns:
        Created posting (committed)
    """
    posting = PostingFactory.build(
        author_id=author.id,
        author_email=author.email,
        author_name=author.name,
        **posting_kwargs,
    )
    await save(session, posting)
    return posting


async def create_application(
    session: AsyncSession,
    student: UserProfile,
    posting: Posting,
    **application_kwargs: Any,
) -> Application:
    """Create an application by `student` against `posting` with a filled snapshot."""
    application = ApplicationFactory.build(
        student_id=student.id,
        student_email=student.email,
        student_name=student.name,
        project_id=posting.id,
        project_title=posting.title,
        teacher_id=posting.author_id,
        teacher_email=posting.author_email,
        **application_kwargs,
    )
    await save(session, application)
    return application


def resume_url_for(owner_id: UUID, name: str = "cv.pdf", base: str = "http://localhost:9000") -> str:
    """A resume URL inside the owner's prefix, matching what uploads return."""
    return f"{base}/resumes/{owner_id}/resume-1700000000000-{name}"


def document_url_for(
    owner_id: UUID, name: str = "brief.pdf", base: str = "http://localhost:9000"
) -> str:
    return f"{base}/documents/{owner_id}/1700000000000-{name}"
