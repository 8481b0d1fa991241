"""Repository for Application entity."""

from uuid import UUID

from sqlalchemy import delete
from sqlmodel import col, select

from src.research_hub.models import Application
from src.research_hub.repositories.base import BaseRepository


class ApplicationRepository(BaseRepository[Application]):
    """Repository for Application entity."""

    model = Application

    async def find(
        self,
        project_id: UUID | None = None,
        student_id: UUID | None = None,
        teacher_id: UUID | None = None,
        status: str | None = None,
    ) -> list[Application]:
        """List applications matching every given filter, newest first."""
        query = select(Application)
        if project_id is not None:
            query = query.where(Application.project_id == project_id)
        if student_id is not None:
            query = query.where(Application.student_id == student_id)
        if teacher_id is not None:
            query = query.where(Application.teacher_id == teacher_id)
        if status is not None:
            query = query.where(Application.status == status)
        query = query.order_by(col(Application.applied_at).desc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def exists_for(self, student_id: UUID, project_id: UUID) -> bool:
        """Check whether the student already applied to the posting."""
        result = await self.session.execute(
            select(Application.id).where(
                Application.student_id == student_id,
                Application.project_id == project_id,
            )
        )
        return result.first() is not None

    async def list_by_project(self, project_id: UUID) -> list[Application]:
        return await self.find(project_id=project_id)

    async def delete_by_project(self, project_id: UUID) -> int:
        """Delete every application for a posting. Returns the row count."""
        result = await self.session.execute(
            delete(Application).where(col(Application.project_id) == project_id)
        )
        return result.rowcount or 0  # type: ignore[attr-defined]
