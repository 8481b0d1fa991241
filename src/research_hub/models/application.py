"""Application model - a student's submission against a posting."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from src.research_hub.models.base import json_list_column, utc_now
from src.research_hub.models.enums import ApplicationStatus


class Application(SQLModel, table=True):
    """Student application.

    The student_*, project_title and teacher_* columns are a point-in-time
    snapshot taken at submission. They are never resynchronised from the
    profile or posting.
    """

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("student_id", "project_id", name="uq_applications_student_project"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    student_id: UUID = Field(foreign_key="users.id", index=True)
    student_email: str = Field(max_length=255)
    student_name: str = Field(max_length=100)
    student_phone: str = Field(default="", max_length=30)
    student_year: str = Field(default="", max_length=20)
    student_gpa: float = Field(default=0)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    project_title: str = Field(max_length=200)
    teacher_id: UUID = Field(index=True)
    teacher_email: str = Field(max_length=255)
    cover_letter: str
    skills: list[str] = Field(default_factory=list, sa_column=json_list_column())
    resume_url: str | None = Field(default=None, max_length=1000)
    status: str = Field(default=ApplicationStatus.PENDING.value, max_length=20, index=True)
    applied_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def status_enum(self) -> ApplicationStatus:
        return ApplicationStatus(self.status)
