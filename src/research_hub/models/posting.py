"""Posting model - a teacher-authored research opportunity."""

from datetime import date, datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.research_hub.models.base import json_list_column, utc_now
from src.research_hub.models.enums import PostingStatus


class Posting(SQLModel, table=True):
    """Research project, hackathon or conference posting.

    The author columns are stamped at creation and never updated.
    """

    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=200, index=True)
    description: str
    requirements: list[str] = Field(default_factory=list, sa_column=json_list_column())
    duration: str = Field(default="", max_length=100)
    location: str = Field(default="", max_length=200)
    max_students: int = Field(default=1, ge=1)
    status: str = Field(default=PostingStatus.DRAFT.value, max_length=20, index=True)
    author_id: UUID = Field(foreign_key="users.id", index=True)
    author_email: str = Field(max_length=255, index=True)
    author_name: str = Field(max_length=100)
    department: str = Field(default="Unknown", max_length=100)
    deadline: date | None = Field(default=None)
    stipend: str | None = Field(default=None, max_length=100)
    outcome: str | None = Field(default=None)
    document_url: str | None = Field(default=None, max_length=1000)
    views: int = Field(default=0, ge=0)
    tags: list[str] = Field(default_factory=list, sa_column=json_list_column())
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def status_enum(self) -> PostingStatus:
        return PostingStatus(self.status)

    @property
    def accepts_applications(self) -> bool:
        return self.status == PostingStatus.ACTIVE.value
