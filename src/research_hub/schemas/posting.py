"""Posting schemas for API request/response."""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

PostingStatusValue = Literal["draft", "active", "closed"]


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Value cannot be empty or whitespace only")
    return v


def _clean_list(v: list[str]) -> list[str]:
    return [item.strip() for item in v if item.strip()]


class PostingCreate(BaseModel):
    """Schema for creating a posting. Owner fields come from the caller."""

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    requirements: list[str] = Field(default_factory=list)
    duration: str = Field(default="", max_length=100)
    location: str = Field(default="", max_length=200)
    max_students: int = Field(default=1, ge=1)
    status: PostingStatusValue = "draft"
    department: str | None = Field(default=None, max_length=100)
    deadline: date | None = None
    stipend: str | None = Field(default=None, max_length=100)
    outcome: str | None = None
    document_url: str | None = Field(default=None, max_length=1000)
    tags: list[str] = Field(default_factory=list)

    @field_validator("title", "description")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("requirements", "tags")
    @classmethod
    def validate_list(cls, v: list[str]) -> list[str]:
        return _clean_list(v)


class PostingUpdate(BaseModel):
    """Partial update. Only fields present in the request are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1)
    requirements: list[str] | None = None
    duration: str | None = Field(default=None, max_length=100)
    location: str | None = Field(default=None, max_length=200)
    max_students: int | None = Field(default=None, ge=1)
    status: PostingStatusValue | None = None
    department: str | None = Field(default=None, max_length=100)
    deadline: date | None = None
    stipend: str | None = Field(default=None, max_length=100)
    outcome: str | None = None
    document_url: str | None = Field(default=None, max_length=1000)
    tags: list[str] | None = None

    @field_validator("title", "description")
    @classmethod
    def validate_text(cls, v: str | None) -> str | None:
        return _strip_required(v) if v is not None else None

    @field_validator("requirements", "tags")
    @classmethod
    def validate_list(cls, v: list[str] | None) -> list[str] | None:
        return _clean_list(v) if v is not None else None


class PostingRead(BaseModel):
    """Schema for reading a posting."""

    id: UUID
    title: str
    description: str
    requirements: list[str]
    duration: str
    location: str
    max_students: int
    status: str
    author_id: UUID
    author_email: str
    author_name: str
    department: str
    deadline: date | None
    stipend: str | None
    outcome: str | None
    document_url: str | None
    views: int
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
