"""Blog post schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class BlogPostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    excerpt: str = Field(default="", max_length=500)
    tags: list[str] = Field(default_factory=list)
    published: bool = False
    pdf_url: str | None = Field(default=None, max_length=1000)

    @field_validator("title", "content")
    @classmethod
    def validate_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be empty or whitespace only")
        return v


class BlogPostUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = Field(default=None, min_length=1)
    excerpt: str | None = Field(default=None, max_length=500)
    tags: list[str] | None = None
    published: bool | None = None
    pdf_url: str | None = Field(default=None, max_length=1000)


class BlogPostRead(BaseModel):
    id: UUID
    title: str
    content: str
    excerpt: str
    author_id: UUID
    author_email: str
    author_name: str
    tags: list[str]
    published: bool
    read_time: int
    pdf_url: str | None
    views: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
