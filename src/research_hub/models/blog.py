"""Blog post model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.research_hub.models.base import json_list_column, utc_now


class BlogPost(SQLModel, table=True):
    __tablename__ = "blog_posts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=200)
    content: str
    excerpt: str = Field(default="", max_length=500)
    author_id: UUID = Field(foreign_key="users.id", index=True)
    author_email: str = Field(max_length=255, index=True)
    author_name: str = Field(max_length=100)
    tags: list[str] = Field(default_factory=list, sa_column=json_list_column())
    published: bool = Field(default=False, index=True)
    read_time: int = Field(default=1, ge=1)
    pdf_url: str | None = Field(default=None, max_length=1000)
    views: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)
