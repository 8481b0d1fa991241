"""Application schemas for API request/response."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class ApplicationCreate(BaseModel):
    project_id: UUID
    cover_letter: str = Field(min_length=1)
    skills: list[str] = Field(default_factory=list)
    resume_url: str | None = Field(default=None, max_length=1000)

    @field_validator("cover_letter")
    @classmethod
    def validate_cover_letter(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Cover letter cannot be empty or whitespace only")
        return v

    @field_validator("skills")
    @classmethod
    def validate_skills(cls, v: list[str]) -> list[str]:
        return [s.strip() for s in v if s.strip()]


class ApplicationStatusUpdate(BaseModel):
    # Anything else, including "pending", is rejected by the service
    status: str = Field(min_length=1, max_length=20)


class ApplicationRead(BaseModel):
    id: UUID
    student_id: UUID
    student_email: str
    student_name: str
    student_phone: str
    student_year: str
    student_gpa: float
    project_id: UUID
    project_title: str
    teacher_id: UUID
    teacher_email: str
    cover_letter: str
    skills: list[str]
    resume_url: str | None
    status: str
    applied_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


ApplicationStatusFilter = Literal["pending", "accepted", "rejected"]
