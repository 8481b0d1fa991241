from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ProfileRead(BaseModel):
    id: UUID
    email: str
    username: str | None
    role: str
    name: str
    department: str | None
    phone: str | None
    year: str | None
    gpa: float | None
    email_verified: bool
    needs_setup: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    department: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=30)
    year: str | None = Field(None, max_length=20)
    gpa: float | None = Field(None, ge=0, le=10)
