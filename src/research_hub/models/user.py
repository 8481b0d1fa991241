"""User profile model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.research_hub.models.base import utc_now
from src.research_hub.models.enums import Role


class UserProfile(SQLModel, table=True):
    """Local profile keyed 1:1 to an authenticated principal.

    Profiles that arrive through OAuth have no username or password until
    the one-time setup flow assigns them.
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    username: str | None = Field(default=None, max_length=50, unique=True, index=True)
    hashed_password: str | None = Field(default=None, max_length=255)
    role: str = Field(default=Role.STUDENT.value, max_length=20)
    name: str = Field(max_length=100)
    department: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=30)
    year: str | None = Field(default=None, max_length=20)
    gpa: float | None = Field(default=None)
    auth_provider: str | None = Field(default=None, max_length=50)
    email_verified: bool = Field(default=False)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def role_enum(self) -> Role:
        return Role(self.role)

    @property
    def needs_setup(self) -> bool:
        """True until the profile has both a username and a display name."""
        return not self.username or not self.name
