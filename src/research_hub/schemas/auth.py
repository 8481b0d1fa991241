from typing import Literal, Self

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from zxcvbn import zxcvbn

from src.research_hub.core.security import validate_username_format
from src.research_hub.schemas.user import ProfileRead

# Minimum zxcvbn score (0-4 scale): 3 = "safely unguessable"
MIN_PASSWORD_SCORE = 3

# Admin is never self-assigned
SelfAssignableRole = Literal["student", "teacher"]


def check_password_strength(v: str) -> str:
    """Validate password strength using zxcvbn entropy estimation."""
    result = zxcvbn(v)
    score = result["score"]  # 0-4 scale

    if score < MIN_PASSWORD_SCORE:
        feedback = result.get("feedback", {})
        warning = feedback.get("warning", "")
        suggestions = feedback.get("suggestions", [])

        if warning:
            raise ValueError(f"Weak password: {warning}")
        elif suggestions:
            raise ValueError(f"Weak password: {suggestions[0]}")
        else:
            raise ValueError(
                "Password is too weak. Use a longer password with a mix of characters."
            )

    return v


class LoginRequest(BaseModel):
    """Sign in with either an email address or a username."""

    email: EmailStr | None = None
    username: str | None = Field(default=None, max_length=50)
    password: str = Field(min_length=1, max_length=100)

    @model_validator(mode="after")
    def require_identifier(self) -> Self:
        if (self.email is None) == (self.username is None):
            raise ValueError("Provide exactly one of email or username")
        return self


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    refresh_token: str


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=100)
    name: str = Field(min_length=1, max_length=100)
    role: SelfAssignableRole = "student"
    department: str | None = Field(default=None, max_length=100)
    username: str | None = Field(default=None, max_length=50)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        return check_password_strength(v)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str | None) -> str | None:
        return validate_username_format(v) if v is not None else None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty or whitespace only")
        return v


class SignUpResponse(TokenPair):
    profile: ProfileRead


class CompleteSetupRequest(BaseModel):
    """One-time setup for profiles created through OAuth."""

    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=8, max_length=100)
    role: SelfAssignableRole
    department: str | None = Field(default=None, max_length=100)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return validate_username_format(v)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        return check_password_strength(v)

    @model_validator(mode="after")
    def require_teacher_department(self) -> Self:
        if self.role == "teacher" and not (self.department and self.department.strip()):
            raise ValueError("Department is required for teachers")
        return self
