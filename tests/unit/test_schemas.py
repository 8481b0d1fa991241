"""Tests for request schema validation."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from src.research_hub.schemas.application import ApplicationCreate
from src.research_hub.schemas.auth import CompleteSetupRequest, LoginRequest, SignUpRequest
from src.research_hub.schemas.posting import PostingCreate, PostingUpdate
from src.research_hub.schemas.user import ProfileUpdate

pytestmark = pytest.mark.unit

STRONG_PASSWORD = "Str0ng-Research-Passphrase!"


class TestSignUp:
    def test_defaults_to_student(self):
        data = SignUpRequest(
            email="s@iiitkottayam.ac.in", password=STRONG_PASSWORD, name="  Asha  "
        )
        assert data.role == "student"
        assert data.name == "Asha"

    def test_admin_is_not_self_assignable(self):
        with pytest.raises(ValidationError) as exc_info:
            SignUpRequest(
                email="s@iiitkottayam.ac.in",
                password=STRONG_PASSWORD,
                name="Asha",
                role="admin",
            )
        assert exc_info.value.errors()[0]["loc"] == ("role",)

    def test_weak_password_rejected(self):
        with pytest.raises(ValidationError, match="Weak password|too weak"):
            SignUpRequest(email="s@iiitkottayam.ac.in", password="password1", name="Asha")

    def test_whitespace_name_rejected(self):
        with pytest.raises(ValidationError):
            SignUpRequest(email="s@iiitkottayam.ac.in", password=STRONG_PASSWORD, name="   ")


class TestLogin:
    def test_email_or_username(self):
        assert LoginRequest(email="s@iiitkottayam.ac.in", password="x").username is None
        assert LoginRequest(username="asha", password="x").email is None

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"password": "x"},
            {"email": "s@iiitkottayam.ac.in", "username": "asha", "password": "x"},
        ],
    )
    def test_exactly_one_identifier(self, kwargs):
        with pytest.raises(ValidationError, match="exactly one"):
            LoginRequest(**kwargs)


class TestCompleteSetup:
    def test_teacher_needs_department(self):
        with pytest.raises(ValidationError, match="Department is required"):
            CompleteSetupRequest(username="prof_rao", password=STRONG_PASSWORD, role="teacher")

    def test_student_without_department(self):
        data = CompleteSetupRequest(username="asha_k", password=STRONG_PASSWORD, role="student")
        assert data.department is None

    def test_invalid_username(self):
        with pytest.raises(ValidationError, match="Username must be"):
            CompleteSetupRequest(username="asha k", password=STRONG_PASSWORD, role="student")


class TestPostingSchemas:
    def test_lists_are_cleaned(self):
        data = PostingCreate(
            title=" Title ",
            description="Body",
            requirements=[" Python ", "", "  "],
            tags=["ml", " "],
        )
        assert data.title == "Title"
        assert data.requirements == ["Python"]
        assert data.tags == ["ml"]
        assert data.status == "draft"

    @pytest.mark.parametrize("status", ["open", "ACTIVE", "archived"])
    def test_unknown_status_rejected(self, status):
        with pytest.raises(ValidationError):
            PostingCreate(title="T", description="D", status=status)

    def test_max_students_must_be_positive(self):
        with pytest.raises(ValidationError):
            PostingCreate(title="T", description="D", max_students=0)

    def test_update_tracks_only_sent_fields(self):
        data = PostingUpdate(status="closed")
        assert data.model_dump(exclude_unset=True) == {"status": "closed"}


class TestApplicationAndProfileSchemas:
    def test_blank_cover_letter_rejected(self):
        with pytest.raises(ValidationError):
            ApplicationCreate(project_id=uuid4(), cover_letter="   ")

    def test_gpa_range(self):
        assert ProfileUpdate(gpa=9.1).gpa == 9.1
        with pytest.raises(ValidationError):
            ProfileUpdate(gpa=11)
