"""Integration tests for IdentityService: credentials, tokens, OAuth and setup."""

from datetime import timedelta
from urllib.parse import parse_qs, urlsplit
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.research_hub.core.exceptions import (
    Conflict,
    DomainRejected,
    Unauthenticated,
    ValidationFailed,
)
from src.research_hub.core.security import create_access_token, decode_token, hash_token
from src.research_hub.models import Role, UserProfile
from src.research_hub.repositories import RefreshTokenRepository, UserRepository
from src.research_hub.schemas.auth import CompleteSetupRequest, LoginRequest, SignUpRequest
from src.research_hub.schemas.user import ProfileUpdate
from src.research_hub.services.identity_service import IdentityService
from src.research_hub.services.oauth_client import OAuthIdentity
from tests.factories import DEFAULT_TEST_PASSWORD, UserProfileFactory
from tests.helpers import StubOAuthClient, save

pytestmark = pytest.mark.integration

APP_URL = "http://localhost:3000"


@pytest.fixture
def service(db_session: AsyncSession, oauth_client: StubOAuthClient) -> IdentityService:
    return IdentityService(
        UserRepository(db_session),
        RefreshTokenRepository(db_session),
        db_session,
        oauth_client,  # type: ignore[arg-type]
    )


def _signup(**overrides) -> SignUpRequest:
    data = {
        "email": "new.student@iiitkottayam.ac.in",
        "password": DEFAULT_TEST_PASSWORD,
        "name": "New Student",
    }
    data.update(overrides)
    return SignUpRequest(**data)


def _fragment(url: str) -> dict[str, str]:
    return {k: v[0] for k, v in parse_qs(urlsplit(url).fragment).items()}


class TestSignUp:
    async def test_creates_profile_and_tokens(self, service, db_session):
        profile, tokens = await service.sign_up(_signup(username="new_student"))

        assert profile.role == Role.STUDENT.value
        assert profile.auth_provider == "password"
        assert not profile.needs_setup
        payload = decode_token(tokens.access_token)
        assert payload is not None and payload["sub"] == str(profile.id)

        stored = await RefreshTokenRepository(db_session).get_valid_by_hash(
            hash_token(tokens.refresh_token)
        )
        assert stored is not None and stored.user_id == profile.id

    async def test_email_is_normalized(self, service):
        profile, _ = await service.sign_up(_signup(email="Mixed.Case@IIITKottayam.ac.in"))
        assert profile.email == "mixed.case@iiitkottayam.ac.in"

    async def test_foreign_domain_rejected_without_profile(self, service, db_session):
        with pytest.raises(DomainRejected) as exc_info:
            await service.sign_up(_signup(email="someone@gmail.com"))

        assert exc_info.value.field == "email"
        assert await UserRepository(db_session).get_by_email("someone@gmail.com") is None

    async def test_duplicate_email(self, service, student):
        with pytest.raises(Conflict, match="Email already registered"):
            await service.sign_up(_signup(email=student.email))

    async def test_duplicate_username(self, service, student):
        with pytest.raises(Conflict, match="Username already taken"):
            await service.sign_up(_signup(username=student.username))

    async def test_teacher_needs_department(self, service):
        with pytest.raises(ValidationFailed, match="Department is required"):
            await service.sign_up(_signup(role="teacher"))


class TestSignIn:
    async def test_by_email(self, service, student):
        tokens = await service.sign_in(
            LoginRequest(email=student.email, password=DEFAULT_TEST_PASSWORD)
        )
        assert decode_token(tokens.access_token)["sub"] == str(student.id)  # type: ignore[index]

    async def test_by_username(self, service, student):
        tokens = await service.sign_in(
            LoginRequest(username=student.username, password=DEFAULT_TEST_PASSWORD)
        )
        assert tokens.token_type == "bearer"

    @pytest.mark.parametrize(
        ("email", "password"),
        [
            ("nobody@iiitkottayam.ac.in", DEFAULT_TEST_PASSWORD),
            (None, "wrong-password"),
        ],
    )
    async def test_bad_credentials_look_the_same(self, service, student, email, password):
        with pytest.raises(Unauthenticated, match="Invalid credentials"):
            await service.sign_in(LoginRequest(email=email or student.email, password=password))

    async def test_missing_identifier_is_rejected(self, service):
        # Bypasses the request schema, which requires email or username
        data = LoginRequest.model_construct(email=None, username=None, password="whatever")

        with pytest.raises(Unauthenticated, match="Invalid credentials"):
            await service.sign_in(data)

    async def test_foreign_domain_rejected(self, service):
        with pytest.raises(DomainRejected):
            await service.sign_in(LoginRequest(email="a@gmail.com", password="whatever"))

    async def test_oauth_profile_without_password(self, service, db_session):
        profile = UserProfileFactory.oauth_pending_setup()
        await save(db_session, profile)

        with pytest.raises(Unauthenticated):
            await service.sign_in(LoginRequest(email=profile.email, password="anything"))

    async def test_inactive_profile(self, service, db_session):
        profile = UserProfileFactory.inactive()
        await save(db_session, profile)

        with pytest.raises(Unauthenticated):
            await service.sign_in(
                LoginRequest(email=profile.email, password=DEFAULT_TEST_PASSWORD)
            )


class TestResolve:
    async def test_valid_token(self, service, teacher):
        profile = await service.resolve(create_access_token(teacher.id, teacher.email))
        assert profile.id == teacher.id
        assert profile.role == Role.TEACHER.value

    @pytest.mark.parametrize("bearer", [None, "", "not-a-jwt"])
    async def test_missing_or_garbage(self, service, bearer):
        with pytest.raises(Unauthenticated):
            await service.resolve(bearer)

    async def test_expired_token(self, service, student):
        token = create_access_token(student.id, student.email, timedelta(seconds=-5))
        with pytest.raises(Unauthenticated, match="expired"):
            await service.resolve(token)

    async def test_refresh_token_is_not_a_bearer(self, service):
        _, tokens = await service.sign_up(_signup())
        with pytest.raises(Unauthenticated, match="token type"):
            await service.resolve(tokens.refresh_token)

    async def test_unknown_profile(self, service):
        with pytest.raises(Unauthenticated):
            await service.resolve(create_access_token(uuid4(), "ghost@iiitkottayam.ac.in"))

    async def test_role_comes_from_profile_not_token(self, service, db_session, student):
        token = create_access_token(student.id, student.email)
        student.role = Role.TEACHER.value
        await db_session.commit()

        assert (await service.resolve(token)).role == Role.TEACHER.value


class TestRefreshAndLogout:
    async def test_rotation_revokes_presented_token(self, service):
        _, tokens = await service.sign_up(_signup())

        rotated = await service.refresh(tokens.refresh_token)

        assert rotated.refresh_token != tokens.refresh_token
        with pytest.raises(Unauthenticated):
            await service.refresh(tokens.refresh_token)
        await service.refresh(rotated.refresh_token)

    async def test_access_token_cannot_refresh(self, service):
        _, tokens = await service.sign_up(_signup())
        with pytest.raises(Unauthenticated):
            await service.refresh(tokens.access_token)

    async def test_logout(self, service):
        _, tokens = await service.sign_up(_signup())

        assert await service.logout(tokens.refresh_token) is True
        assert await service.logout("unknown") is False
        with pytest.raises(Unauthenticated):
            await service.refresh(tokens.refresh_token)


class TestCompleteOAuth:
    def _identity(self, email: str = "fresh@iiitkottayam.ac.in", **metadata) -> OAuthIdentity:
        return OAuthIdentity(
            subject="6f1c1f5e-2a8e-4d4b-9a55-0f1d1c2b3a4e",
            email=email,
            provider="google",
            metadata=metadata,
        )

    async def test_provider_error(self, service):
        url = await service.complete_oauth(
            None, error="access_denied", error_description="User cancelled"
        )
        assert url.startswith(f"{APP_URL}/login?")
        assert parse_qs(urlsplit(url).query) == {
            "error": ["oauth_error"],
            "details": ["User cancelled"],
        }

    async def test_missing_code(self, service):
        url = await service.complete_oauth(None)
        assert url == f"{APP_URL}/login?error=no_code"

    async def test_exchange_failure(self, service, oauth_client):
        oauth_client.error = "invalid flow state"

        url = await service.complete_oauth("abc")

        assert parse_qs(urlsplit(url).query)["error"] == ["auth_failed"]
        assert oauth_client.codes == ["abc"]

    async def test_foreign_domain_creates_nothing(self, service, oauth_client, db_session):
        oauth_client.identity = self._identity(email="someone@gmail.com")

        url = await service.complete_oauth("abc")

        assert url == f"{APP_URL}/login?error=invalid_domain"
        assert await UserRepository(db_session).get_by_email("someone@gmail.com") is None

    async def test_first_arrival_goes_to_setup(self, service, oauth_client, db_session):
        oauth_client.identity = self._identity(full_name="Fresh Face", role="teacher")

        url = await service.complete_oauth("abc")

        assert urlsplit(url).path == "/auth/setup"
        profile = await UserRepository(db_session).get_by_email("fresh@iiitkottayam.ac.in")
        assert profile is not None
        assert profile.id == UUID("6f1c1f5e-2a8e-4d4b-9a55-0f1d1c2b3a4e")
        assert profile.name == "Fresh Face"
        assert profile.role == Role.TEACHER.value
        assert profile.needs_setup

        tokens = _fragment(url)
        assert tokens["token_type"] == "bearer"
        assert decode_token(tokens["access_token"])["sub"] == str(profile.id)  # type: ignore[index]

    async def test_metadata_cannot_grant_admin(self, service, oauth_client, db_session):
        oauth_client.identity = self._identity(role="admin")

        await service.complete_oauth("abc")

        profile = await UserRepository(db_session).get_by_email("fresh@iiitkottayam.ac.in")
        assert profile is not None and profile.role == Role.STUDENT.value

    async def test_returning_teacher_lands_on_dashboard(self, service, oauth_client, teacher):
        oauth_client.identity = self._identity(email=teacher.email)

        url = await service.complete_oauth("abc")

        assert url.startswith(f"{APP_URL}/teacher#")

    async def test_returning_student_lands_on_projects(self, service, oauth_client, student):
        oauth_client.identity = self._identity(email=student.email)

        url = await service.complete_oauth("abc")

        assert url.startswith(f"{APP_URL}/projects#")

    async def test_local_next_path_is_honoured(self, service, oauth_client, student):
        oauth_client.identity = self._identity(email=student.email)

        url = await service.complete_oauth("abc", next_path="/projects/42?tab=apply")

        assert url.startswith(f"{APP_URL}/projects/42?tab=apply#")

    @pytest.mark.parametrize("next_path", ["//evil.example", "https://evil.example", "/\\evil"])
    async def test_external_next_path_is_ignored(self, service, oauth_client, student, next_path):
        oauth_client.identity = self._identity(email=student.email)

        url = await service.complete_oauth("abc", next_path=next_path)

        assert url.startswith(f"{APP_URL}/projects#")

    async def test_disabled_account(self, service, oauth_client, db_session):
        profile = UserProfileFactory.inactive()
        await save(db_session, profile)
        oauth_client.identity = self._identity(email=profile.email)

        url = await service.complete_oauth("abc")

        assert parse_qs(urlsplit(url).query)["error"] == ["auth_failed"]


class TestSetupAndProfile:
    async def test_complete_setup(self, service, db_session):
        profile = UserProfileFactory.oauth_pending_setup()
        await save(db_session, profile)

        updated = await service.complete_setup(
            profile,
            CompleteSetupRequest(
                username="prof_rao",
                password=DEFAULT_TEST_PASSWORD,
                role="teacher",
                department="Electronics",
            ),
        )

        assert updated.username == "prof_rao"
        assert updated.role == Role.TEACHER.value
        assert updated.department == "Electronics"
        assert not updated.needs_setup
        tokens = await service.sign_in(
            LoginRequest(username="prof_rao", password=DEFAULT_TEST_PASSWORD)
        )
        assert tokens.access_token

    async def test_setup_is_one_time(self, service, student):
        with pytest.raises(Conflict, match="already been completed"):
            await service.complete_setup(
                student,
                CompleteSetupRequest(
                    username="another_name", password=DEFAULT_TEST_PASSWORD, role="student"
                ),
            )

    async def test_setup_username_taken(self, service, db_session, student):
        profile = UserProfileFactory.oauth_pending_setup()
        await save(db_session, profile)

        with pytest.raises(Conflict, match="Username already taken"):
            await service.complete_setup(
                profile,
                CompleteSetupRequest(
                    username=student.username, password=DEFAULT_TEST_PASSWORD, role="student"
                ),
            )

    async def test_update_profile(self, service, student: UserProfile):
        updated = await service.update_profile(
            student, ProfileUpdate(phone="+91 98765 43210", gpa=9.2)
        )
        assert updated.phone == "+91 98765 43210"
        assert updated.gpa == 9.2
        assert updated.name == student.name

    async def test_name_cannot_be_cleared(self, service, student):
        with pytest.raises(ValidationFailed):
            await service.update_profile(student, ProfileUpdate(name=None))
