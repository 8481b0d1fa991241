"""Identity service - credentials, tokens, OAuth completion and profiles.

Only addresses under the institutional domain may hold a profile. The domain
is checked before any credential or profile work at sign-up, password
sign-in and OAuth completion.
"""

import hmac
from urllib.parse import urlencode
from uuid import UUID, uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.research_hub.core.config import get_settings
from src.research_hub.core.exceptions import (
    Conflict,
    DomainRejected,
    Unauthenticated,
    ValidationFailed,
)
from src.research_hub.core.logging import get_logger
from src.research_hub.core.security import (
    DUMMY_PASSWORD_HASH,
    TokenType,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    hash_token,
    is_institutional_email,
    verify_password,
)
from src.research_hub.models import RefreshToken, Role, UserProfile
from src.research_hub.models.base import utc_now
from src.research_hub.repositories import RefreshTokenRepository, UserRepository
from src.research_hub.schemas.auth import (
    CompleteSetupRequest,
    LoginRequest,
    SignUpRequest,
    TokenPair,
)
from src.research_hub.schemas.user import ProfileUpdate
from src.research_hub.services.oauth_client import OAuthClient, OAuthExchangeError

logger = get_logger(__name__)


class IdentityService:
    """Resolves bearer credentials to profiles and manages credentials."""

    def __init__(
        self,
        user_repo: UserRepository,
        token_repo: RefreshTokenRepository,
        session: AsyncSession,
        oauth_client: OAuthClient | None = None,
    ):
        self.user_repo = user_repo
        self.token_repo = token_repo
        self.session = session
        self.oauth_client = oauth_client

    def _check_domain(self, email: str) -> None:
        domain = get_settings().institution_email_domain
        if not is_institutional_email(email, domain):
            raise DomainRejected(
                f"Only @{domain} email addresses are allowed", field="email"
            )

    def _issue_tokens(self, profile: UserProfile) -> TokenPair:
        """Create an access/refresh pair and stage the refresh hash (no commit)."""
        access_token = create_access_token(profile.id, profile.email)
        refresh_token, expires_at = create_refresh_token(profile.id)
        self.token_repo.add(
            RefreshToken(
                user_id=profile.id,
                token_hash=hash_token(refresh_token),
                expires_at=expires_at,
            )
        )
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    async def resolve(self, bearer: str | None) -> UserProfile:
        """Resolve an access token to the caller's freshly loaded profile."""
        if not bearer:
            raise Unauthenticated("Missing or invalid authorization header")

        payload = decode_token(bearer)
        if payload is None:
            raise Unauthenticated("Invalid or expired token")
        if payload.get("type") != TokenType.ACCESS:
            raise Unauthenticated("Invalid token type")

        try:
            profile_id = UUID(str(payload.get("sub")))
        except ValueError as e:
            raise Unauthenticated("Invalid token payload") from e

        profile = await self.user_repo.get_by_id(profile_id)
        if profile is None or not profile.is_active:
            raise Unauthenticated("User not found or inactive")
        return profile

    async def sign_up(self, data: SignUpRequest) -> tuple[UserProfile, TokenPair]:
        """Register a password account and sign it in."""
        email = data.email.strip().lower()
        self._check_domain(email)

        if await self.user_repo.exists_by_email(email):
            raise Conflict("Email already registered", field="email")
        if data.username and await self.user_repo.exists_by_username(data.username):
            raise Conflict("Username already taken", field="username")

        if data.role == Role.TEACHER.value and not data.department:
            raise ValidationFailed("Department is required for teachers", field="department")

        profile = UserProfile(
            email=email,
            username=data.username,
            hashed_password=hash_password(data.password),
            role=data.role,
            name=data.name,
            department=data.department,
            auth_provider="password",
        )
        try:
            self.user_repo.add(profile)
            await self.session.flush()
            tokens = self._issue_tokens(profile)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise Conflict("Email or username already registered") from e
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(profile)
        logger.info("Profile registered", user_id=str(profile.id), role=profile.role)
        return profile, tokens

    async def sign_in(self, data: LoginRequest) -> TokenPair:
        """Password sign-in by email or username."""
        if data.email is not None:
            email = data.email.strip().lower()
            self._check_domain(email)
            profile = await self.user_repo.get_by_email(email)
        elif data.username is not None:
            profile = await self.user_repo.get_by_username(data.username)
        else:
            raise Unauthenticated("Invalid credentials")

        # Always verify so unknown accounts cost the same as wrong passwords
        password_hash = (
            profile.hashed_password if profile and profile.hashed_password else None
        )
        password_valid = verify_password(data.password, password_hash or DUMMY_PASSWORD_HASH)

        if profile is None or password_hash is None or not password_valid:
            raise Unauthenticated("Invalid credentials")
        if not profile.is_active:
            raise Unauthenticated("Invalid credentials")

        try:
            tokens = self._issue_tokens(profile)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Signed in", user_id=str(profile.id))
        return tokens

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Rotate a refresh token: revoke the presented one, issue a new pair."""
        payload = decode_token(refresh_token)
        if payload is None or payload.get("type") != TokenType.REFRESH:
            raise Unauthenticated("Invalid refresh token")

        token_hash = hash_token(refresh_token)
        db_token = await self.token_repo.get_valid_by_hash(token_hash)
        if db_token is None or not hmac.compare_digest(token_hash, db_token.token_hash):
            raise Unauthenticated("Invalid refresh token")

        profile = await self.user_repo.get_by_id(db_token.user_id)
        if profile is None or not profile.is_active:
            raise Unauthenticated("Invalid refresh token")

        try:
            db_token.revoked = True
            tokens = self._issue_tokens(profile)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return tokens

    async def logout(self, refresh_token: str) -> bool:
        """Revoke a refresh token. Returns False when it was unknown."""
        token_hash = hash_token(refresh_token)
        db_token = await self.token_repo.get_by_hash(token_hash)
        if db_token is None:
            return False
        try:
            db_token.revoked = True
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return True

    async def complete_oauth(
        self,
        code: str | None,
        error: str | None = None,
        error_description: str | None = None,
        next_path: str | None = None,
    ) -> str:
        """Finish an OAuth sign-in and return the URL to redirect the browser to.

        Never raises: every failure is reported as a redirect to the login page
        with an ``error`` query parameter.
        """
        app_url = get_settings().app_url

        def login_error(reason: str, details: str | None = None) -> str:
            params = {"error": reason}
            if details:
                params["details"] = details
            return f"{app_url}/login?{urlencode(params)}"

        if not code:
            if error:
                logger.info("OAuth error received", error=error)
                return login_error("oauth_error", error_description or error)
            return login_error("no_code")

        if self.oauth_client is None:
            logger.error("OAuth callback received but no provider is configured")
            return login_error("unexpected", "OAuth is not configured")

        try:
            identity = await self.oauth_client.exchange_code(code)
        except OAuthExchangeError as e:
            logger.warning("OAuth code exchange failed", error=str(e))
            return login_error("auth_failed", str(e))

        try:
            self._check_domain(identity.email)
        except DomainRejected:
            logger.info("OAuth sign-in rejected for domain")
            return login_error("invalid_domain")

        try:
            profile = await self.user_repo.get_by_email(identity.email)
            if profile is None:
                profile = self._profile_from_identity(
                    identity.subject, identity.email, identity.provider, identity.metadata
                )
                self.user_repo.add(profile)
                await self.session.flush()
                logger.info("Profile created from OAuth", user_id=str(profile.id))
            elif not profile.is_active:
                await self.session.rollback()
                return login_error("auth_failed", "Account is disabled")
            tokens = self._issue_tokens(profile)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.exception("Unexpected OAuth callback error")
            return login_error("unexpected", str(e))

        if profile.needs_setup:
            target = "/auth/setup"
        elif next_path and _is_local_path(next_path) and next_path != "/":
            target = next_path
        else:
            target = "/teacher" if profile.role == Role.TEACHER.value else "/projects"

        fragment = urlencode(
            {
                "access_token": tokens.access_token,
                "refresh_token": tokens.refresh_token,
                "token_type": tokens.token_type,
            }
        )
        return f"{app_url}{target}#{fragment}"

    @staticmethod
    def _profile_from_identity(
        subject: str,
        email: str,
        provider: str | None,
        metadata: dict[str, object],
    ) -> UserProfile:
        try:
            profile_id = UUID(subject)
        except ValueError:
            profile_id = uuid4()

        role = metadata.get("role")
        if role not in (Role.STUDENT.value, Role.TEACHER.value):
            role = Role.STUDENT.value
        name = metadata.get("name") or metadata.get("full_name") or email.split("@", 1)[0]
        department = metadata.get("department")

        return UserProfile(
            id=profile_id,
            email=email,
            role=str(role),
            name=str(name)[:100],
            department=str(department) if department else None,
            auth_provider=provider,
            email_verified=True,
        )

    async def complete_setup(
        self, profile: UserProfile, data: CompleteSetupRequest
    ) -> UserProfile:
        """Assign username, password and role to a profile that has no username yet."""
        if profile.username:
            raise Conflict("Profile setup has already been completed")
        if data.role == Role.TEACHER.value and not data.department:
            raise ValidationFailed("Department is required for teachers", field="department")
        if await self.user_repo.exists_by_username(data.username):
            raise Conflict("Username already taken", field="username")

        profile.username = data.username
        profile.hashed_password = hash_password(data.password)
        profile.role = data.role
        if data.department:
            profile.department = data.department
        profile.updated_at = utc_now()

        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise Conflict("Username already taken", field="username") from e
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(profile)
        logger.info("Profile setup completed", user_id=str(profile.id), role=profile.role)
        return profile

    async def update_profile(self, profile: UserProfile, data: ProfileUpdate) -> UserProfile:
        """Apply a partial profile update. Email, role and username are not patchable."""
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("name", "") is None:
            raise ValidationFailed("Name cannot be empty", field="name")

        for field, value in update_data.items():
            setattr(profile, field, value)
        profile.updated_at = utc_now()

        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(profile)
        return profile


def _is_local_path(path: str) -> bool:
    """Only same-origin absolute paths are accepted as redirect targets."""
    return path.startswith("/") and not path.startswith("//") and "\\" not in path
