"""Authentication dependencies.

Every protected route resolves the bearer token to a freshly loaded profile;
roles are never read from the token itself.
"""

from typing import Annotated

from fastapi import Depends, Header

from src.research_hub.api.dependencies.db import DBSession
from src.research_hub.api.dependencies.repositories import UserRepo
from src.research_hub.core.exceptions import Unauthenticated
from src.research_hub.core.logging import bind_user_context
from src.research_hub.models import UserProfile
from src.research_hub.repositories import RefreshTokenRepository
from src.research_hub.services.identity_service import IdentityService


def _bearer(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthenticated("Missing or invalid authorization header")
    return token.strip()


async def _resolve(
    authorization: str | None, user_repo: UserRepo, session: DBSession
) -> UserProfile:
    identity = IdentityService(user_repo, RefreshTokenRepository(session), session)
    profile = await identity.resolve(_bearer(authorization))
    bind_user_context(profile.id, profile.role, profile.email)
    return profile


async def get_current_profile(
    user_repo: UserRepo,
    session: DBSession,
    authorization: Annotated[str | None, Header()] = None,
) -> UserProfile:
    """Resolve the caller or fail with 401."""
    return await _resolve(authorization, user_repo, session)


async def get_optional_profile(
    user_repo: UserRepo,
    session: DBSession,
    authorization: Annotated[str | None, Header()] = None,
) -> UserProfile | None:
    """Resolve the caller when a bearer token is sent; anonymous otherwise.

    A token that is present but invalid is still rejected.
    """
    if not authorization:
        return None
    return await _resolve(authorization, user_repo, session)


CurrentProfile = Annotated[UserProfile, Depends(get_current_profile)]
OptionalProfile = Annotated[UserProfile | None, Depends(get_optional_profile)]
