"""Authentication endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status
from fastapi.responses import RedirectResponse
from starlette.requests import Request

from src.research_hub.api.dependencies import CurrentProfile, IdentityServiceDep
from src.research_hub.core.rate_limit import limiter
from src.research_hub.schemas.auth import (
    CompleteSetupRequest,
    LoginRequest,
    RefreshRequest,
    SignUpRequest,
    SignUpResponse,
    TokenPair,
)
from src.research_hub.schemas.user import ProfileRead

router = APIRouter(prefix="/auth", tags=["auth"])

_TOKEN_EXAMPLE = {
    "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
    "refresh_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
    "token_type": "bearer",
}


@router.post(
    "/signup",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Profile created and signed in"},
        400: {"description": "Invalid input or non-institutional email"},
        409: {"description": "Email or username already registered"},
    },
)
@limiter.limit("3/minute")
async def signup(
    request: Request, data: SignUpRequest, service: IdentityServiceDep
) -> SignUpResponse:
    """Register with an institutional email address and a password."""
    profile, tokens = await service.sign_up(data)
    return SignUpResponse(
        profile=ProfileRead.model_validate(profile),
        **tokens.model_dump(),
    )


@router.post(
    "/login",
    response_model=TokenPair,
    responses={
        200: {
            "description": "Successful authentication",
            "content": {"application/json": {"example": _TOKEN_EXAMPLE}},
        },
        400: {"description": "Non-institutional email"},
        401: {"description": "Invalid credentials"},
    },
)
@limiter.limit("5/minute")
async def login(request: Request, data: LoginRequest, service: IdentityServiceDep) -> TokenPair:
    """Sign in with email or username and password."""
    return await service.sign_in(data)


@router.post(
    "/refresh",
    response_model=TokenPair,
    responses={
        200: {"description": "Token refreshed with rotation"},
        401: {"description": "Invalid or expired refresh token"},
    },
)
@limiter.limit("10/minute")
async def refresh(
    request: Request, data: RefreshRequest, service: IdentityServiceDep
) -> TokenPair:
    """Exchange a refresh token for a new pair. The presented token is revoked."""
    return await service.refresh(data.refresh_token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(data: RefreshRequest, service: IdentityServiceDep) -> None:
    """Revoke a refresh token. Unknown tokens are ignored."""
    await service.logout(data.refresh_token)


@router.get(
    "/callback",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
    responses={302: {"description": "Redirect to the frontend"}},
)
async def oauth_callback(
    service: IdentityServiceDep,
    code: Annotated[str | None, Query()] = None,
    error: Annotated[str | None, Query()] = None,
    error_description: Annotated[str | None, Query()] = None,
    next: Annotated[str | None, Query()] = None,
) -> RedirectResponse:
    """OAuth redirect target. Always answers with a redirect, never an error body."""
    url = await service.complete_oauth(
        code, error=error, error_description=error_description, next_path=next
    )
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.post(
    "/setup",
    response_model=ProfileRead,
    responses={
        400: {"description": "Invalid input"},
        409: {"description": "Setup already completed or username taken"},
    },
)
async def complete_setup(
    data: CompleteSetupRequest, profile: CurrentProfile, service: IdentityServiceDep
) -> ProfileRead:
    """One-time username, password and role assignment for OAuth profiles."""
    updated = await service.complete_setup(profile, data)
    return ProfileRead.model_validate(updated)
