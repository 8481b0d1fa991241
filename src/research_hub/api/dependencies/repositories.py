"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.research_hub.api.dependencies.db import DBSession
from src.research_hub.repositories import (
    ApplicationRepository,
    BlogPostRepository,
    PostingRepository,
    RefreshTokenRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_token_repository(session: DBSession) -> RefreshTokenRepository:
    return RefreshTokenRepository(session)


def get_posting_repository(session: DBSession) -> PostingRepository:
    return PostingRepository(session)


def get_application_repository(session: DBSession) -> ApplicationRepository:
    return ApplicationRepository(session)


def get_blog_repository(session: DBSession) -> BlogPostRepository:
    return BlogPostRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
TokenRepo = Annotated[RefreshTokenRepository, Depends(get_token_repository)]
PostingRepo = Annotated[PostingRepository, Depends(get_posting_repository)]
ApplicationRepo = Annotated[ApplicationRepository, Depends(get_application_repository)]
BlogRepo = Annotated[BlogPostRepository, Depends(get_blog_repository)]
