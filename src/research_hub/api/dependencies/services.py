"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.research_hub.api.dependencies.db import DBSession
from src.research_hub.api.dependencies.repositories import (
    ApplicationRepo,
    BlogRepo,
    PostingRepo,
    TokenRepo,
    UserRepo,
)
from src.research_hub.api.dependencies.storage import OAuth, Store
from src.research_hub.services import (
    ApplicationService,
    AttachmentService,
    BlogService,
    IdentityService,
    PostingService,
)


def get_identity_service(
    user_repo: UserRepo,
    token_repo: TokenRepo,
    session: DBSession,
    oauth: OAuth,
) -> IdentityService:
    return IdentityService(user_repo, token_repo, session, oauth)


def get_attachment_service(store: Store) -> AttachmentService:
    return AttachmentService(store)


AttachmentServiceDep = Annotated[AttachmentService, Depends(get_attachment_service)]


def get_posting_service(
    posting_repo: PostingRepo,
    application_repo: ApplicationRepo,
    attachments: AttachmentServiceDep,
    session: DBSession,
) -> PostingService:
    return PostingService(posting_repo, application_repo, attachments, session)


def get_application_service(
    application_repo: ApplicationRepo,
    posting_repo: PostingRepo,
    attachments: AttachmentServiceDep,
    session: DBSession,
) -> ApplicationService:
    return ApplicationService(application_repo, posting_repo, attachments, session)


def get_blog_service(
    blog_repo: BlogRepo,
    attachments: AttachmentServiceDep,
    session: DBSession,
) -> BlogService:
    return BlogService(blog_repo, attachments, session)


IdentityServiceDep = Annotated[IdentityService, Depends(get_identity_service)]
PostingServiceDep = Annotated[PostingService, Depends(get_posting_service)]
ApplicationServiceDep = Annotated[ApplicationService, Depends(get_application_service)]
BlogServiceDep = Annotated[BlogService, Depends(get_blog_service)]
