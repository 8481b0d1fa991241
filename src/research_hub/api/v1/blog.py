from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.research_hub.api.dependencies import BlogServiceDep, CurrentProfile, OptionalProfile
from src.research_hub.schemas.blog import BlogPostCreate, BlogPostRead, BlogPostUpdate

router = APIRouter(prefix="/blog", tags=["blog"])


@router.get("", response_model=list[BlogPostRead])
async def list_posts(
    service: BlogServiceDep,
    profile: OptionalProfile,
    author_email: Annotated[str | None, Query(max_length=255)] = None,
    tag: Annotated[str | None, Query(max_length=50)] = None,
    search: Annotated[str | None, Query(max_length=200)] = None,
    include_unpublished: bool = False,
) -> list[BlogPostRead]:
    posts = await service.list(
        profile,
        author_email=author_email,
        tag=tag,
        search=search,
        include_unpublished=include_unpublished,
    )
    return [BlogPostRead.model_validate(p) for p in posts]


@router.get("/{post_id}", response_model=BlogPostRead)
async def get_post(
    post_id: UUID, service: BlogServiceDep, profile: OptionalProfile
) -> BlogPostRead:
    post = await service.get_by_id(post_id, profile)
    return BlogPostRead.model_validate(post)


@router.post("", response_model=BlogPostRead, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: BlogPostCreate, service: BlogServiceDep, profile: CurrentProfile
) -> BlogPostRead:
    post = await service.create(data, profile)
    return BlogPostRead.model_validate(post)


@router.patch("/{post_id}", response_model=BlogPostRead)
async def update_post(
    post_id: UUID, data: BlogPostUpdate, service: BlogServiceDep, profile: CurrentProfile
) -> BlogPostRead:
    post = await service.update(post_id, data, profile)
    return BlogPostRead.model_validate(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: UUID, service: BlogServiceDep, profile: CurrentProfile) -> None:
    await service.delete(post_id, profile)
