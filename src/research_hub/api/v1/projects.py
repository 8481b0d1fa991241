"""Posting endpoints.

Listing and reading active postings is public; everything else needs a
bearer token.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.research_hub.api.dependencies import (
    CurrentProfile,
    OptionalProfile,
    PostingServiceDep,
)
from src.research_hub.schemas.posting import PostingCreate, PostingRead, PostingUpdate

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get(
    "",
    response_model=list[PostingRead],
    summary="List projects",
    responses={
        200: {"description": "Postings, newest first"},
        401: {"description": "Non-active listing requested without a token"},
    },
)
async def list_projects(
    service: PostingServiceDep,
    profile: OptionalProfile,
    status_filter: Annotated[
        str | None,
        Query(alias="status", description="draft, active, closed or all (default active)"),
    ] = None,
    author_email: Annotated[str | None, Query(max_length=255)] = None,
    search: Annotated[str | None, Query(max_length=200)] = None,
) -> list[PostingRead]:
    postings = await service.list(
        profile, status=status_filter, author_email=author_email, search=search
    )
    return [PostingRead.model_validate(p) for p in postings]


@router.get(
    "/{project_id}",
    response_model=PostingRead,
    summary="Get project",
    description="Get a posting by ID. Each successful read counts one view.",
    responses={404: {"description": "Project not found"}},
)
async def get_project(
    project_id: UUID, service: PostingServiceDep, profile: OptionalProfile
) -> PostingRead:
    posting = await service.get_by_id(project_id, profile)
    return PostingRead.model_validate(posting)


@router.post(
    "",
    response_model=PostingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    responses={
        201: {"description": "Project created"},
        403: {"description": "Caller is not a teacher"},
    },
)
async def create_project(
    data: PostingCreate, service: PostingServiceDep, profile: CurrentProfile
) -> PostingRead:
    posting = await service.create(data, profile)
    return PostingRead.model_validate(posting)


@router.patch(
    "/{project_id}",
    response_model=PostingRead,
    summary="Update project",
    responses={
        403: {"description": "Caller does not own the posting"},
        404: {"description": "Project not found"},
    },
)
async def update_project(
    project_id: UUID,
    data: PostingUpdate,
    service: PostingServiceDep,
    profile: CurrentProfile,
) -> PostingRead:
    posting = await service.update(project_id, data, profile)
    return PostingRead.model_validate(posting)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete project",
    description="Delete a posting together with its applications and their files.",
    responses={
        403: {"description": "Caller does not own the posting"},
        404: {"description": "Project not found"},
    },
)
async def delete_project(
    project_id: UUID, service: PostingServiceDep, profile: CurrentProfile
) -> None:
    await service.delete(project_id, profile)
