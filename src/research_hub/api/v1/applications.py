"""Application endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from src.research_hub.api.dependencies import ApplicationServiceDep, CurrentProfile
from src.research_hub.schemas.application import (
    ApplicationCreate,
    ApplicationRead,
    ApplicationStatusFilter,
    ApplicationStatusUpdate,
)

router = APIRouter(prefix="/applications", tags=["applications"])


@router.get(
    "",
    response_model=list[ApplicationRead],
    summary="List applications",
    description="Filters are narrowed to what the caller may see.",
)
async def list_applications(
    service: ApplicationServiceDep,
    profile: CurrentProfile,
    project_id: Annotated[UUID | None, Query()] = None,
    student_id: Annotated[UUID | None, Query()] = None,
    teacher_id: Annotated[UUID | None, Query()] = None,
    status_filter: Annotated[ApplicationStatusFilter | None, Query(alias="status")] = None,
) -> list[ApplicationRead]:
    applications = await service.list(
        profile,
        project_id=project_id,
        student_id=student_id,
        teacher_id=teacher_id,
        status=status_filter,
    )
    return [ApplicationRead.model_validate(a) for a in applications]


@router.post(
    "",
    response_model=ApplicationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Apply to a project",
    responses={
        400: {"description": "Project is not accepting applications"},
        403: {"description": "Caller is not a student"},
        404: {"description": "Project not found"},
        409: {"description": "Already applied"},
    },
)
async def create_application(
    data: ApplicationCreate, service: ApplicationServiceDep, profile: CurrentProfile
) -> ApplicationRead:
    application = await service.create(data, profile)
    return ApplicationRead.model_validate(application)


@router.get("/{application_id}", response_model=ApplicationRead)
async def get_application(
    application_id: UUID, service: ApplicationServiceDep, profile: CurrentProfile
) -> ApplicationRead:
    application = await service.get(application_id, profile)
    return ApplicationRead.model_validate(application)


@router.patch(
    "/{application_id}/status",
    response_model=ApplicationRead,
    summary="Accept or reject an application",
    responses={
        400: {"description": "Status is not accepted or rejected"},
        403: {"description": "Caller does not own the posting"},
        409: {"description": "Application is no longer pending"},
    },
)
async def update_application_status(
    application_id: UUID,
    data: ApplicationStatusUpdate,
    service: ApplicationServiceDep,
    profile: CurrentProfile,
) -> ApplicationRead:
    application = await service.update_status(application_id, data.status, profile)
    return ApplicationRead.model_validate(application)


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def withdraw_application(
    application_id: UUID, service: ApplicationServiceDep, profile: CurrentProfile
) -> None:
    await service.delete(application_id, profile)


@router.get(
    "/{application_id}/resume",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "Resume PDF"},
        403: {"description": "Caller does not own the posting"},
        404: {"description": "Application or resume not found"},
    },
)
async def download_resume(
    application_id: UUID, service: ApplicationServiceDep, profile: CurrentProfile
) -> Response:
    file_name, data = await service.download_resume(application_id, profile)
    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )
