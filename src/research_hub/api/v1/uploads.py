"""Multipart PDF uploads. The form field is always ``file``."""

from fastapi import APIRouter, UploadFile, status

from src.research_hub.api.dependencies import AttachmentServiceDep, CurrentProfile
from src.research_hub.models import AttachmentKind, UserProfile
from src.research_hub.schemas.attachment import AttachmentRead
from src.research_hub.services import AttachmentService

router = APIRouter(prefix="/uploads", tags=["uploads"])


async def _upload(
    service: AttachmentService, profile: UserProfile, file: UploadFile, kind: AttachmentKind
) -> AttachmentRead:
    # One byte past the ceiling is enough to reject without buffering the rest
    data = await file.read(service.max_bytes(kind) + 1)
    return await service.upload(profile, kind, file.filename, file.content_type, data)


@router.post(
    "/resume",
    response_model=AttachmentRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Not a PDF, empty, or over the size limit"},
        403: {"description": "Caller is not a student"},
    },
)
async def upload_resume(
    file: UploadFile, service: AttachmentServiceDep, profile: CurrentProfile
) -> AttachmentRead:
    return await _upload(service, profile, file, AttachmentKind.RESUME)


@router.post(
    "/document",
    response_model=AttachmentRead,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Not a PDF, empty, or over the size limit"}},
)
async def upload_document(
    file: UploadFile, service: AttachmentServiceDep, profile: CurrentProfile
) -> AttachmentRead:
    """Supporting PDF for a posting or blog post."""
    return await _upload(service, profile, file, AttachmentKind.DOCUMENT)
