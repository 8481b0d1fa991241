"""Attachment service - PDF uploads, downloads and best-effort removal."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

from src.research_hub.core.authorization import Action, authorize, enforce
from src.research_hub.core.config import Settings, get_settings
from src.research_hub.core.exceptions import (
    InvalidType,
    NotFound,
    TooLarge,
    UpstreamFailure,
    ValidationFailed,
)
from src.research_hub.core.logging import get_logger
from src.research_hub.models import AttachmentKind, UserProfile
from src.research_hub.schemas.attachment import AttachmentRead
from src.research_hub.storage import (
    ObjectLocation,
    ObjectNotFoundError,
    ObjectStore,
    StorageError,
    build_key,
    parse_public_url,
    public_url,
)

logger = get_logger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


@dataclass(frozen=True)
class KindPolicy:
    bucket: str
    max_bytes: int
    key_prefix: str
    upload_action: Action


def _policies(settings: Settings) -> dict[AttachmentKind, KindPolicy]:
    return {
        AttachmentKind.RESUME: KindPolicy(
            bucket=settings.resume_bucket,
            max_bytes=settings.resume_max_bytes,
            key_prefix="resume-",
            upload_action=Action.UPLOAD_RESUME,
        ),
        AttachmentKind.DOCUMENT: KindPolicy(
            bucket=settings.document_bucket,
            max_bytes=settings.document_max_bytes,
            key_prefix="",
            upload_action=Action.UPLOAD_DOCUMENT,
        ),
    }


def _format_size(num_bytes: int) -> str:
    if num_bytes % (1024 * 1024) == 0:
        return f"{num_bytes // (1024 * 1024)}MB"
    return f"{num_bytes} bytes"


class AttachmentService:
    """Stores PDFs under per-owner keys and resolves their public URLs."""

    def __init__(
        self,
        store: ObjectStore,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.policies = _policies(self.settings)
        self._clock = clock

    def max_bytes(self, kind: AttachmentKind) -> int:
        return self.policies[kind].max_bytes

    async def upload(
        self,
        owner: UserProfile,
        kind: AttachmentKind,
        filename: str | None,
        content_type: str | None,
        data: bytes,
    ) -> AttachmentRead:
        """Validate and store a PDF for `owner`.

        Raises:
            Forbidden: the owner's role may not upload this kind.
            InvalidType: content type is not exactly application/pdf.
            ValidationFailed: the file is empty.
            TooLarge: the file exceeds the kind's ceiling.
            UpstreamFailure: the object store rejected the write.
        """
        policy = self.policies[kind]
        enforce(authorize(owner, policy.upload_action))

        if content_type != PDF_CONTENT_TYPE:
            raise InvalidType("Only PDF files are allowed", field="file")
        if not data:
            raise ValidationFailed("File is empty", field="file")
        if len(data) > policy.max_bytes:
            raise TooLarge(
                f"File size must be at most {_format_size(policy.max_bytes)}", field="file"
            )

        timestamp_ms = int(self._clock() * 1000)
        key = build_key(owner.id, filename, timestamp_ms, prefix=policy.key_prefix)
        try:
            await self.store.put(policy.bucket, key, data, PDF_CONTENT_TYPE)
        except StorageError as e:
            raise UpstreamFailure("Failed to store file") from e

        url = public_url(self.settings.storage_public_url, policy.bucket, key)
        logger.info(
            "Attachment uploaded",
            kind=kind.value,
            owner_id=str(owner.id),
            key=key,
            size=len(data),
        )
        return AttachmentRead(url=url, file_name=key.rsplit("/", 1)[-1], key=key, size=len(data))

    def locate(self, url: str, kind: AttachmentKind) -> ObjectLocation | None:
        """Resolve a public URL into the kind's bucket, or None if it points elsewhere."""
        location = parse_public_url(self.settings.storage_public_url, url)
        if location is None or location.bucket != self.policies[kind].bucket:
            return None
        return location

    def owns(self, url: str, owner_id: UUID, kind: AttachmentKind) -> bool:
        """True when `url` is inside `owner_id`'s prefix of the kind's bucket."""
        location = self.locate(url, kind)
        if location is None or location.owner_prefix != str(owner_id):
            return False
        return location.file_name.startswith(self.policies[kind].key_prefix)

    async def download(self, url: str, kind: AttachmentKind) -> tuple[str, bytes]:
        """Fetch an attachment. Returns (file name, bytes)."""
        location = self.locate(url, kind)
        if location is None:
            raise NotFound("File not found")
        try:
            data = await self.store.get(location.bucket, location.key)
        except ObjectNotFoundError as e:
            raise NotFound("File not found") from e
        except StorageError as e:
            raise UpstreamFailure("Failed to download file") from e
        return location.file_name, data

    async def delete(self, url: str | None, kind: AttachmentKind) -> bool:
        """Best-effort removal. Failures are logged, never raised.

        Returns True when the object store accepted the delete.
        """
        if not url:
            return False
        location = self.locate(url, kind)
        if location is None:
            logger.warning("Attachment cleanup skipped, unrecognised URL", url=url)
            return False
        try:
            await self.store.delete(location.bucket, location.key)
        except StorageError as e:
            logger.warning(
                "Attachment cleanup failed",
                bucket=location.bucket,
                key=location.key,
                error=str(e),
            )
            return False
        logger.info("Attachment removed", bucket=location.bucket, key=location.key)
        return True
