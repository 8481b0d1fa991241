"""Storage key and public URL helpers.

Keys look like ``<owner_id>/<prefix><timestamp_ms>-<sanitized name>`` and
public URLs like ``<storage_public_url>/<bucket>/<key>``.
"""

from dataclasses import dataclass
from uuid import UUID

from src.research_hub.core.security import sanitize_filename


@dataclass(frozen=True)
class ObjectLocation:
    bucket: str
    key: str

    @property
    def owner_prefix(self) -> str:
        """First path segment of the key (the uploading owner's id)."""
        return self.key.split("/", 1)[0]

    @property
    def file_name(self) -> str:
        """Last path segment of the key."""
        return self.key.rsplit("/", 1)[-1]


def build_key(owner_id: UUID, filename: str | None, timestamp_ms: int, prefix: str = "") -> str:
    """Build an object key under the owner's prefix.

    >>> from uuid import UUID
    >>> build_key(UUID(int=1), "CV.pdf", 1700000000000, prefix="resume-")
    '00000000-0000-0000-0000-000000000001/resume-1700000000000-CV.pdf'
    """
    return f"{owner_id}/{prefix}{timestamp_ms}-{sanitize_filename(filename)}"


def public_url(base_url: str, bucket: str, key: str) -> str:
    return f"{base_url.rstrip('/')}/{bucket}/{key}"


def parse_public_url(base_url: str, url: str) -> ObjectLocation | None:
    """Split a public URL produced by `public_url` back into bucket and key.

    Returns None for URLs outside the storage base, or with path traversal
    segments in the key.
    """
    base = base_url.rstrip("/") + "/"
    if not url.startswith(base):
        return None
    bucket, sep, key = url[len(base) :].partition("/")
    if not bucket or not sep or not key:
        return None
    if any(part in ("", ".", "..") for part in key.split("/")):
        return None
    return ObjectLocation(bucket=bucket, key=key)
