"""Object storage for uploaded attachments."""

from src.research_hub.storage.object_store import (
    ObjectNotFoundError,
    ObjectStore,
    S3ObjectStore,
    StorageError,
    get_object_store,
)
from src.research_hub.storage.paths import ObjectLocation, build_key, parse_public_url, public_url

__all__ = [
    "ObjectLocation",
    "ObjectNotFoundError",
    "ObjectStore",
    "S3ObjectStore",
    "StorageError",
    "build_key",
    "get_object_store",
    "parse_public_url",
    "public_url",
]
