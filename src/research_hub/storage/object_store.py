"""Object store abstraction with an S3-compatible implementation.

boto3 is blocking, so every call is pushed to a worker thread.
"""

import asyncio
from functools import lru_cache
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.research_hub.core.config import get_settings
from src.research_hub.core.logging import get_logger

logger = get_logger(__name__)

_MISSING_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


class StorageError(Exception):
    """The object store could not complete an operation."""


class ObjectNotFoundError(StorageError):
    """The requested object does not exist."""


class ObjectStore(Protocol):
    async def put(self, bucket: str, key: str, data: bytes, content_type: str) -> None: ...

    async def get(self, bucket: str, key: str) -> bytes: ...

    async def delete(self, bucket: str, key: str) -> None: ...


class S3ObjectStore:
    """ObjectStore backed by S3 or an S3-compatible service such as MinIO."""

    def __init__(
        self,
        region_name: str = "us-east-1",
        endpoint_url: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        client: Any = None,
    ):
        if client is None:
            client_kwargs: dict[str, Any] = {"region_name": region_name}
            if endpoint_url:
                client_kwargs["endpoint_url"] = endpoint_url
            if aws_access_key_id:
                client_kwargs["aws_access_key_id"] = aws_access_key_id
            if aws_secret_access_key:
                client_kwargs["aws_secret_access_key"] = aws_secret_access_key
            client = boto3.client("s3", **client_kwargs)
        self._client = client

    async def put(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Object upload failed", bucket=bucket, key=key, error=str(e))
            raise StorageError(str(e)) from e

    async def get(self, bucket: str, key: str) -> bytes:
        def _read() -> bytes:
            response = self._client.get_object(Bucket=bucket, Key=key)
            return response["Body"].read()  # type: ignore[no-any-return]

        try:
            return await asyncio.to_thread(_read)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code", "") in _MISSING_CODES:
                raise ObjectNotFoundError(key) from e
            logger.error("Object download failed", bucket=bucket, key=key, error=str(e))
            raise StorageError(str(e)) from e
        except BotoCoreError as e:
            logger.error("Object download failed", bucket=bucket, key=key, error=str(e))
            raise StorageError(str(e)) from e

    async def delete(self, bucket: str, key: str) -> None:
        try:
            await asyncio.to_thread(self._client.delete_object, Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(str(e)) from e


@lru_cache
def get_object_store() -> ObjectStore:
    """Process-wide object store built from settings."""
    settings = get_settings()
    logger.info(
        "Object store initialized",
        endpoint=settings.storage_endpoint_url or "aws",
        region=settings.storage_region,
    )
    return S3ObjectStore(
        region_name=settings.storage_region,
        endpoint_url=settings.storage_endpoint_url,
        aws_access_key_id=settings.storage_access_key_id,
        aws_secret_access_key=settings.storage_secret_access_key,
    )
