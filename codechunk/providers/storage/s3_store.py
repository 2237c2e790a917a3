"""Amazon S3 object store backed by boto3.

boto3 is synchronous, so each call runs in a worker thread via
``asyncio.to_thread`` to keep the event loop free while several files are
in flight.
"""

from __future__ import annotations

import asyncio
from typing import Any

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from codechunk.interfaces.object_store import IObjectStore
from codechunk.utils.errors import StorageError

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER_NAME = "s3"


class S3ObjectStore(IObjectStore):
    """S3 implementation of :class:`IObjectStore`.

    Parameters
    ----------
    client:
        Pre-built boto3 S3 client.  When omitted a client is created from
        the default credential chain.
    region_name:
        Region for the default client; ignored when *client* is given.
    """

    def __init__(self, client: Any | None = None, region_name: str | None = None) -> None:
        if client is None:
            client = boto3.client("s3", region_name=region_name or None)
        self._client = client

    async def get_object(self, bucket: str, key: str) -> bytes:
        try:
            return await asyncio.to_thread(self._get_sync, bucket, key)
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(
                message=f"GetObject s3://{bucket}/{key} failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

    async def put_object(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str = "application/json",
    ) -> None:
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(
                message=f"PutObject s3://{bucket}/{key} failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc
        logger.debug("s3_object_written", bucket=bucket, key=key, size=len(body))

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    def _get_sync(self, bucket: str, key: str) -> bytes:
        response = self._client.get_object(Bucket=bucket, Key=key)
        stream = response["Body"]
        try:
            return stream.read()
        finally:
            stream.close()
