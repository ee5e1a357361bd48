"""S3-compatible storage sink.

Works with AWS S3 and with S3-compatible stores (Cloudflare R2,
Backblaze B2, MinIO) through ``endpoint_url``.  boto3 is blocking, so
every call runs in a worker thread via ``asyncio.to_thread``.

Usage:
    from db_backup.storage.s3 import S3StorageSink

    sink = S3StorageSink.from_config(config.storage)
    await sink.put("backup-...sql", body, ObjectMetadata(custom={"database": "shop"}))
    keys = await sink.list("backup-", 1000)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from db_backup.config.models import StorageConfig
from db_backup.errors import StorageError
from db_backup.storage.base import ObjectMetadata

logger = logging.getLogger(__name__)


class S3StorageSink:
    """``StorageSink`` backed by a boto3 S3 client.

    Args:
        bucket: Bucket name.
        client: A boto3 S3 client (or anything exposing ``put_object`` and
            ``list_objects_v2``).
    """

    def __init__(self, bucket: str, client: Any) -> None:
        self._bucket = bucket
        self._client = client

    @classmethod
    def from_config(cls, config: StorageConfig) -> "S3StorageSink":
        """Create a sink and its boto3 client from storage configuration.

        Credentials fall back to the normal boto3 chain (env, profile,
        IAM role) when not configured explicitly.
        """
        kwargs: dict[str, Any] = {}
        if config.endpoint_url:
            kwargs["endpoint_url"] = config.endpoint_url
        if config.region:
            kwargs["region_name"] = config.region
        if config.access_key_id and config.secret_access_key:
            kwargs["aws_access_key_id"] = config.access_key_id
            kwargs["aws_secret_access_key"] = config.secret_access_key.get_secret_value()
        client = boto3.client("s3", **kwargs)
        return cls(bucket=config.bucket, client=client)

    async def put(self, key: str, body: bytes, metadata: ObjectMetadata) -> None:
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=body,
                ContentType=metadata.content_type,
                Metadata=dict(metadata.custom),
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Upload of '{key}' to bucket '{self._bucket}' failed: {e}") from e
        logger.debug("Put s3://%s/%s (%d bytes)", self._bucket, key, len(body))

    async def list(self, prefix: str, limit: int) -> list[str]:
        try:
            response = await asyncio.to_thread(
                self._client.list_objects_v2,
                Bucket=self._bucket,
                Prefix=prefix,
                MaxKeys=limit,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Listing bucket '{self._bucket}' failed: {e}") from e
        return sorted(obj["Key"] for obj in response.get("Contents", []))
