"""Tests for the S3 and local storage sinks."""

import json
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from db_backup.config.models import StorageConfig
from db_backup.errors import StorageError
from db_backup.factory import create_sink
from db_backup.storage.base import ObjectMetadata
from db_backup.storage.local import METADATA_SUFFIX, LocalStorageSink
from db_backup.storage.s3 import S3StorageSink

KEY = "backup-2025-11-19T01-00-00-000Z.sql"
METADATA = ObjectMetadata(custom={"backup-date": "2025-11-19", "database": "shop"})


def _client_error(code: str = "AccessDenied") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "denied"}}, "PutObject")


# ============================================================================
# S3StorageSink
# ============================================================================


class TestS3Put:
    """Uploads through the boto3 client."""

    async def test_put_object_arguments(self):
        client = MagicMock()
        await S3StorageSink("db-backups", client).put(KEY, b"-- dump", METADATA)

        client.put_object.assert_called_once_with(
            Bucket="db-backups",
            Key=KEY,
            Body=b"-- dump",
            ContentType="application/sql",
            Metadata={"backup-date": "2025-11-19", "database": "shop"},
        )

    async def test_client_error_becomes_storage_error(self):
        client = MagicMock()
        client.put_object.side_effect = _client_error()
        with pytest.raises(StorageError, match="db-backups"):
            await S3StorageSink("db-backups", client).put(KEY, b"x", METADATA)

    async def test_botocore_error_becomes_storage_error(self):
        client = MagicMock()
        client.put_object.side_effect = EndpointConnectionError(endpoint_url="https://r2.invalid")
        with pytest.raises(StorageError):
            await S3StorageSink("db-backups", client).put(KEY, b"x", METADATA)


class TestS3List:
    """Single-page listing through the boto3 client."""

    async def test_sorted_keys(self):
        client = MagicMock()
        client.list_objects_v2.return_value = {
            "Contents": [
                {"Key": "backup-2025-11-19T01-00-00-000Z.sql"},
                {"Key": "backup-2025-11-18T01-00-00-000Z.sql"},
            ]
        }
        keys = await S3StorageSink("db-backups", client).list("backup-", 1000)

        assert keys == [
            "backup-2025-11-18T01-00-00-000Z.sql",
            "backup-2025-11-19T01-00-00-000Z.sql",
        ]
        client.list_objects_v2.assert_called_once_with(
            Bucket="db-backups", Prefix="backup-", MaxKeys=1000
        )

    async def test_empty_bucket(self):
        client = MagicMock()
        client.list_objects_v2.return_value = {"KeyCount": 0}
        assert await S3StorageSink("db-backups", client).list("backup-", 1000) == []

    async def test_list_error(self):
        client = MagicMock()
        client.list_objects_v2.side_effect = _client_error("NoSuchBucket")
        with pytest.raises(StorageError):
            await S3StorageSink("db-backups", client).list("backup-", 1000)


class TestS3FromConfig:
    """Building the boto3 client from StorageConfig."""

    def test_passes_endpoint_and_credentials(self):
        config = StorageConfig(
            bucket="db-backups",
            endpoint_url="https://acct.r2.cloudflarestorage.com",
            region="auto",
            access_key_id="AKIA",
            secret_access_key="s3cret",
        )
        with patch("db_backup.storage.s3.boto3.client") as client:
            sink = S3StorageSink.from_config(config)

        client.assert_called_once_with(
            "s3",
            endpoint_url="https://acct.r2.cloudflarestorage.com",
            region_name="auto",
            aws_access_key_id="AKIA",
            aws_secret_access_key="s3cret",
        )
        assert isinstance(sink, S3StorageSink)

    def test_default_credential_chain(self):
        with patch("db_backup.storage.s3.boto3.client") as client:
            S3StorageSink.from_config(StorageConfig(bucket="db-backups"))
        client.assert_called_once_with("s3")


# ============================================================================
# LocalStorageSink
# ============================================================================


class TestLocalStorageSink:
    """Files plus metadata sidecars in a directory."""

    async def test_put_writes_body_and_sidecar(self, tmp_path):
        sink = LocalStorageSink(tmp_path / "backups")
        await sink.put(KEY, b"-- dump", METADATA)

        assert (tmp_path / "backups" / KEY).read_bytes() == b"-- dump"
        sidecar = json.loads((tmp_path / "backups" / f"{KEY}{METADATA_SUFFIX}").read_text())
        assert sidecar["content_type"] == "application/sql"
        assert sidecar["custom"]["database"] == "shop"

    async def test_list_skips_sidecars_and_other_files(self, tmp_path):
        sink = LocalStorageSink(tmp_path)
        await sink.put("backup-b.sql", b"", METADATA)
        await sink.put("backup-a.sql", b"", METADATA)
        (tmp_path / "readme.txt").write_text("x")

        assert await sink.list("backup-", 1000) == ["backup-a.sql", "backup-b.sql"]
        assert await sink.list("backup-", 1) == ["backup-a.sql"]

    async def test_list_missing_directory(self, tmp_path):
        assert await LocalStorageSink(tmp_path / "nope").list("backup-", 10) == []

    @pytest.mark.parametrize("key", ["../escape.sql", "a/b.sql", "..", ""])
    async def test_rejects_path_keys(self, tmp_path, key):
        with pytest.raises(StorageError):
            await LocalStorageSink(tmp_path).put(key, b"x", METADATA)


class TestCreateSink:
    """Sink selection by backend name."""

    def test_local_backend(self, tmp_path):
        sink = create_sink(StorageConfig(backend="local", local_dir=str(tmp_path)))
        assert isinstance(sink, LocalStorageSink)
        assert sink.directory == tmp_path

    def test_s3_backend(self):
        with patch("db_backup.storage.s3.boto3.client"):
            sink = create_sink(StorageConfig(bucket="db-backups"))
        assert isinstance(sink, S3StorageSink)
