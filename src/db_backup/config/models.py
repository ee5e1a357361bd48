"""Pydantic models for backup configuration."""

from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator


# ============================================================================
# Configuration Models
# ============================================================================


class StorageConfig(BaseModel):
    """Where artifacts are stored."""

    backend: Literal["s3", "local"] = "s3"
    bucket: str = ""
    endpoint_url: str | None = None  # R2 / B2 / MinIO endpoint; None for AWS
    region: str | None = None
    access_key_id: str | None = None
    secret_access_key: SecretStr | None = None
    local_dir: str = "backups"

    @model_validator(mode="after")
    def _bucket_required_for_s3(self) -> "StorageConfig":
        if self.backend == "s3" and not self.bucket:
            raise ValueError("storage.bucket is required for the s3 backend")
        return self


class ApiConfig(BaseModel):
    """HTTP API settings."""

    token: SecretStr | None = None  # shared bearer secret
    host: str = "127.0.0.1"
    port: int = 8000
    list_limit: int = Field(default=1000, ge=1)


class BackupConfig(BaseModel):
    """Complete configuration passed into one backup invocation."""

    database_url: str
    schema_name: str = "public"
    exclude_tables: list[str] = Field(default_factory=list)
    batch_size: int = Field(default=100, ge=1)
    connect_timeout: int = Field(default=10, ge=1)
    storage: StorageConfig
    api: ApiConfig = Field(default_factory=ApiConfig)

    @field_validator("database_url")
    @classmethod
    def _database_url_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("database_url must not be empty")
        return value
