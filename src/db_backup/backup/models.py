"""Pydantic models for the dump-and-upload pipeline.

The assembled dump artifact and the orchestrator's result.  Schema
descriptors live in ``db_backup.schema.models``; object metadata lives
with the storage sinks.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Dump Artifact
# ============================================================================


class DumpArtifact(BaseModel):
    """The complete dump text produced by one backup invocation.

    Immutable once built.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    created_at: datetime
    database: str = "unknown"
    tables: list[str] = Field(default_factory=list)

    @property
    def size_bytes(self) -> int:
        """UTF-8 encoded size of the dump text."""
        return len(self.text.encode("utf-8"))

    def to_bytes(self) -> bytes:
        return self.text.encode("utf-8")


# ============================================================================
# Orchestrator Result
# ============================================================================


class BackupState(str, Enum):
    """States of one backup invocation."""

    IDLE = "idle"
    CONNECTING = "connecting"
    DUMPING = "dumping"
    UPLOADING = "uploading"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (BackupState.DONE, BackupState.FAILED)


class BackupResult(BaseModel):
    """Outcome of ``BackupOrchestrator.run()``.

    Example:
        >>> result = BackupResult(success=False, state=BackupState.FAILED, error="boom")
        >>> result.filename is None
        True
    """

    success: bool
    state: BackupState
    filename: str | None = None
    database: str | None = None
    size_bytes: int | None = None
    table_count: int | None = None
    error: str | None = None
    transitions: list[BackupState] = Field(default_factory=list)
