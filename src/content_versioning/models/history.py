"""History entry and versioning option models."""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from content_versioning.models.document import StoredModel


class ChangeType(StrEnum):
    """What a version did to its document."""

    CREATE = "create"
    UPDATE = "update"
    PUBLISH = "publish"
    ARCHIVE = "archive"


class HistoryEntry(StoredModel):
    """Immutable snapshot of a document at one version."""

    id: str
    content_id: str
    version: int
    timestamp: datetime | None = None
    user_id: str
    change_type: ChangeType
    changes: dict[str, list[Any]] = Field(default_factory=dict)
    snapshot: dict[str, Any] = Field(default_factory=dict)
    hash: str
    comment: str = ""
    branch: str = "main"


class VersioningOptions(BaseModel):
    """Caller-supplied options for a versioned update."""

    user_id: str
    comment: str = ""
    branch: str | None = None


class VersioningConfig(BaseModel):
    """Service-level versioning settings."""

    max_history_entries: int = Field(default=50, ge=1)
    enable_auto_archival: bool = True
    archive_after_days: int = Field(default=90, ge=1)
    enable_compression: bool = False
    default_branch: str = "main"
