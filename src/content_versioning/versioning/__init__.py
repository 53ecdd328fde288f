"""Content versioning engine."""

from content_versioning.versioning.core import ContentVersioningService
from content_versioning.versioning.errors import (
    DocumentNotFoundError,
    NotFoundError,
    VersioningError,
    VersioningValidationError,
    VersionNotFoundError,
)
from content_versioning.versioning.sanitize import ABSENT, sanitize

__all__ = [
    "ABSENT",
    "ContentVersioningService",
    "DocumentNotFoundError",
    "NotFoundError",
    "VersionNotFoundError",
    "VersioningError",
    "VersioningValidationError",
    "sanitize",
]
