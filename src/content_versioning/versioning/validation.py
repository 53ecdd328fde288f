"""Required-field checks applied to history entries before they are written."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from content_versioning.versioning.sanitize import ABSENT, sanitize

HISTORY_REQUIRED_FIELDS: tuple[str, ...] = (
    "id",
    "contentId",
    "version",
    "timestamp",
    "userId",
    "changeType",
)


@dataclass
class ValidationResult:
    """Outcome of a required-field check, with the sanitized payload."""

    cleaned_data: dict[str, Any]
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _is_missing(value: Any) -> bool:
    return value is None or value is ABSENT or value == ""


def validate_required_fields(
    data: Mapping[str, Any], required_fields: tuple[str, ...] | list[str]
) -> ValidationResult:
    """Sanitize data, then report every required field that is missing or empty."""
    cleaned = sanitize(dict(data))
    errors = [
        f"Missing required field: {name}"
        for name in required_fields
        if _is_missing(cleaned.get(name))
    ]
    return ValidationResult(cleaned_data=cleaned, errors=errors)


def validate_history_entry(data: Mapping[str, Any]) -> ValidationResult:
    """Validate a history entry against HISTORY_REQUIRED_FIELDS."""
    return validate_required_fields(data, HISTORY_REQUIRED_FIELDS)
