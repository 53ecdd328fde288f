"""Field-level change detection and change-type classification."""

from collections.abc import Mapping
from numbers import Real
from typing import Any

from content_versioning.models.history import ChangeType
from content_versioning.versioning.hashing import canonical_json
from content_versioning.versioning.sanitize import ABSENT

_CONTAINER_TYPES = (dict, list, tuple)


def _is_null(value: Any) -> bool:
    return value is None or value is ABSENT


def _same_scalar(old_value: Any, new_value: Any) -> bool:
    """Strict scalar equality: bools only equal bools, ints and floats compare numerically."""
    if isinstance(old_value, bool) or isinstance(new_value, bool):
        return type(old_value) is type(new_value) and old_value == new_value
    if isinstance(old_value, Real) and isinstance(new_value, Real):
        return old_value == new_value
    return type(old_value) is type(new_value) and old_value == new_value


def has_changed(old_value: Any, new_value: Any) -> bool:
    """Return True if old_value and new_value differ.

    Containers compare by their JSON rendering, so nested dicts and lists
    are compared structurally. Scalars must match in type as well as value,
    which keeps ``True`` and ``1`` distinct.
    """
    if old_value is new_value:
        return False

    if _is_null(old_value) or _is_null(new_value):
        return not (_is_null(old_value) and _is_null(new_value))

    old_is_container = isinstance(old_value, _CONTAINER_TYPES)
    new_is_container = isinstance(new_value, _CONTAINER_TYPES)
    if old_is_container and new_is_container:
        return canonical_json(old_value) != canonical_json(new_value)
    if old_is_container or new_is_container:
        return True

    return not _same_scalar(old_value, new_value)


def calculate_changes(
    current: Mapping[str, Any], updates: Mapping[str, Any]
) -> dict[str, list[Any]]:
    """Map each changed key in updates to ``[old_value, new_value]``.

    Keys absent from current are reported with an old value of ``None``.
    An ABSENT update value counts as a change from any non-null value and
    is recorded as ``None``.
    """
    changes: dict[str, list[Any]] = {}
    for key, new_value in updates.items():
        old_value = current.get(key, ABSENT)
        if has_changed(old_value, new_value):
            changes[key] = [
                None if old_value is ABSENT else old_value,
                None if new_value is ABSENT else new_value,
            ]
    return changes


def determine_change_type(changes: Mapping[str, list[Any]]) -> ChangeType:
    """Classify a change set. Publication flips win over plain updates."""
    if "isPublished" in changes:
        _, new_value = changes["isPublished"]
        return ChangeType.PUBLISH if new_value else ChangeType.ARCHIVE
    return ChangeType.UPDATE
