"""Strip store-incompatible values from a document tree before persisting."""

from typing import Any, Final


class _Absent:
    """Marker for a field that has no value at all.

    The document store accepts ``None`` but rejects ``ABSENT`` anywhere in a
    payload, so every write goes through :func:`sanitize` first.
    """

    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Absent":
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "_Absent":
        return self


ABSENT: Final = _Absent()


def is_absent(value: Any) -> bool:
    """Return True if value is the ABSENT marker."""
    return value is ABSENT


def sanitize(value: Any) -> Any:
    """Recursively remove ABSENT from dict values and list/tuple elements.

    Dicts and lists are rebuilt (the input is never mutated); tuples come
    back as lists. ``None`` and every other scalar pass through unchanged.
    """
    if isinstance(value, dict):
        return {k: sanitize(v) for k, v in value.items() if v is not ABSENT}
    if isinstance(value, (list, tuple)):
        return [sanitize(item) for item in value if item is not ABSENT]
    return value
