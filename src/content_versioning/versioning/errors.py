"""Errors raised by the versioning core.

Each error carries a ``code`` so callers can branch without parsing
messages. Store failures are not wrapped; they propagate as raised.
"""


class VersioningError(Exception):
    """Base class for versioning failures."""

    code = "versioning_error"


class NotFoundError(VersioningError):
    """The target document or history version does not exist."""

    code = "not_found"


class DocumentNotFoundError(NotFoundError):
    """No document with the given id exists in the collection."""

    def __init__(self, collection: str, document_id: str) -> None:
        self.collection = collection
        self.document_id = document_id
        super().__init__(f"Document not found: {collection}/{document_id}")


class VersionNotFoundError(NotFoundError):
    """No history entry exists for the requested version."""

    def __init__(self, collection: str, document_id: str, version: int) -> None:
        self.collection = collection
        self.document_id = document_id
        self.version = version
        super().__init__(f"Version {version} not found for {collection}/{document_id}")


class VersioningValidationError(VersioningError):
    """A versioned write failed validation. Nothing was written."""

    code = "validation"

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Validation failed: {', '.join(self.errors)}")
