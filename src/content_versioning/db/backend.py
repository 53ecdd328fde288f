"""Document store protocol — the only external collaborator of the versioning core.

Documents are addressed by ``(collection, id)``. Each document may own
named subcollections of sub-documents (``history`` is the one the core
uses). Payloads are plain JSON-compatible dicts.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Any, Final, Literal, Protocol, runtime_checkable

SortDirection = Literal["asc", "desc"]


class _ServerTimestamp:
    """Placeholder replaced by the store with its own clock at write time."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP: Final = _ServerTimestamp()


@runtime_checkable
class DocumentStore(Protocol):
    """Async document store.

    Writes issued inside ``batch()`` are applied together or not at all
    where the backend supports it; outside a batch each write stands alone.
    """

    async def get_document(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Return the document, or None if it does not exist."""
        ...

    async def set_document(
        self, collection: str, doc_id: str, data: dict[str, Any], *, merge: bool = False
    ) -> None:
        """Create or replace a document; with merge, top-level fields are merged in."""
        ...

    async def get_sub_document(
        self, collection: str, doc_id: str, subcollection: str, sub_id: str
    ) -> dict[str, Any] | None:
        """Return a sub-document, or None if it does not exist."""
        ...

    async def set_sub_document(
        self,
        collection: str,
        doc_id: str,
        subcollection: str,
        sub_id: str,
        data: dict[str, Any],
    ) -> None:
        """Create or replace a sub-document."""
        ...

    async def query_sub_documents(
        self,
        collection: str,
        doc_id: str,
        subcollection: str,
        *,
        order_by: str,
        direction: SortDirection = "asc",
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return sub-documents ordered by a top-level field."""
        ...

    async def count_sub_documents(self, collection: str, doc_id: str, subcollection: str) -> int:
        """Return the number of sub-documents in a subcollection."""
        ...

    def server_timestamp(self) -> Any:
        """Return a marker the store resolves to its own time on write."""
        ...

    def batch(self) -> AbstractAsyncContextManager[None]:
        """Group writes so they are committed together.

        The block owns the store: operations from other tasks wait until it exits.
        """
        ...

    async def close(self) -> None:
        """Release the underlying connection."""
        ...
