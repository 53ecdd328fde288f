"""SQLite implementation of the DocumentStore protocol.

Documents and sub-documents are stored as JSON text. Ordering queries use
``json_extract`` so any top-level field can serve as a sort key.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from content_versioning.db.backend import SERVER_TIMESTAMP, SortDirection
from content_versioning.versioning.sanitize import is_absent

if TYPE_CHECKING:
    import aiosqlite

logger = logging.getLogger(__name__)

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _json_default(value: Any) -> Any:
    """Encode values json can't handle natively. ABSENT is rejected."""
    if is_absent(value):
        raise TypeError("Unsupported field value: ABSENT")
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _resolve_timestamps(value: Any, now: str) -> Any:
    """Replace every SERVER_TIMESTAMP marker with now."""
    if value is SERVER_TIMESTAMP:
        return now
    if isinstance(value, dict):
        return {k: _resolve_timestamps(v, now) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_resolve_timestamps(item, now) for item in value]
    return value


def _encode(data: dict[str, Any]) -> str:
    now = datetime.now(UTC).isoformat()
    return json.dumps(_resolve_timestamps(data, now), default=_json_default)


class SQLiteDocumentStore:
    """DocumentStore backed by an aiosqlite connection.

    Outside a batch every write commits immediately. Inside ``batch()``
    writes are held in the open transaction and committed on exit, or
    rolled back if the block raises.

    The connection is shared, so every operation runs under one lock. A
    batch holds the lock until it exits; reads and writes from other tasks
    wait, and never see or commit a half-finished batch.
    """

    def __init__(self, conn: aiosqlite.Connection) -> None:
        """Initialize with an aiosqlite connection."""
        self._conn = conn
        self._lock = asyncio.Lock()
        self._owner: asyncio.Task[Any] | None = None
        self._in_batch = False

    @asynccontextmanager
    async def _exclusive(self) -> AsyncIterator[None]:
        """Hold the connection lock; reentrant for the task that owns it."""
        task = asyncio.current_task()
        if self._owner is not None and self._owner is task:
            yield
            return
        async with self._lock:
            self._owner = task
            try:
                yield
            finally:
                self._owner = None

    async def _maybe_commit(self) -> None:
        if not self._in_batch:
            await self._conn.commit()

    @asynccontextmanager
    async def batch(self) -> AsyncIterator[None]:
        """Commit all writes in the block together."""
        async with self._exclusive():
            if self._in_batch:
                yield
                return
            self._in_batch = True
            try:
                yield
            except BaseException:
                await self._conn.rollback()
                logger.warning("Batch rolled back")
                raise
            else:
                await self._conn.commit()
            finally:
                self._in_batch = False

    def server_timestamp(self) -> Any:
        """Return the marker resolved to the current UTC time on write."""
        return SERVER_TIMESTAMP

    # -- Documents --

    async def get_document(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Return the document, or None if it does not exist."""
        async with self._exclusive():
            cursor = await self._conn.execute(
                "SELECT data FROM documents WHERE collection = ? AND id = ?",
                (collection, doc_id),
            )
            row = await cursor.fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    async def set_document(
        self, collection: str, doc_id: str, data: dict[str, Any], *, merge: bool = False
    ) -> None:
        """Create or replace a document; with merge, top-level fields are merged in."""
        async with self._exclusive():
            payload = data
            if merge:
                existing = await self.get_document(collection, doc_id)
                if existing is not None:
                    payload = {**existing, **data}
            await self._conn.execute(
                """INSERT INTO documents (collection, id, data) VALUES (?, ?, ?)
                ON CONFLICT(collection, id) DO UPDATE SET data = excluded.data""",
                (collection, doc_id, _encode(payload)),
            )
            await self._maybe_commit()

    # -- Subcollections --

    async def get_sub_document(
        self, collection: str, doc_id: str, subcollection: str, sub_id: str
    ) -> dict[str, Any] | None:
        """Return a sub-document, or None if it does not exist."""
        async with self._exclusive():
            cursor = await self._conn.execute(
                """SELECT data FROM sub_documents
                WHERE collection = ? AND parent_id = ? AND subcollection = ? AND id = ?""",
                (collection, doc_id, subcollection, sub_id),
            )
            row = await cursor.fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    async def set_sub_document(
        self,
        collection: str,
        doc_id: str,
        subcollection: str,
        sub_id: str,
        data: dict[str, Any],
    ) -> None:
        """Create or replace a sub-document."""
        async with self._exclusive():
            await self._conn.execute(
                """INSERT INTO sub_documents (collection, parent_id, subcollection, id, data)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(collection, parent_id, subcollection, id)
                DO UPDATE SET data = excluded.data""",
                (collection, doc_id, subcollection, sub_id, _encode(data)),
            )
            await self._maybe_commit()

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
        if not _FIELD_RE.match(order_by):
            raise ValueError(f"Invalid order_by field: {order_by!r}")
        if direction not in ("asc", "desc"):
            raise ValueError(f"Invalid sort direction: {direction!r}")

        async with self._exclusive():
            cursor = await self._conn.execute(
                f"""SELECT data FROM sub_documents
                WHERE collection = ? AND parent_id = ? AND subcollection = ?
                ORDER BY json_extract(data, ?) {direction.upper()}
                LIMIT ?""",
                (
                    collection,
                    doc_id,
                    subcollection,
                    f"$.{order_by}",
                    -1 if limit is None else limit,
                ),
            )
            rows = await cursor.fetchall()
        return [json.loads(row[0]) for row in rows]

    async def count_sub_documents(self, collection: str, doc_id: str, subcollection: str) -> int:
        """Return the number of sub-documents in a subcollection."""
        async with self._exclusive():
            cursor = await self._conn.execute(
                """SELECT COUNT(*) FROM sub_documents
                WHERE collection = ? AND parent_id = ? AND subcollection = ?""",
                (collection, doc_id, subcollection),
            )
            row = await cursor.fetchone()
        return row[0] if row else 0

    async def close(self) -> None:
        """Close the database connection."""
        async with self._exclusive():
            await self._conn.close()
