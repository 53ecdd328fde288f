"""Document store connection management."""

import logging
from pathlib import Path

import aiosqlite

from content_versioning.config import get_db_path
from content_versioning.db.schema import apply_schema
from content_versioning.db.sqlite_backend import SQLiteDocumentStore

logger = logging.getLogger(__name__)


async def create_connection(db_path: Path | str | None = None) -> SQLiteDocumentStore:
    """Open the document store and apply the schema.

    Defaults to CV_DB_PATH. Pass ":memory:" for an in-memory store.
    """
    db_path = str(db_path or get_db_path())

    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)

    if db_path != ":memory:":
        await conn.execute("PRAGMA journal_mode=WAL")
    await conn.execute("PRAGMA foreign_keys=ON")

    await apply_schema(conn)
    logger.debug("Document store ready at %s", db_path)

    return SQLiteDocumentStore(conn)
