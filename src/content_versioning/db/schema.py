"""DDL for the document store."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import aiosqlite

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS documents (
    collection TEXT NOT NULL,
    id TEXT NOT NULL,
    data TEXT NOT NULL,
    PRIMARY KEY (collection, id)
);

CREATE TABLE IF NOT EXISTS sub_documents (
    collection TEXT NOT NULL,
    parent_id TEXT NOT NULL,
    subcollection TEXT NOT NULL,
    id TEXT NOT NULL,
    data TEXT NOT NULL,
    PRIMARY KEY (collection, parent_id, subcollection, id)
);

CREATE INDEX IF NOT EXISTS idx_sub_documents_parent
    ON sub_documents(collection, parent_id, subcollection);
"""


async def apply_schema(conn: aiosqlite.Connection) -> None:
    """Create tables and record the schema version."""
    await conn.executescript(SCHEMA_SQL)
    cursor = await conn.execute("SELECT version FROM schema_version")
    row = await cursor.fetchone()
    if row is None:
        await conn.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
    await conn.commit()
