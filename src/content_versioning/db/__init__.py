"""Document store protocol and backends."""

from content_versioning.db.backend import SERVER_TIMESTAMP, DocumentStore
from content_versioning.db.sqlite_backend import SQLiteDocumentStore

__all__ = ["SERVER_TIMESTAMP", "DocumentStore", "SQLiteDocumentStore"]
