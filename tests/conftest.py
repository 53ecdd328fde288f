"""Shared test fixtures."""

import asyncio

import pytest_asyncio

from content_versioning.db.connection import create_connection
from content_versioning.store.newsletter_versioning import NewsletterVersioningService
from content_versioning.versioning.core import ContentVersioningService

SPRING_ISSUE = {
    "id": "news-1",
    "title": "Spring Issue",
    "isPublished": False,
    "versioning": {"currentVersion": 1, "currentHash": "abc", "branch": "main"},
}


class RecordingStore:
    """Wraps a document store and records every write call.

    Set ``fail_on`` to a method name to make that write raise once, after
    ``fail_delay`` seconds.
    """

    def __init__(self, inner):
        self.inner = inner
        self.writes: list[tuple[str, tuple]] = []
        self.fail_on: str | None = None
        self.fail_delay = 0.0

    def server_timestamp(self):
        return self.inner.server_timestamp()

    def batch(self):
        return self.inner.batch()

    async def get_document(self, collection, doc_id):
        return await self.inner.get_document(collection, doc_id)

    async def get_sub_document(self, collection, doc_id, subcollection, sub_id):
        return await self.inner.get_sub_document(collection, doc_id, subcollection, sub_id)

    async def query_sub_documents(self, collection, doc_id, subcollection, **kwargs):
        return await self.inner.query_sub_documents(collection, doc_id, subcollection, **kwargs)

    async def count_sub_documents(self, collection, doc_id, subcollection):
        return await self.inner.count_sub_documents(collection, doc_id, subcollection)

    async def set_document(self, collection, doc_id, data, *, merge=False):
        self.writes.append(("set_document", (collection, doc_id)))
        if self.fail_on == "set_document":
            self.fail_on = None
            await asyncio.sleep(self.fail_delay)
            raise ConnectionError("store unavailable")
        await self.inner.set_document(collection, doc_id, data, merge=merge)

    async def set_sub_document(self, collection, doc_id, subcollection, sub_id, data):
        self.writes.append(("set_sub_document", (collection, doc_id, subcollection, sub_id)))
        if self.fail_on == "set_sub_document":
            self.fail_on = None
            await asyncio.sleep(self.fail_delay)
            raise ConnectionError("store unavailable")
        await self.inner.set_sub_document(collection, doc_id, subcollection, sub_id, data)

    async def close(self):
        await self.inner.close()


@pytest_asyncio.fixture
async def store():
    """In-memory document store with full schema."""
    conn = await create_connection(":memory:")
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def recording_store(store):
    """Document store that records writes."""
    return RecordingStore(store)


@pytest_asyncio.fixture
async def versioning(recording_store):
    """Versioning service backed by the recording in-memory store."""
    return ContentVersioningService(recording_store)


@pytest_asyncio.fixture
async def newsletters(versioning):
    """Newsletter versioning wrapper."""
    return NewsletterVersioningService(versioning)


@pytest_asyncio.fixture
async def spring_issue(store):
    """Seed news-1 at version 1, unpublished."""
    await store.set_document("newsletters", "news-1", dict(SPRING_ISSUE))
    return dict(SPRING_ISSUE)
