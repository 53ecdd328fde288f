"""FastMCP server with lifespan management and tool registration."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP

from content_versioning.config import (
    get_db_path,
    get_default_branch,
    get_log_level,
    get_max_history_entries,
)
from content_versioning.db.connection import create_connection
from content_versioning.models.history import VersioningConfig
from content_versioning.store.newsletter_versioning import NewsletterVersioningService
from content_versioning.tools.newsletter_tools import register_newsletter_tools
from content_versioning.versioning.core import ContentVersioningService


def build_config() -> VersioningConfig:
    """Versioning settings from the environment."""
    return VersioningConfig(
        max_history_entries=get_max_history_entries(),
        default_branch=get_default_branch(),
    )


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Manage the document store lifecycle."""
    # Logs go to stderr; stdout is the MCP stdio transport
    logging.basicConfig(
        level=getattr(logging, get_log_level(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)

    db_path = get_db_path()
    logger.info("Opening document store at %s", db_path)
    store = await create_connection(db_path)

    core = ContentVersioningService(store, build_config())
    newsletters = NewsletterVersioningService(core)

    try:
        yield {"store": store, "versioning": core, "newsletters": newsletters}
    finally:
        await store.close()
        logger.info("Document store closed")


_INSTRUCTIONS = """\
Versioned newsletter content. Every update records a new version with the \
full document snapshot, the fields that changed, and who changed them.

- newsletter_get: current state, version number and content hash.
- newsletter_create: create a newsletter (version 1 comes with its first update).
- newsletter_update: merge fields and record a new version. Setting \
isPublished records a publish or archive version.
- newsletter_history: versions newest first, with field-level changes.
- newsletter_restore: bring back an earlier version's content. This creates \
a new version; history is never rewound.

Field names are camelCase as stored (isPublished, publicationDate, tags).
"""


def create_server() -> FastMCP:
    """Create and configure the MCP server with all tools."""
    mcp = FastMCP(
        "content-versioning",
        instructions=_INSTRUCTIONS,
        lifespan=lifespan,
    )
    register_newsletter_tools(mcp)
    return mcp
