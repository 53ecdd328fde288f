"""Newsletter MCP tools — read, create, versioned update, history and restore."""

import logging
from datetime import UTC, datetime
from typing import Annotated, Any

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from content_versioning.models.history import VersioningOptions
from content_versioning.models.newsletter import NewsletterDocument
from content_versioning.store.newsletter_versioning import NewsletterVersioningService
from content_versioning.tools.formatters import (
    format_history_entry,
    format_newsletter,
    format_result_list,
)
from content_versioning.versioning.errors import VersioningError

logger = logging.getLogger(__name__)

_MAX_HISTORY = 200


async def create_newsletter(
    service: NewsletterVersioningService,
    newsletter_id: str,
    title: str,
    user_id: str,
    fields: dict[str, Any] | None = None,
) -> NewsletterDocument:
    """Write the initial state of a newsletter.

    The initial state has no versioning block and no history entry; the
    first versioned update makes it version 1.
    """
    store = service.core.store
    if await store.get_document(service.collection, newsletter_id) is not None:
        raise ValueError(f"Newsletter {newsletter_id} already exists")

    now = datetime.now(UTC).isoformat()
    data: dict[str, Any] = {
        **(fields or {}),
        "id": newsletter_id,
        "title": title,
        "createdAt": now,
        "updatedAt": now,
        "createdBy": user_id,
        "updatedBy": user_id,
    }
    newsletter = NewsletterDocument.model_validate(data)
    await store.set_document(service.collection, newsletter_id, newsletter.to_store())
    logger.info("Created newsletter %s: %s", newsletter_id, title)
    return newsletter


async def handle_get(service: NewsletterVersioningService, newsletter_id: str) -> str:
    """Current newsletter state, or a not-found line."""
    newsletter = await service.get_newsletter(newsletter_id)
    if newsletter is None:
        return f"[{newsletter_id}] not found"
    return format_newsletter(newsletter)


async def handle_create(
    service: NewsletterVersioningService,
    newsletter_id: str,
    title: str,
    user_id: str,
    fields: dict[str, Any] | None = None,
) -> str:
    """Create a newsletter and format the result."""
    try:
        newsletter = await create_newsletter(service, newsletter_id, title, user_id, fields)
    except ValueError as e:
        return f"Error: {e}"
    return f"Created {newsletter.id}\n{format_newsletter(newsletter)}"


async def handle_update(
    service: NewsletterVersioningService,
    newsletter_id: str,
    updates: dict[str, Any],
    user_id: str,
    comment: str = "",
    branch: str | None = None,
) -> str:
    """Apply a versioned update and format the new state."""
    options = VersioningOptions(user_id=user_id, comment=comment, branch=branch)
    try:
        newsletter = await service.update_newsletter(newsletter_id, updates, options)
    except VersioningError as e:
        return f"Error ({e.code}): {e}"
    header = f"Updated {newsletter.id} (v{newsletter.current_version})"
    return f"{header}\n{format_newsletter(newsletter)}"


async def handle_history(
    service: NewsletterVersioningService, newsletter_id: str, limit: int | None = None
) -> str:
    """Format a newsletter's history, newest first."""
    if limit is not None and limit > _MAX_HISTORY:
        return f"Error: Maximum {_MAX_HISTORY} history entries per request (got {limit})."
    history = await service.get_newsletter_history(newsletter_id, limit)
    formatted = [format_history_entry(entry) for entry in history]
    return format_result_list(formatted, header=f"History for {newsletter_id}")


async def handle_restore(
    service: NewsletterVersioningService,
    newsletter_id: str,
    version: int,
    user_id: str,
    comment: str = "",
) -> str:
    """Restore an earlier version and format the new state."""
    try:
        await service.restore_newsletter_version(newsletter_id, version, user_id, comment)
    except VersioningError as e:
        return f"Error ({e.code}): {e}"
    newsletter = await service.get_newsletter(newsletter_id)
    if newsletter is None:
        return f"[{newsletter_id}] not found"
    return f"Restored {newsletter_id} to v{version} content\n{format_newsletter(newsletter)}"


def register_newsletter_tools(mcp: FastMCP) -> None:
    """Register the newsletter tools with the MCP server."""

    def _service(ctx: Context | None) -> NewsletterVersioningService:
        if ctx is None:
            raise RuntimeError("Context not injected")
        return ctx.lifespan_context["newsletters"]

    @mcp.tool()
    async def newsletter_get(
        newsletter_id: Annotated[str, Field(description="Newsletter ID")],
        ctx: Context | None = None,
    ) -> str:
        """Show the current state of a newsletter, including its version and hash."""
        return await handle_get(_service(ctx), newsletter_id)

    @mcp.tool()
    async def newsletter_create(
        newsletter_id: Annotated[str, Field(description="New newsletter ID")],
        title: Annotated[str, Field(description="Newsletter title")],
        user_id: Annotated[str, Field(description="ID of the user creating it")],
        fields: Annotated[
            dict[str, Any] | None,
            Field(description="Additional stored fields, camelCase (e.g. isPublished, tags)"),
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Create a newsletter. It becomes version 1 on its first update."""
        return await handle_create(_service(ctx), newsletter_id, title, user_id, fields)

    @mcp.tool()
    async def newsletter_update(
        newsletter_id: Annotated[str, Field(description="Newsletter ID to update")],
        updates: Annotated[
            dict[str, Any], Field(description="Fields to merge in, camelCase field names")
        ],
        user_id: Annotated[str, Field(description="ID of the user making the change")],
        comment: Annotated[str, Field(description="Note recorded with the version")] = "",
        branch: Annotated[
            str | None, Field(description="Branch label: main, draft or user-{id}")
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Update a newsletter and record the change as a new version.

        Setting isPublished records a publish (true) or archive (false) version.
        """
        return await handle_update(
            _service(ctx), newsletter_id, updates, user_id, comment, branch
        )

    @mcp.tool()
    async def newsletter_history(
        newsletter_id: Annotated[str, Field(description="Newsletter ID")],
        limit: Annotated[
            int | None, Field(description="Max entries (default from config)", ge=1)
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """List a newsletter's versions, newest first, with field-level changes."""
        return await handle_history(_service(ctx), newsletter_id, limit)

    @mcp.tool()
    async def newsletter_restore(
        newsletter_id: Annotated[str, Field(description="Newsletter ID")],
        version: Annotated[int, Field(description="Version to restore", ge=1)],
        user_id: Annotated[str, Field(description="ID of the user restoring")],
        comment: Annotated[str, Field(description="Note recorded with the restore")] = "",
        ctx: Context | None = None,
    ) -> str:
        """Restore an earlier version's content as a new version.

        The version number always moves forward; history is never rewound.
        """
        return await handle_restore(_service(ctx), newsletter_id, version, user_id, comment)
