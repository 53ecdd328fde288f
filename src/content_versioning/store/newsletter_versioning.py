"""Newsletter versioning — typed wrapper over the generic versioning service."""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from content_versioning.models.history import VersioningOptions
from content_versioning.models.newsletter import NewsletterDocument, NewsletterHistory
from content_versioning.versioning.core import ContentVersioningService, IntegrityReport
from content_versioning.versioning.errors import VersioningValidationError
from content_versioning.versioning.sanitize import sanitize

logger = logging.getLogger(__name__)

NEWSLETTER_COLLECTION = "newsletters"


def _as_updates(updates: NewsletterDocument | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(updates, NewsletterDocument):
        return updates.to_store()
    return dict(updates)


def _check_newsletter(data: Mapping[str, Any]) -> None:
    """Raise VersioningValidationError if data is not a valid newsletter."""
    try:
        NewsletterDocument.model_validate(data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        ]
        raise VersioningValidationError(errors) from e


class NewsletterVersioningService:
    """Versioned updates, history and restore for the newsletters collection."""

    collection = NEWSLETTER_COLLECTION

    def __init__(self, core: ContentVersioningService):
        """Initialize with the generic versioning service."""
        self.core = core

    async def get_newsletter(self, newsletter_id: str) -> NewsletterDocument | None:
        """Get the current state of a newsletter."""
        data = await self.core.store.get_document(self.collection, newsletter_id)
        if data is None:
            return None
        return NewsletterDocument.model_validate(data)

    async def update_newsletter(
        self,
        newsletter_id: str,
        updates: NewsletterDocument | Mapping[str, Any],
        options: VersioningOptions,
    ) -> NewsletterDocument:
        """Apply a versioned update to a newsletter.

        A NewsletterDocument contributes only the fields explicitly set on it.
        The merged result is checked against the newsletter model first; an
        invalid update raises VersioningValidationError and writes nothing.
        """
        changes = _as_updates(updates)
        current = await self.core.store.get_document(self.collection, newsletter_id)
        if current is not None:
            try:
                _check_newsletter({**current, **sanitize(changes)})
            except VersioningValidationError as e:
                logger.warning("Rejected update to newsletter %s: %s", newsletter_id, e)
                raise
        merged = await self.core.update_with_versioning(
            self.collection, newsletter_id, changes, options
        )
        logger.info("Updated newsletter %s", newsletter_id)
        return NewsletterDocument.model_validate(merged)

    async def get_newsletter_history(
        self, newsletter_id: str, limit: int | None = None
    ) -> list[NewsletterHistory]:
        """Get newsletter history, newest version first."""
        history = await self.core.get_history(self.collection, newsletter_id, limit)
        return [NewsletterHistory.model_validate(entry) for entry in history]

    async def restore_newsletter_version(
        self, newsletter_id: str, version: int, user_id: str, comment: str = ""
    ) -> NewsletterDocument:
        """Restore a newsletter to the content of an earlier version."""
        restored = await self.core.restore_version(
            self.collection, newsletter_id, version, user_id, comment
        )
        logger.info("Restored newsletter %s to version %d", newsletter_id, version)
        return NewsletterDocument.model_validate(restored)

    async def get_newsletter_version_count(self, newsletter_id: str) -> int:
        """Number of recorded versions for a newsletter."""
        return await self.core.count_versions(self.collection, newsletter_id)

    async def has_versioning(self, newsletter_id: str) -> bool:
        """True if the newsletter has at least one history entry."""
        history = await self.core.get_history(self.collection, newsletter_id, 1)
        return bool(history)

    async def check_integrity(self, newsletter_id: str) -> IntegrityReport:
        """Check a newsletter against its stored hash and history."""
        return await self.core.verify_integrity(self.collection, newsletter_id)
