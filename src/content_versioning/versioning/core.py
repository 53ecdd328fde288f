"""Generic content versioning over a document store.

Every versioned update writes two records: a history entry holding the
full merged snapshot at ``{collection}/{id}/history/{version}``, then the
merged document itself at ``{collection}/{id}``. The read of the current
document and both writes run inside the store's ``batch()``, so a backend
with transactions applies them together.

No locking is done here. The SQLite store serializes batches, which keeps
versions linear; with a store whose batches do not exclude each other, two
concurrent updates can compute the same version number and the last
writer wins.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from content_versioning.db.backend import DocumentStore
from content_versioning.models.history import VersioningConfig, VersioningOptions
from content_versioning.versioning.changes import calculate_changes, determine_change_type
from content_versioning.versioning.errors import (
    DocumentNotFoundError,
    VersioningValidationError,
    VersionNotFoundError,
)
from content_versioning.versioning.hashing import calculate_hash
from content_versioning.versioning.sanitize import ABSENT, sanitize
from content_versioning.versioning.validation import validate_history_entry

logger = logging.getLogger(__name__)

HISTORY_SUBCOLLECTION = "history"


@dataclass
class IntegrityReport:
    """Agreement between a document, its stored hash and its history log."""

    content_id: str
    current_version: int
    latest_history_version: int | None
    stored_hash: str | None
    computed_hash: str

    @property
    def hash_matches(self) -> bool:
        return self.stored_hash == self.computed_hash

    @property
    def history_ahead(self) -> bool:
        """True if history holds a version the document never received."""
        return (self.latest_history_version or 0) > self.current_version

    @property
    def is_consistent(self) -> bool:
        return not self.history_ahead and (self.current_version == 0 or self.hash_matches)


def _current_version(document: Mapping[str, Any]) -> int:
    versioning = document.get("versioning") or {}
    return int(versioning.get("currentVersion") or 0)


class ContentVersioningService:
    """Versioned updates, history and restore for any document collection."""

    def __init__(self, store: DocumentStore, config: VersioningConfig | None = None):
        """Initialize with a document store and optional settings."""
        self.store = store
        self.config = config or VersioningConfig()

    async def update_with_versioning(
        self,
        collection: str,
        doc_id: str,
        updates: Mapping[str, Any],
        options: VersioningOptions,
    ) -> dict[str, Any]:
        """Merge updates into a document and record the result as a new version.

        Returns the merged document as written. Raises DocumentNotFoundError
        if the document does not exist and VersioningValidationError if the
        history entry is incomplete; neither case writes anything.
        """
        return await self._write_version(collection, doc_id, updates, options, replace=False)

    async def _write_version(
        self,
        collection: str,
        doc_id: str,
        updates: Mapping[str, Any],
        options: VersioningOptions,
        *,
        replace: bool,
    ) -> dict[str, Any]:
        """Record a new version. With replace, updates become the whole content."""
        try:
            async with self.store.batch():
                current = await self.store.get_document(collection, doc_id)
                if current is None:
                    raise DocumentNotFoundError(collection, doc_id)

                if replace:
                    dropped = {key: ABSENT for key in current if key not in updates}
                    updates = {**dropped, **updates}

                current_version = _current_version(current)
                new_version = current_version + 1
                branch = options.branch or self.config.default_branch

                changes = calculate_changes(current, updates)
                clean_updates = sanitize(dict(updates))

                content = clean_updates if replace else {**current, **clean_updates}
                merged: dict[str, Any] = {
                    **content,
                    "versioning": {
                        "currentVersion": new_version,
                        "currentHash": calculate_hash(content),
                        "parentVersion": current_version,
                        "branch": branch,
                    },
                    "updatedAt": datetime.now(UTC).isoformat(),
                    "updatedBy": options.user_id,
                }
                snapshot = sanitize(merged)

                history_entry = {
                    "id": f"{doc_id}_{new_version}",
                    "contentId": doc_id,
                    "version": new_version,
                    "timestamp": self.store.server_timestamp(),
                    "userId": options.user_id,
                    "changeType": determine_change_type(changes).value,
                    "changes": changes,
                    "snapshot": snapshot,
                    "hash": merged["versioning"]["currentHash"],
                    "comment": options.comment or "",
                    "branch": branch,
                }

                validation = validate_history_entry(history_entry)
                if not validation.is_valid:
                    logger.error("Versioning data validation failed: %s", validation.errors)
                    raise VersioningValidationError(validation.errors)

                await self.store.set_sub_document(
                    collection,
                    doc_id,
                    HISTORY_SUBCOLLECTION,
                    str(new_version),
                    validation.cleaned_data,
                )
                await self.store.set_document(collection, doc_id, snapshot, merge=not replace)
        except Exception:
            logger.warning(
                "Content versioning update failed for %s/%s", collection, doc_id, exc_info=True
            )
            raise

        logger.info("Updated %s/%s to version %d", collection, doc_id, new_version)
        return snapshot

    async def get_history(
        self, collection: str, content_id: str, limit: int | None = None
    ) -> list[dict[str, Any]]:
        """Return up to limit history entries, newest version first."""
        if limit is None:
            limit = self.config.max_history_entries
        try:
            return await self.store.query_sub_documents(
                collection,
                content_id,
                HISTORY_SUBCOLLECTION,
                order_by="version",
                direction="desc",
                limit=limit,
            )
        except Exception:
            logger.warning(
                "Failed to get history for %s/%s", collection, content_id, exc_info=True
            )
            raise

    async def get_version(self, collection: str, content_id: str, version: int) -> dict[str, Any]:
        """Return the history entry for one version."""
        entry = await self.store.get_sub_document(
            collection, content_id, HISTORY_SUBCOLLECTION, str(version)
        )
        if entry is None:
            raise VersionNotFoundError(collection, content_id, version)
        return entry

    async def count_versions(self, collection: str, content_id: str) -> int:
        """Return how many history entries a document has."""
        return await self.store.count_sub_documents(
            collection, content_id, HISTORY_SUBCOLLECTION
        )

    async def restore_version(
        self,
        collection: str,
        content_id: str,
        target_version: int,
        user_id: str,
        comment: str = "",
    ) -> dict[str, Any]:
        """Reapply a historical snapshot as a new version.

        The version counter keeps moving forward: restoring version K of a
        document at version N produces version N + 1 with K's content. The
        document is replaced, so fields added after version K are dropped.
        Returns the restored snapshot.
        """
        try:
            entry = await self.get_version(collection, content_id, target_version)
            restored = entry["snapshot"]
            await self._write_version(
                collection,
                content_id,
                restored,
                VersioningOptions(
                    user_id=user_id,
                    comment=comment or f"Restored to version {target_version}",
                ),
                replace=True,
            )
        except Exception:
            logger.warning(
                "Version restore failed for %s/%s", collection, content_id, exc_info=True
            )
            raise

        logger.info("Restored %s/%s to version %d", collection, content_id, target_version)
        return restored

    async def verify_integrity(self, collection: str, content_id: str) -> IntegrityReport:
        """Compare a document with its stored hash and its newest history entry.

        Detects content edited outside the versioning path (hash mismatch)
        and a history write whose document write never landed.
        """
        document = await self.store.get_document(collection, content_id)
        if document is None:
            raise DocumentNotFoundError(collection, content_id)

        latest = await self.get_history(collection, content_id, 1)
        versioning = document.get("versioning") or {}
        report = IntegrityReport(
            content_id=content_id,
            current_version=_current_version(document),
            latest_history_version=latest[0]["version"] if latest else None,
            stored_hash=versioning.get("currentHash"),
            computed_hash=calculate_hash(document),
        )
        if not report.is_consistent:
            logger.warning(
                "Integrity check failed for %s/%s: version %d, history %s, hash %s",
                collection,
                content_id,
                report.current_version,
                report.latest_history_version,
                "ok" if report.hash_matches else "mismatch",
            )
        return report
