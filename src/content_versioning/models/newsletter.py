"""Newsletter document models."""

from typing import Literal

from pydantic import Field

from content_versioning.models.document import BaseContentDocument
from content_versioning.models.history import HistoryEntry

Season = Literal["spring", "summer", "fall", "winter"]


class NewsletterDocument(BaseContentDocument):
    """A newsletter issue as stored in the ``newsletters`` collection."""

    filename: str | None = None
    description: str | None = None
    publication_date: str | None = None
    issue_number: str | None = None
    season: Season | None = None
    year: int | None = None
    file_size: int | None = None
    page_count: int | None = None
    thumbnail_url: str | None = None
    download_url: str | None = None
    storage_ref: str | None = None
    tags: list[str] = Field(default_factory=list)
    featured: bool = False
    is_published: bool = False
    searchable_text: str | None = None


class NewsletterHistory(HistoryEntry):
    """History entry whose snapshot is a newsletter."""

    @property
    def newsletter(self) -> NewsletterDocument:
        """The snapshot parsed as a NewsletterDocument."""
        return NewsletterDocument.model_validate(self.snapshot)
