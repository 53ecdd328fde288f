"""Base models for versioned content documents."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StoredModel(BaseModel):
    """Model persisted with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_store(self) -> dict[str, object]:
        """Dump with stored (camelCase) names, skipping fields never set."""
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


class VersioningInfo(StoredModel):
    """Versioning bookkeeping kept on the current document."""

    current_version: int = Field(ge=0)
    current_hash: str
    parent_version: int | None = None
    branch: str = "main"


class BaseContentDocument(StoredModel):
    """Any document eligible for versioning.

    Extra fields are the content payload and are kept as-is.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    title: str
    versioning: VersioningInfo | None = None
    created_at: str | None = None
    updated_at: str | None = None
    created_by: str | None = None
    updated_by: str | None = None

    @property
    def current_version(self) -> int:
        """Version number, 0 if the document was never versioned."""
        return self.versioning.current_version if self.versioning else 0
