# src/cache/models.py — v1
"""Cache domain models: EclassEntry, CacheEntry, CacheParseResult."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from ebuildmeta.core.errors import MetadataValidationError
from ebuildmeta.core.models import ValidationIssue
from ebuildmeta.metadata.models import EbuildMetadata


class EclassEntry(BaseModel):
    """An inherited eclass and the checksum it had when the entry was generated."""

    model_config = ConfigDict(frozen=True)

    name: str
    checksum: str


class CacheEntry(BaseModel):
    """One md5-cache record."""

    model_config = ConfigDict(frozen=True)

    metadata: EbuildMetadata
    md5: str | None = None
    eclasses: tuple[EclassEntry, ...] = ()
    # Unrecognized keys, verbatim, in first-seen order.
    extra: tuple[tuple[str, str], ...] = ()

    @field_validator("extra", mode="before")
    @classmethod
    def pairs_from_mapping(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return tuple(value.items())
        return value

    @property
    def extra_fields(self) -> dict[str, str]:
        """Copy of the unrecognized keys as a dict."""
        return dict(self.extra)

    @property
    def eclass_names(self) -> list[str]:
        return [e.name for e in self.eclasses]


class CacheParseResult(BaseModel):
    """Parsed entry plus every validation issue collected for it."""

    model_config = ConfigDict(frozen=True)

    entry: CacheEntry
    issues: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.is_error]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if not issue.is_error]

    def raise_for_issues(self) -> CacheEntry:
        """Return the entry, or raise MetadataValidationError if it has errors."""
        errors = self.errors
        if errors:
            raise MetadataValidationError(errors)
        return self.entry
