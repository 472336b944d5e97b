# src/metadata/models.py — v1
"""EbuildMetadata: one typed attribute per recognized cache key.

Expression fields hold the top-level ``AllOf`` of their tree, or None
when the key is absent or empty. Mandatory fields are None only in a
best-effort result whose issue list reports them missing.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, InstanceOf, field_validator

from ebuildmeta.core.models import ValidationIssue
from ebuildmeta.eapi.capabilities import DEFAULT_EAPI, Eapi
from ebuildmeta.grammar.nodes import AllOf
from ebuildmeta.primitives.iuse import IUse
from ebuildmeta.primitives.keyword import Keyword, Stability
from ebuildmeta.primitives.phase import DefinedPhases
from ebuildmeta.primitives.slot import Slot


class EbuildMetadata(BaseModel):
    """Metadata for a single package version."""

    model_config = ConfigDict(frozen=True)

    # --- Mandatory ---
    eapi: InstanceOf[Eapi] | None = None
    description: str | None = None
    slot: Slot | None = None

    # --- Lists ---
    homepage: tuple[str, ...] = ()
    keywords: tuple[Keyword, ...] = ()
    iuse: tuple[IUse, ...] = ()
    inherited: tuple[str, ...] = ()
    defined_phases: DefinedPhases | None = None

    # --- Expression trees ---
    src_uri: InstanceOf[AllOf] | None = None
    license: InstanceOf[AllOf] | None = None
    required_use: InstanceOf[AllOf] | None = None
    restrict: InstanceOf[AllOf] | None = None
    properties: InstanceOf[AllOf] | None = None
    depend: InstanceOf[AllOf] | None = None
    rdepend: InstanceOf[AllOf] | None = None
    pdepend: InstanceOf[AllOf] | None = None
    bdepend: InstanceOf[AllOf] | None = None
    idepend: InstanceOf[AllOf] | None = None

    @field_validator("description")
    @classmethod
    def validate_single_line(cls, v: str | None) -> str | None:
        if v is not None and ("\n" in v or "\r" in v):
            raise ValueError("description must be a single line")
        return v

    @property
    def effective_eapi(self) -> Eapi:
        """EAPI used for gating; a record without EAPI is treated as EAPI 0."""
        return self.eapi if self.eapi is not None else DEFAULT_EAPI

    def keywords_with(self, stability: Stability) -> list[str]:
        """Arches carrying the given stability marker."""
        return [kw.arch for kw in self.keywords if kw.stability is stability]

    @property
    def iuse_names(self) -> list[str]:
        return [flag.name for flag in self.iuse]


class MetadataBuildResult(BaseModel):
    """Best-effort metadata plus every issue found while gating it."""

    model_config = ConfigDict(frozen=True)

    metadata: EbuildMetadata
    issues: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not any(issue.is_error for issue in self.issues)
