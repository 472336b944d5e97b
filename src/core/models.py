# src/core/models.py — v1
"""Shared Pydantic models used across modules: validation issues.

Capability and completeness problems are collected in a single pass and
returned alongside the best-effort parsed record, never raised mid-parse.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict


class ViolationKind(str, Enum):
    """Category of a collected validation issue."""

    OPERATOR_NOT_SUPPORTED = "OperatorNotSupported"
    FIELD_NOT_SUPPORTED = "FieldNotSupported"
    MISSING_MANDATORY_FIELD = "MissingMandatoryField"
    CONFLICTING_PHASE_SENTINEL = "ConflictingPhaseSentinel"
    PHASE_NOT_SUPPORTED = "PhaseNotSupported"
    SYNTAX_NOT_SUPPORTED = "SyntaxNotSupported"
    UNRECOGNIZED_LEVEL = "UnrecognizedLevel"


class ValidationIssue(BaseModel):
    """One problem found while gating a record against its EAPI."""

    model_config = ConfigDict(frozen=True)

    kind: ViolationKind
    field: str
    message: str
    severity: Literal["error", "warning"] = "error"

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.field}: {self.message}"
