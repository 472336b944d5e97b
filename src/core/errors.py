# src/core/errors.py — v1
"""Exception taxonomy for cache parsing, grammar and validation failures.

Every exception exposes a ``kind`` string naming its category, so callers
can branch on it without importing each class.

Structural and semantic errors abort parsing of a record. Capability and
completeness problems never raise during parsing; they are collected as
``ValidationIssue`` objects (see ``ebuildmeta.core.models``) and only
surface as ``MetadataValidationError`` when a caller asks for it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ebuildmeta.core.models import ValidationIssue


class MetadataError(Exception):
    """Base class for every error raised by ebuildmeta."""

    kind = "MetadataError"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def with_field(self, field: str) -> MetadataError:
        """Attach the cache key being parsed when the error was raised."""
        if self.field is None:
            self.field = field
        return self

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


# === STRUCTURAL ===


class StructuralError(MetadataError):
    """The input cannot be split into a usable record."""

    kind = "StructuralError"


class MalformedLineError(StructuralError):
    """A non-empty cache line has no ``=`` separator or an empty key."""

    kind = "MalformedLine"

    def __init__(self, line_number: int, line: str) -> None:
        super().__init__(f"line {line_number}: expected KEY=VALUE, got {line!r}")
        self.line_number = line_number
        self.line = line


class DuplicateKeyError(StructuralError):
    """A key appears twice and the codec is configured to reject that."""

    kind = "DuplicateKey"

    def __init__(self, key: str, line_number: int) -> None:
        super().__init__(f"line {line_number}: duplicate key {key!r}", field=key)
        self.key = key
        self.line_number = line_number


class MalformedEclassListError(StructuralError):
    """``_eclasses_`` does not hold name/checksum pairs."""

    kind = "MalformedEclassList"


class InvalidChecksumFormatError(StructuralError):
    """``_md5_`` is not 32 lowercase hexadecimal characters."""

    kind = "InvalidChecksumFormat"


class InvalidEncodingError(StructuralError):
    """A cache file is not valid UTF-8."""

    kind = "InvalidEncoding"

    def __init__(self, path: str, offset: int, reason: str) -> None:
        super().__init__(f"{path}: invalid UTF-8 at byte {offset} ({reason})")
        self.path = path
        self.offset = offset


class GrammarError(StructuralError):
    """Expression text does not follow the group grammar."""

    kind = "GrammarError"

    def __init__(
        self, message: str, *, position: int | None = None, field: str | None = None
    ) -> None:
        if position is not None:
            message = f"{message} (token {position})"
        super().__init__(message, field=field)
        self.position = position


class UnterminatedGroupError(GrammarError):
    kind = "UnterminatedGroup"


class UnexpectedCloseParenError(GrammarError):
    kind = "UnexpectedCloseParen"


class EmptyGroupError(GrammarError):
    kind = "EmptyGroup"


class MissingGroupOpenError(GrammarError):
    """A group operator or conditional is not followed by ``(``."""

    kind = "MissingGroupOpen"


class InvalidLeafError(GrammarError):
    """The field's leaf parser rejected a token."""

    kind = "InvalidLeaf"


# === SEMANTIC ===


class SemanticError(MetadataError):
    """A token is well placed but its content is not acceptable."""

    kind = "SemanticError"


class InvalidFlagNameError(GrammarError, SemanticError):
    """A USE flag name fails the shared flag-name check."""

    kind = "InvalidFlagName"


class InvalidDescriptionError(SemanticError):
    """DESCRIPTION contains a line break."""

    kind = "InvalidDescription"


class InvalidLevelTokenError(SemanticError):
    kind = "InvalidLevelToken"


class UnrecognizedLevelError(SemanticError):
    """Raised only in strict mode; otherwise unknown EAPIs degrade to future levels."""

    kind = "UnrecognizedLevel"


class InvalidKeywordError(SemanticError):
    kind = "InvalidKeyword"


class InvalidIUseError(SemanticError):
    kind = "InvalidIUse"


class InvalidPhaseError(SemanticError):
    kind = "InvalidPhase"


class InvalidSlotError(SemanticError):
    kind = "InvalidSlot"


# === VALIDATION ===


class MetadataValidationError(MetadataError):
    """Raised on request when a parsed record carries error-severity issues."""

    kind = "ValidationFailed"

    def __init__(self, issues: list[ValidationIssue]) -> None:
        summary = "; ".join(str(issue) for issue in issues)
        super().__init__(f"{len(issues)} validation error(s): {summary}")
        self.issues = issues
