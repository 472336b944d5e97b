# src/primitives/keyword.py — v1
"""KEYWORDS entries: architecture name with a leading stability marker.

``amd64`` is stable, ``~amd64`` testing, ``-amd64`` masked. The arch ``*``
is a wildcard, as in ``-*``.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict

from ebuildmeta.core.errors import InvalidKeywordError

_ARCH = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_-]*$")
WILDCARD_ARCH = "*"


class Stability(str, Enum):
    STABLE = "stable"
    TESTING = "testing"
    MASKED = "masked"


_MARKERS: dict[str, Stability] = {"~": Stability.TESTING, "-": Stability.MASKED}
_PREFIXES: dict[Stability, str] = {
    Stability.STABLE: "",
    Stability.TESTING: "~",
    Stability.MASKED: "-",
}


class Keyword(BaseModel):
    """A single architecture keyword."""

    model_config = ConfigDict(frozen=True)

    arch: str
    stability: Stability = Stability.STABLE

    @property
    def is_wildcard(self) -> bool:
        return self.arch == WILDCARD_ARCH

    def __str__(self) -> str:
        return f"{_PREFIXES[self.stability]}{self.arch}"


def parse_keyword(token: str) -> Keyword:
    """Parse one keyword token such as ``~arm64`` or ``-*``."""
    if not token:
        raise InvalidKeywordError("empty keyword", field="KEYWORDS")

    stability = _MARKERS.get(token[0], Stability.STABLE)
    arch = token[1:] if stability is not Stability.STABLE else token
    if arch != WILDCARD_ARCH and not _ARCH.match(arch):
        raise InvalidKeywordError(f"invalid keyword: {token!r}", field="KEYWORDS")
    return Keyword(arch=arch, stability=stability)


def parse_keywords(value: str) -> tuple[Keyword, ...]:
    """Parse a whitespace-separated KEYWORDS value."""
    return tuple(parse_keyword(token) for token in value.split())
