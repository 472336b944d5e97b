# src/grammar/leaves.py — v1
"""Leaf parsers for each grammar-bearing field.

Each parser turns one plain token (or ``uri -> name`` for SRC_URI) into
a typed leaf value and raises InvalidLeafError on bad input. The atom
parser is deliberately shallow: it splits out the parts that EAPI
gating needs and keeps the raw text for exact output. Callers with a
full atom implementation can pass their own parser instead.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict

from ebuildmeta.core.errors import InvalidLeafError
from ebuildmeta.primitives.flags import check_flag_name

_NAME_TOKEN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9+_.-]*$")
_SLOT_NAME = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9+_.-]*$")
_ATOM = re.compile(
    r"^(?P<blocker>!!?)?"
    r"(?P<operator><=|>=|<|>|=|~)?"
    r"(?P<package>[A-Za-z0-9_][A-Za-z0-9+_.-]*/[A-Za-z0-9_][A-Za-z0-9+_.*-]*)"
    r"(?::(?P<slot>[A-Za-z0-9_*=][A-Za-z0-9+_.=/-]*))?"
    r"(?:\[(?P<use>[^\[\]]+)\])?"
    r"(?:::(?P<repo>[A-Za-z0-9_][A-Za-z0-9_-]*))?$"
)
_VERSION_SUFFIX = re.compile(r"-[0-9][^/]*$")
_RENAME_ARROW = "->"
_URI_RESTRICTIONS = ("fetch", "mirror")


# === DEPENDENCY ATOMS ===


class Atom(BaseModel):
    """Dependency leaf with just enough structure for EAPI gating."""

    model_config = ConfigDict(frozen=True)

    raw: str
    package: str
    blocker: Literal["", "!", "!!"] = ""
    operator: str = ""
    slot: str | None = None
    subslot: str | None = None
    slot_operator: Literal["", "=", "*"] = ""
    use_deps: str | None = None
    repo: str | None = None

    @property
    def category(self) -> str:
        return self.package.split("/", 1)[0]

    def __str__(self) -> str:
        return self.raw


def parse_atom(text: str) -> Atom:
    """Parse a dependency token such as ``>=dev-lang/python-3.11:3.11[ssl]``."""
    match = _ATOM.match(text)
    if not match:
        raise InvalidLeafError(f"invalid dependency atom: {text!r}")

    operator = match["operator"] or ""
    package = match["package"]
    if operator and not _VERSION_SUFFIX.search(package):
        raise InvalidLeafError(f"version operator without a version: {text!r}")

    slot, subslot, slot_operator = _split_slot(match["slot"], text)
    return Atom(
        raw=text,
        package=package,
        blocker=match["blocker"] or "",
        operator=operator,
        slot=slot,
        subslot=subslot,
        slot_operator=slot_operator,
        use_deps=match["use"],
        repo=match["repo"],
    )


def _split_slot(
    slot_text: str | None, atom_text: str
) -> tuple[str | None, str | None, Literal["", "=", "*"]]:
    if slot_text is None:
        return None, None, ""
    if slot_text in ("=", "*"):
        return None, None, slot_text  # type: ignore[return-value]

    slot_operator: Literal["", "=", "*"] = ""
    if slot_text.endswith("="):
        slot_operator = "="
        slot_text = slot_text[:-1]
    name, sep, subslot = slot_text.partition("/")
    if not _SLOT_NAME.match(name) or (sep and not _SLOT_NAME.match(subslot)):
        raise InvalidLeafError(f"invalid slot in atom: {atom_text!r}")
    return name, (subslot if sep else None), slot_operator


# === SRC_URI ===


class UriEntry(BaseModel):
    """One SRC_URI leaf: a URI, optional ``-> name`` rename and restriction prefix."""

    model_config = ConfigDict(frozen=True)

    uri: str
    rename: str | None = None
    restriction: Literal["fetch", "mirror"] | None = None

    @property
    def filename(self) -> str:
        """Local distfile name: the rename target, else the last path component."""
        if self.rename:
            return self.rename
        return self.uri.rsplit("/", 1)[-1].split("?", 1)[0]

    @property
    def is_remote(self) -> bool:
        return "://" in self.uri

    def __str__(self) -> str:
        prefix = f"{self.restriction}+" if self.restriction else ""
        suffix = f" {_RENAME_ARROW} {self.rename}" if self.rename else ""
        return f"{prefix}{self.uri}{suffix}"


def parse_uri_entry(text: str) -> UriEntry:
    """Parse ``https://host/file.tar.gz`` or ``https://host/x -> y.tar.gz``."""
    uri, rename = text, None
    parts = text.split()
    if len(parts) == 3 and parts[1] == _RENAME_ARROW:
        uri, rename = parts[0], parts[2]
        if rename == _RENAME_ARROW or "/" in rename:
            raise InvalidLeafError(f"rename target must be a file name: {rename!r}")
    elif len(parts) != 1:
        raise InvalidLeafError(f"invalid SRC_URI entry: {text!r}")

    restriction = None
    for candidate in _URI_RESTRICTIONS:
        prefix = f"{candidate}+"
        if uri.startswith(prefix) and "://" in uri[len(prefix):]:
            restriction = candidate
            uri = uri[len(prefix):]
            break
    if not uri or uri == _RENAME_ARROW:
        raise InvalidLeafError(f"invalid SRC_URI entry: {text!r}")
    return UriEntry(uri=uri, rename=rename, restriction=restriction)


# === REQUIRED_USE ===


class FlagRef(BaseModel):
    """REQUIRED_USE leaf: a flag that must be on, or off when negated."""

    model_config = ConfigDict(frozen=True)

    name: str
    negated: bool = False

    def __str__(self) -> str:
        return f"!{self.name}" if self.negated else self.name


def parse_flag_ref(text: str) -> FlagRef:
    negated = text.startswith("!")
    name = text[1:] if negated else text
    check_flag_name(name)
    return FlagRef(name=name, negated=negated)


# === LICENSE / RESTRICT / PROPERTIES ===


def parse_license(text: str) -> str:
    if not _NAME_TOKEN.match(text):
        raise InvalidLeafError(f"invalid license name: {text!r}")
    return text


def parse_restrict_token(text: str) -> str:
    if not _NAME_TOKEN.match(text):
        raise InvalidLeafError(f"invalid RESTRICT/PROPERTIES token: {text!r}")
    return text
