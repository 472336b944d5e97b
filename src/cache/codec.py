# src/cache/codec.py — v1
"""Codec for md5-cache records: flat ``KEY=VALUE`` text to CacheEntry and back.

Parsing rules:
  - input is split on newlines, a trailing ``\\r`` is dropped, blank
    lines are skipped
  - each line splits at its first ``=``; keys are case-sensitive
  - unrecognized keys are kept verbatim in ``CacheEntry.extra``
  - duplicate keys follow the configured policy (last wins by default)
  - an empty value means the key is absent

Serialization writes one line per non-empty field with keys in lexical
order, so the same entry always produces the same bytes.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any, Literal

from ebuildmeta.cache.models import CacheEntry, CacheParseResult, EclassEntry
from ebuildmeta.config.settings import Settings, load_settings
from ebuildmeta.core.errors import (
    DuplicateKeyError,
    MalformedEclassListError,
    MalformedLineError,
)
from ebuildmeta.grammar.leaves import parse_atom
from ebuildmeta.grammar.nodes import is_empty
from ebuildmeta.grammar.serializer import serialize_expression
from ebuildmeta.metadata import fields
from ebuildmeta.metadata.builder import build_metadata
from ebuildmeta.metadata.fields import CACHE_KEYS, EXPRESSION_FIELDS, attribute_name
from ebuildmeta.metadata.models import EbuildMetadata
from ebuildmeta.primitives.checksum import parse_md5

logger = logging.getLogger(__name__)

ECLASS_SEPARATOR = "\t"


def split_record(
    text: str, duplicate_policy: Literal["last_wins", "reject"] = "last_wins"
) -> tuple[dict[str, str], dict[str, str]]:
    """Split record text into recognized and unrecognized key/value maps.

    Raises:
        MalformedLineError: A non-blank line has no ``=`` or an empty key.
        DuplicateKeyError: A repeated key under the ``reject`` policy.
    """
    recognized: dict[str, str] = {}
    extra: dict[str, str] = {}
    first_seen: dict[str, int] = {}

    for number, line in enumerate(text.split("\n"), start=1):
        line = line.removesuffix("\r")
        if not line.strip():
            continue
        key, sep, value = line.partition("=")
        if not sep or not key:
            raise MalformedLineError(number, line)

        if key in first_seen:
            if duplicate_policy == "reject":
                raise DuplicateKeyError(key, number)
            logger.warning(
                "Duplicate key %s on line %d (first on line %d), keeping the last value",
                key, number, first_seen[key],
            )
        else:
            first_seen[key] = number

        if key in CACHE_KEYS:
            recognized[key] = value
        else:
            extra[key] = value

    return recognized, extra


def parse_eclasses(value: str) -> tuple[EclassEntry, ...]:
    """Parse the tab-separated ``name<TAB>checksum<TAB>...`` list.

    Raises:
        MalformedEclassListError: Odd token count or an empty token.
    """
    if not value:
        return ()
    parts = value.split(ECLASS_SEPARATOR)
    if len(parts) % 2:
        raise MalformedEclassListError(
            f"expected name/checksum pairs, got {len(parts)} tokens", field=fields.ECLASSES
        )
    if not all(parts):
        raise MalformedEclassListError("empty eclass name or checksum", field=fields.ECLASSES)
    return tuple(
        EclassEntry(name=parts[i], checksum=parts[i + 1]) for i in range(0, len(parts), 2)
    )


def format_eclasses(eclasses: tuple[EclassEntry, ...]) -> str:
    return ECLASS_SEPARATOR.join(
        token for entry in eclasses for token in (entry.name, entry.checksum)
    )


def metadata_values(metadata: EbuildMetadata) -> dict[str, str]:
    """Render every non-empty metadata field as its cache value."""
    values: dict[str, str] = {}
    if metadata.eapi is not None:
        values[fields.EAPI] = str(metadata.eapi)
    if metadata.description:
        values[fields.DESCRIPTION] = metadata.description
    if metadata.slot is not None:
        values[fields.SLOT] = str(metadata.slot)

    for key, items in (
        (fields.HOMEPAGE, metadata.homepage),
        (fields.KEYWORDS, metadata.keywords),
        (fields.IUSE, metadata.iuse),
        (fields.INHERITED, metadata.inherited),
    ):
        if items:
            values[key] = " ".join(str(item) for item in items)

    phases = metadata.defined_phases
    if phases is not None and (phases.phases or phases.none_sentinel):
        values[fields.DEFINED_PHASES] = str(phases)

    for key in EXPRESSION_FIELDS:
        tree = getattr(metadata, attribute_name(key))
        if not is_empty(tree):
            values[key] = serialize_expression(tree)
    return values


class CacheCodec:
    """Parse and serialize md5-cache records under one policy configuration."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        duplicate_policy: Literal["last_wins", "reject"] | None = None,
        strict_eapi: bool | None = None,
        atom_parser: Callable[[str], Any] | None = None,
    ) -> None:
        settings = settings if settings is not None else load_settings()
        self.duplicate_policy = duplicate_policy or settings.duplicate_key_policy
        self.strict_eapi = settings.strict_eapi if strict_eapi is None else strict_eapi
        self.atom_parser = atom_parser or parse_atom

    def parse(self, text: str) -> CacheParseResult:
        """Parse one record.

        Returns:
            CacheParseResult holding the entry and all validation issues.

        Raises:
            MetadataError: Structural or semantic errors that make the
                record unusable.
        """
        recognized, extra = split_record(text, self.duplicate_policy)

        md5_value = recognized.get(fields.MD5, "")
        md5 = parse_md5(md5_value) if md5_value else None
        eclasses = parse_eclasses(recognized.get(fields.ECLASSES, ""))

        built = build_metadata(
            recognized, atom_parser=self.atom_parser, strict_eapi=self.strict_eapi
        )
        entry = CacheEntry(metadata=built.metadata, md5=md5, eclasses=eclasses, extra=extra)
        if extra:
            logger.debug("Preserved %d unrecognized key(s): %s", len(extra), ", ".join(extra))
        return CacheParseResult(entry=entry, issues=built.issues)

    def serialize(self, entry: CacheEntry) -> str:
        """Render ``entry`` as record text with lexically ordered keys."""
        values = metadata_values(entry.metadata)
        if entry.md5:
            values[fields.MD5] = entry.md5
        if entry.eclasses:
            values[fields.ECLASSES] = format_eclasses(entry.eclasses)
        for key, value in entry.extra:
            values.setdefault(key, value)
        return "".join(f"{key}={values[key]}\n" for key in sorted(values))


@functools.lru_cache(maxsize=1)
def default_codec() -> CacheCodec:
    return CacheCodec()


def parse_cache_entry(text: str) -> CacheParseResult:
    """Parse a record with the default codec."""
    return default_codec().parse(text)


def serialize_cache_entry(entry: CacheEntry) -> str:
    """Serialize a record with the default codec."""
    return default_codec().serialize(entry)
