# src/metadata/builder.py — v1
"""Build EbuildMetadata from raw key/value pairs.

Each recognized key is routed to its primitive parser or to the grammar
engine with the field's leaf parser. Parse errors abort the build;
capability and completeness problems are gathered by the validation
pass and returned with the best-effort result.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from ebuildmeta.core.errors import InvalidDescriptionError, MetadataError
from ebuildmeta.eapi.capabilities import parse_eapi
from ebuildmeta.grammar.leaves import parse_atom
from ebuildmeta.grammar.nodes import AllOf
from ebuildmeta.grammar.parser import parse_expression
from ebuildmeta.logging.context import field_context
from ebuildmeta.metadata import fields
from ebuildmeta.metadata.fields import EXPRESSION_FIELDS, attribute_name
from ebuildmeta.metadata.models import EbuildMetadata, MetadataBuildResult
from ebuildmeta.metadata.validation import validate_metadata
from ebuildmeta.primitives.iuse import parse_iuse
from ebuildmeta.primitives.keyword import parse_keywords
from ebuildmeta.primitives.phase import parse_defined_phases
from ebuildmeta.primitives.slot import parse_slot

logger = logging.getLogger(__name__)

_LIST_PARSERS: dict[str, Callable[[str], Any]] = {
    fields.HOMEPAGE: lambda value: tuple(value.split()),
    fields.INHERITED: lambda value: tuple(value.split()),
    fields.KEYWORDS: parse_keywords,
    fields.IUSE: parse_iuse,
    fields.DEFINED_PHASES: parse_defined_phases,
    fields.SLOT: parse_slot,
}


def parse_field(
    key: str,
    value: str,
    *,
    atom_parser: Callable[[str], Any] = parse_atom,
    strict_eapi: bool = False,
) -> Any:
    """Parse the raw value of one recognized metadata key.

    Returns None for an empty value, which every field treats as absent.

    Raises:
        MetadataError: The value is malformed; ``error.field`` names ``key``.
    """
    if key not in fields.METADATA_KEYS:
        raise KeyError(key)
    if not value.strip():
        return None

    with field_context(key):
        try:
            if key == fields.EAPI:
                return parse_eapi(value, strict=strict_eapi)
            if key == fields.DESCRIPTION:
                if "\r" in value or "\n" in value:
                    raise InvalidDescriptionError("description must be a single line")
                return value
            if key in EXPRESSION_FIELDS:
                return _parse_tree(key, value, atom_parser)
            return _LIST_PARSERS[key](value)
        except MetadataError as exc:
            exc.with_field(key)
            raise


def _parse_tree(key: str, value: str, atom_parser: Callable[[str], Any]) -> AllOf | None:
    grammar = EXPRESSION_FIELDS[key]
    leaf_parser = atom_parser if key in fields.DEPENDENCY_KEYS else grammar.leaf_parser
    tree = parse_expression(value, leaf_parser, infix_operators=grammar.infix_operators)
    return tree if tree.children else None


def build_metadata(
    raw: Mapping[str, str],
    *,
    atom_parser: Callable[[str], Any] = parse_atom,
    strict_eapi: bool = False,
) -> MetadataBuildResult:
    """Assemble and validate metadata from raw cache values.

    Args:
        raw: Key/value pairs; keys outside the metadata set are ignored.
        atom_parser: Leaf parser for dependency fields.
        strict_eapi: Reject unrecognized EAPI tokens instead of
            treating them as future levels.

    Returns:
        MetadataBuildResult with the typed record and every issue found.

    Raises:
        MetadataError: A value is structurally or semantically malformed.
    """
    values: dict[str, Any] = {}
    for key in fields.METADATA_KEYS:
        if key not in raw:
            continue
        parsed = parse_field(key, raw[key], atom_parser=atom_parser, strict_eapi=strict_eapi)
        if parsed is not None and parsed != ():
            values[attribute_name(key)] = parsed

    metadata = EbuildMetadata(**values)
    issues = validate_metadata(metadata)
    logger.debug(
        "Built metadata with %d field(s) at EAPI %s, %d issue(s)",
        len(values), metadata.effective_eapi, len(issues),
    )
    return MetadataBuildResult(metadata=metadata, issues=tuple(issues))
