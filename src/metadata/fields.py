# src/metadata/fields.py — v1
"""Recognized cache keys and the grammar each expression field uses.

``EXPRESSION_FIELDS`` lists, for every grammar-bearing key, its leaf
parser, the infix tokens folded into leaves, and which group kinds may
appear in it. The engine accepts every group kind everywhere; placement
and EAPI rules are enforced by ``ebuildmeta.metadata.validation``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ebuildmeta.eapi.capabilities import Feature
from ebuildmeta.grammar.leaves import (
    parse_atom,
    parse_flag_ref,
    parse_license,
    parse_restrict_token,
    parse_uri_entry,
)
from ebuildmeta.grammar.nodes import AllOf, AnyOf, AtMostOneOf, Conditional, ExactlyOneOf

# === KEYS ===

EAPI = "EAPI"
DESCRIPTION = "DESCRIPTION"
SLOT = "SLOT"
HOMEPAGE = "HOMEPAGE"
SRC_URI = "SRC_URI"
LICENSE = "LICENSE"
KEYWORDS = "KEYWORDS"
IUSE = "IUSE"
REQUIRED_USE = "REQUIRED_USE"
RESTRICT = "RESTRICT"
PROPERTIES = "PROPERTIES"
DEPEND = "DEPEND"
RDEPEND = "RDEPEND"
PDEPEND = "PDEPEND"
BDEPEND = "BDEPEND"
IDEPEND = "IDEPEND"
DEFINED_PHASES = "DEFINED_PHASES"
INHERITED = "INHERITED"
MD5 = "_md5_"
ECLASSES = "_eclasses_"

MANDATORY_KEYS: tuple[str, ...] = (EAPI, DESCRIPTION, SLOT)
DEPENDENCY_KEYS: tuple[str, ...] = (DEPEND, RDEPEND, PDEPEND, BDEPEND, IDEPEND)
METADATA_KEYS: tuple[str, ...] = (
    EAPI, DESCRIPTION, SLOT, HOMEPAGE, SRC_URI, LICENSE, KEYWORDS, IUSE,
    REQUIRED_USE, RESTRICT, PROPERTIES, *DEPENDENCY_KEYS, DEFINED_PHASES, INHERITED,
)
CACHE_KEYS: frozenset[str] = frozenset((*METADATA_KEYS, MD5, ECLASSES))

# Keys that only exist from a given feature onwards.
FIELD_FEATURES: dict[str, Feature] = {
    BDEPEND: Feature.BDEPEND,
    IDEPEND: Feature.IDEPEND,
    REQUIRED_USE: Feature.REQUIRED_USE,
    PROPERTIES: Feature.PROPERTIES,
}


def attribute_name(key: str) -> str:
    """EbuildMetadata attribute holding ``key``."""
    return key.lower()


# === EXPRESSION GRAMMARS ===

_DEPENDENCY_GROUPS = frozenset({AllOf, AnyOf, Conditional})
_LICENSE_GROUPS = frozenset({AllOf, AnyOf, Conditional})
_REQUIRED_USE_GROUPS = frozenset({AllOf, AnyOf, ExactlyOneOf, AtMostOneOf, Conditional})
_PLAIN_GROUPS = frozenset({AllOf, Conditional})


@dataclass(frozen=True)
class FieldGrammar:
    """How one expression field is parsed and which groups it admits."""

    leaf_parser: Callable[[str], Any]
    allowed_groups: frozenset[type]
    infix_operators: tuple[str, ...] = ()


EXPRESSION_FIELDS: dict[str, FieldGrammar] = {
    SRC_URI: FieldGrammar(parse_uri_entry, _PLAIN_GROUPS, infix_operators=("->",)),
    LICENSE: FieldGrammar(parse_license, _LICENSE_GROUPS),
    REQUIRED_USE: FieldGrammar(parse_flag_ref, _REQUIRED_USE_GROUPS),
    RESTRICT: FieldGrammar(parse_restrict_token, _PLAIN_GROUPS),
    PROPERTIES: FieldGrammar(parse_restrict_token, _PLAIN_GROUPS),
    **{key: FieldGrammar(parse_atom, _DEPENDENCY_GROUPS) for key in DEPENDENCY_KEYS},
}
