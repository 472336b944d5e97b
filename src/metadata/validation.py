# src/metadata/validation.py — v1
"""Capability gating: check parsed metadata against its EAPI.

Rules are applied to the finished structure and every violation is
collected; nothing here raises. All checks go through
``Eapi.supports()``, so a tree that passes at one level passes at every
later level.
"""

from __future__ import annotations

import logging

from ebuildmeta.core.models import ValidationIssue, ViolationKind
from ebuildmeta.eapi.capabilities import Eapi, Feature
from ebuildmeta.grammar.leaves import Atom, UriEntry
from ebuildmeta.grammar.nodes import (
    OPERATOR_TOKENS,
    AllOf,
    AtMostOneOf,
    Conditional,
    ExactlyOneOf,
    Leaf,
)
from ebuildmeta.grammar.walk import iter_nodes
from ebuildmeta.metadata import fields
from ebuildmeta.metadata.fields import EXPRESSION_FIELDS, FIELD_FEATURES, attribute_name
from ebuildmeta.metadata.models import EbuildMetadata
from ebuildmeta.primitives.phase import DefinedPhases, Phase

logger = logging.getLogger(__name__)

# Operators that only some EAPIs know about.
_OPERATOR_FEATURES: dict[type, Feature] = {
    ExactlyOneOf: Feature.EXACTLY_ONE_OF,
    AtMostOneOf: Feature.AT_MOST_ONE_OF,
}

_PHASE_FEATURES: dict[Phase, Feature] = {
    Phase.SRC_PREPARE: Feature.SRC_PREPARE,
    Phase.SRC_CONFIGURE: Feature.SRC_PREPARE,
    Phase.PKG_PRETEND: Feature.PKG_PRETEND,
}


def _issue(kind: ViolationKind, field: str, message: str) -> ValidationIssue:
    return ValidationIssue(kind=kind, field=field, message=message)


def _group_label(node: object) -> str:
    if isinstance(node, Conditional):
        return f"{'!' if node.negated else ''}{node.flag}? ( )"
    if isinstance(node, AllOf):
        return "( )"
    return f"{OPERATOR_TOKENS[type(node)]} ( )"


def validate_expression(key: str, tree: AllOf | None, eapi: Eapi) -> list[ValidationIssue]:
    """Gate one expression field: group placement, operator EAPI rules, leaf syntax."""
    if tree is None:
        return []
    grammar = EXPRESSION_FIELDS[key]
    issues: list[ValidationIssue] = []

    for node in iter_nodes(tree):
        if node is tree:
            continue
        if isinstance(node, Leaf):
            issues.extend(_leaf_issues(key, node.value, eapi))
            continue

        node_type = type(node)
        if node_type not in grammar.allowed_groups:
            issues.append(_issue(
                ViolationKind.OPERATOR_NOT_SUPPORTED, key,
                f"'{_group_label(node)}' is not allowed in {key}",
            ))
            continue
        feature = _OPERATOR_FEATURES.get(node_type)
        if feature is not None and not eapi.supports(feature):
            issues.append(_issue(
                ViolationKind.OPERATOR_NOT_SUPPORTED, key,
                f"'{_group_label(node)}' requires {feature.value}, not available in EAPI {eapi}",
            ))
    return issues


def _leaf_issues(key: str, value: object, eapi: Eapi) -> list[ValidationIssue]:
    if isinstance(value, Atom):
        return _atom_issues(key, value, eapi)
    if isinstance(value, UriEntry):
        return _uri_issues(key, value, eapi)
    return []


def _atom_issues(key: str, atom: Atom, eapi: Eapi) -> list[ValidationIssue]:
    checks = [
        (atom.slot is not None, Feature.SLOT_DEPS, "slot dependency"),
        (atom.subslot is not None, Feature.SUB_SLOTS, "sub-slot dependency"),
        (bool(atom.slot_operator), Feature.SLOT_OPERATORS, "slot operator"),
        (atom.use_deps is not None, Feature.USE_DEPS, "USE dependency"),
        (atom.blocker == "!!", Feature.STRONG_BLOCKERS, "strong blocker"),
    ]
    return [
        _issue(
            ViolationKind.SYNTAX_NOT_SUPPORTED, key,
            f"{label} in {atom.raw!r} requires EAPI support for {feature.value}",
        )
        for present, feature, label in checks
        if present and not eapi.supports(feature)
    ]


def _uri_issues(key: str, entry: UriEntry, eapi: Eapi) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if entry.rename is not None and not eapi.supports(Feature.SRC_URI_ARROWS):
        issues.append(_issue(
            ViolationKind.SYNTAX_NOT_SUPPORTED, key,
            f"'->' rename of {entry.uri!r} is not available in EAPI {eapi}",
        ))
    if entry.restriction is not None and not eapi.supports(
        Feature.SELECTIVE_URI_RESTRICTIONS
    ):
        issues.append(_issue(
            ViolationKind.SYNTAX_NOT_SUPPORTED, key,
            f"'{entry.restriction}+' prefix is not available in EAPI {eapi}",
        ))
    return issues


def validate_phases(phases: DefinedPhases | None, eapi: Eapi) -> list[ValidationIssue]:
    """Sentinel exclusivity and phase availability for DEFINED_PHASES."""
    if phases is None:
        return []
    issues: list[ValidationIssue] = []
    if phases.is_conflicting:
        issues.append(_issue(
            ViolationKind.CONFLICTING_PHASE_SENTINEL, fields.DEFINED_PHASES,
            f"'-' listed together with phases: {phases}",
        ))
    for phase in phases.phases:
        feature = _PHASE_FEATURES.get(phase)
        if feature is not None and not eapi.supports(feature):
            issues.append(_issue(
                ViolationKind.PHASE_NOT_SUPPORTED, fields.DEFINED_PHASES,
                f"{phase.value} is not available in EAPI {eapi}",
            ))
    return issues


def validate_metadata(
    metadata: EbuildMetadata, eapi: Eapi | None = None
) -> list[ValidationIssue]:
    """Collect every capability and completeness issue in ``metadata``.

    Args:
        metadata: Parsed record.
        eapi: Level to gate against; defaults to the record's own EAPI
            (EAPI 0 when it has none).

    Returns:
        All issues found, in field order. Empty means valid.
    """
    level = eapi if eapi is not None else metadata.effective_eapi
    issues: list[ValidationIssue] = []

    # Completeness
    if metadata.eapi is None:
        issues.append(_issue(
            ViolationKind.MISSING_MANDATORY_FIELD, fields.EAPI, "EAPI is missing",
        ))
    elif metadata.eapi.is_future:
        issues.append(ValidationIssue(
            kind=ViolationKind.UNRECOGNIZED_LEVEL, field=fields.EAPI,
            message=f"EAPI {metadata.eapi} is not known; gated with the newest known features",
            severity="warning",
        ))
    if not metadata.description:
        issues.append(_issue(
            ViolationKind.MISSING_MANDATORY_FIELD, fields.DESCRIPTION,
            "DESCRIPTION is missing",
        ))
    if metadata.slot is None:
        issues.append(_issue(
            ViolationKind.MISSING_MANDATORY_FIELD, fields.SLOT, "SLOT is missing",
        ))
    elif metadata.slot.subslot is not None and not level.supports(Feature.SUB_SLOTS):
        issues.append(_issue(
            ViolationKind.SYNTAX_NOT_SUPPORTED, fields.SLOT,
            f"sub-slot in SLOT={metadata.slot} is not available in EAPI {level}",
        ))

    # Field legality
    for key, feature in FIELD_FEATURES.items():
        value = getattr(metadata, attribute_name(key))
        if value is not None and not level.supports(feature):
            issues.append(_issue(
                ViolationKind.FIELD_NOT_SUPPORTED, key,
                f"{key} is not available in EAPI {level}",
            ))

    if not level.supports(Feature.IUSE_DEFAULTS):
        for flag in metadata.iuse:
            if flag.has_default_marker:
                issues.append(_issue(
                    ViolationKind.SYNTAX_NOT_SUPPORTED, fields.IUSE,
                    f"default marker on {flag} is not available in EAPI {level}",
                ))

    for key in EXPRESSION_FIELDS:
        issues.extend(validate_expression(key, getattr(metadata, attribute_name(key)), level))

    issues.extend(validate_phases(metadata.defined_phases, level))

    if issues:
        logger.debug("Validation at EAPI %s found %d issue(s)", level, len(issues))
    return issues
