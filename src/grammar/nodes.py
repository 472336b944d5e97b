# src/grammar/nodes.py — v1
"""Expression tree node types shared by every grammar-bearing field.

The tree is a closed set of frozen dataclasses: one leaf kind and five
group kinds. Children are ordered tuples; order is preserved through a
round trip even where the operator is logically commutative.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Leaf(Generic[T]):
    """A field-specific token (atom, license, URI, flag...)."""

    value: T


@dataclass(frozen=True)
class AllOf:
    """Every child applies. Implicit at the top level; ``( ... )`` when nested."""

    children: tuple[ExpressionNode, ...] = ()


@dataclass(frozen=True)
class AnyOf:
    """``|| ( ... )``: at least one child."""

    children: tuple[ExpressionNode, ...]


@dataclass(frozen=True)
class ExactlyOneOf:
    """``^^ ( ... )``: exactly one child."""

    children: tuple[ExpressionNode, ...]


@dataclass(frozen=True)
class AtMostOneOf:
    """``?? ( ... )``: zero or one child."""

    children: tuple[ExpressionNode, ...]


@dataclass(frozen=True)
class Conditional:
    """``flag? ( ... )`` or ``!flag? ( ... )``."""

    flag: str
    negated: bool
    children: tuple[ExpressionNode, ...]


ExpressionNode = Union[Leaf, AllOf, AnyOf, ExactlyOneOf, AtMostOneOf, Conditional]
GroupNode = Union[AllOf, AnyOf, ExactlyOneOf, AtMostOneOf, Conditional]

GROUP_TYPES: tuple[type, ...] = (AllOf, AnyOf, ExactlyOneOf, AtMostOneOf, Conditional)

# Operator token introducing each operator group.
OPERATOR_TOKENS: dict[type, str] = {
    AnyOf: "||",
    ExactlyOneOf: "^^",
    AtMostOneOf: "??",
}
OPERATOR_TYPES: dict[str, type] = {token: cls for cls, token in OPERATOR_TOKENS.items()}


def is_group(node: ExpressionNode) -> bool:
    return isinstance(node, GROUP_TYPES)


def is_empty(node: AllOf | None) -> bool:
    """True for an absent field or an empty top-level expression."""
    return node is None or not node.children
