# src/grammar/walk.py — v1
"""Read-only traversal helpers for expression trees."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from ebuildmeta.grammar.nodes import AllOf, Conditional, ExpressionNode, Leaf


def iter_nodes(node: ExpressionNode) -> Iterator[ExpressionNode]:
    """Yield every node in pre-order, ``node`` itself first."""
    stack: list[ExpressionNode] = [node]
    while stack:
        current = stack.pop()
        yield current
        if not isinstance(current, Leaf):
            stack.extend(reversed(current.children))


def iter_leaves(node: ExpressionNode | None) -> Iterator[Any]:
    """Yield leaf values left to right, ignoring group structure.

    Handy for questions like "does RESTRICT mention ``test`` anywhere?"
    when USE state is not known.
    """
    if node is None:
        return
    for current in iter_nodes(node):
        if isinstance(current, Leaf):
            yield current.value


def referenced_flags(node: ExpressionNode | None) -> list[str]:
    """USE flags named by conditionals, in first-seen order without repeats."""
    if node is None:
        return []
    seen: dict[str, None] = {}
    for current in iter_nodes(node):
        if isinstance(current, Conditional):
            seen.setdefault(current.flag, None)
    return list(seen)


def map_leaves(node: ExpressionNode, func: Callable[[Any], Any]) -> ExpressionNode:
    """Rebuild ``node`` with ``func`` applied to every leaf value."""
    if isinstance(node, Leaf):
        return Leaf(func(node.value))
    children = tuple(map_leaves(child, func) for child in node.children)
    if isinstance(node, Conditional):
        return Conditional(flag=node.flag, negated=node.negated, children=children)
    return type(node)(children=children)


def sole_child(node: AllOf | None) -> ExpressionNode | None:
    """Return the only top-level term, or None when there are zero or several."""
    if node is None or len(node.children) != 1:
        return None
    return node.children[0]
