# src/grammar/serializer.py — v1
"""Serialize expression trees back to whitespace-separated text.

Output uses single spaces between siblings and inside parentheses. The
top-level AllOf prints bare; a nested AllOf prints as ``( ... )``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from ebuildmeta.core.errors import EmptyGroupError
from ebuildmeta.grammar.nodes import (
    OPERATOR_TOKENS,
    AllOf,
    Conditional,
    ExpressionNode,
    Leaf,
)
from ebuildmeta.grammar.tokenizer import CLOSE_PAREN, NEGATION_PREFIX, OPEN_PAREN

LeafPrinter = Callable[[Any], str]


def serialize_expression(node: ExpressionNode, leaf_printer: LeafPrinter = str) -> str:
    """Render ``node`` as expression text.

    Raises:
        EmptyGroupError: If a nested group has no children.
    """
    if isinstance(node, AllOf):
        work: list[ExpressionNode | str] = list(reversed(node.children))
    else:
        work = [node]

    out: list[str] = []
    while work:
        item = work.pop()
        if isinstance(item, str):
            out.append(item)
        elif isinstance(item, Leaf):
            out.append(leaf_printer(item.value))
        else:
            if not item.children:
                raise EmptyGroupError(f"cannot serialize empty {type(item).__name__}")
            out.extend(_opening_tokens(item))
            work.append(CLOSE_PAREN)
            work.extend(reversed(item.children))
    return " ".join(out)


def _opening_tokens(node: ExpressionNode) -> list[str]:
    if isinstance(node, AllOf):
        return [OPEN_PAREN]
    if isinstance(node, Conditional):
        prefix = NEGATION_PREFIX if node.negated else ""
        return [f"{prefix}{node.flag}?", OPEN_PAREN]
    operator = OPERATOR_TOKENS.get(type(node))
    if operator is None:
        raise TypeError(f"not an expression node: {node!r}")
    return [operator, OPEN_PAREN]
