# src/grammar/parser.py — v1
"""Generic parser for nested group expressions.

One grammar serves every grammar-bearing field; the caller supplies the
leaf parser that turns a plain token into the field's leaf value::

    allof        := term*
    term         := leaf | anyof | exactlyone | atmostone | conditional | group
    anyof        := "||" "(" allof ")"
    exactlyone   := "^^" "(" allof ")"
    atmostone    := "??" "(" allof ")"
    conditional  := ["!"] flagname "?" "(" allof ")"
    group        := "(" allof ")"

The parser is capability-agnostic: whether ``^^`` is legal in a given
field at a given EAPI is decided afterwards by metadata validation.
Parsing uses an explicit stack, so nesting depth is bounded only by
memory.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from ebuildmeta.core.errors import (
    EmptyGroupError,
    GrammarError,
    InvalidLeafError,
    MissingGroupOpenError,
    UnexpectedCloseParenError,
    UnterminatedGroupError,
)
from ebuildmeta.grammar.nodes import (
    OPERATOR_TYPES,
    AllOf,
    Conditional,
    ExpressionNode,
    Leaf,
)
from ebuildmeta.grammar.tokenizer import (
    CLOSE_PAREN,
    NEGATION_PREFIX,
    OPEN_PAREN,
    Token,
    is_conditional,
    is_reserved,
    tokenize,
)
from ebuildmeta.primitives.flags import check_flag_name

logger = logging.getLogger(__name__)

T = TypeVar("T")
LeafParser = Callable[[str], T]


@dataclass
class _OpenGroup:
    """A group whose closing parenthesis has not been seen yet."""

    node_type: type
    position: int
    flag: str = ""
    negated: bool = False
    children: list[ExpressionNode] = field(default_factory=list)

    def close(self, close_position: int) -> ExpressionNode:
        if not self.children:
            raise EmptyGroupError("group has no children", position=close_position)
        children = tuple(self.children)
        if self.node_type is Conditional:
            return Conditional(flag=self.flag, negated=self.negated, children=children)
        return self.node_type(children=children)


def parse_expression(
    text: str,
    leaf_parser: LeafParser[Any],
    *,
    infix_operators: Iterable[str] = (),
) -> AllOf:
    """Parse expression text into a tree rooted at an implicit AllOf.

    Args:
        text: Raw field value.
        leaf_parser: Converts a plain token into the field's leaf value.
            Should raise InvalidLeafError or ValueError on bad input.
        infix_operators: Tokens that join the surrounding two tokens into
            one leaf text (``->`` for SRC_URI renames).

    Returns:
        Top-level AllOf; empty when ``text`` holds no tokens.

    Raises:
        GrammarError: On unbalanced or empty groups, a missing ``(``,
            an invalid conditional flag or a rejected leaf.
    """
    infix = frozenset(infix_operators)
    tokens = tokenize(text)
    root: list[ExpressionNode] = []
    stack: list[_OpenGroup] = []

    i = 0
    while i < len(tokens):
        token = tokens[i]
        siblings = stack[-1].children if stack else root

        if token.text == OPEN_PAREN:
            stack.append(_OpenGroup(AllOf, token.position))
            i += 1
        elif token.text == CLOSE_PAREN:
            if not stack:
                raise UnexpectedCloseParenError(
                    "')' without a matching '('", position=token.position
                )
            node = stack.pop().close(token.position)
            (stack[-1].children if stack else root).append(node)
            i += 1
        elif token.text in OPERATOR_TYPES:
            _expect_open(tokens, i)
            stack.append(_OpenGroup(OPERATOR_TYPES[token.text], token.position))
            i += 2
        elif is_conditional(token.text):
            negated = token.text.startswith(NEGATION_PREFIX)
            flag = token.text[1 if negated else 0 : -1]
            check_flag_name(flag, position=token.position)
            _expect_open(tokens, i)
            stack.append(
                _OpenGroup(Conditional, token.position, flag=flag, negated=negated)
            )
            i += 2
        else:
            leaf_text, consumed = _leaf_text(tokens, i, infix)
            siblings.append(Leaf(_parse_leaf(leaf_parser, leaf_text, token.position)))
            i += consumed

    if stack:
        opened = stack[-1]
        raise UnterminatedGroupError(
            "group opened here is never closed", position=opened.position
        )
    logger.debug("Parsed %d top-level terms from %d tokens", len(root), len(tokens))
    return AllOf(children=tuple(root))


def _expect_open(tokens: list[Token], index: int) -> None:
    nxt = index + 1
    if nxt >= len(tokens) or tokens[nxt].text != OPEN_PAREN:
        raise MissingGroupOpenError(
            f"{tokens[index].text!r} must be followed by '('",
            position=tokens[index].position,
        )


def _leaf_text(tokens: list[Token], index: int, infix: frozenset[str]) -> tuple[str, int]:
    """Return the leaf text starting at ``index`` and how many tokens it spans."""
    text = tokens[index].text
    op_index = index + 1
    if op_index >= len(tokens) or tokens[op_index].text not in infix:
        return text, 1

    operand_index = op_index + 1
    if operand_index >= len(tokens) or is_reserved(tokens[operand_index].text):
        raise InvalidLeafError(
            f"{tokens[op_index].text!r} needs a plain token after it",
            position=tokens[op_index].position,
        )
    return f"{text} {tokens[op_index].text} {tokens[operand_index].text}", 3


def _parse_leaf(leaf_parser: LeafParser[T], text: str, position: int) -> T:
    try:
        return leaf_parser(text)
    except GrammarError as exc:
        if exc.position is not None:
            raise
        raise type(exc)(exc.message, position=position, field=exc.field) from exc
    except ValueError as exc:
        raise InvalidLeafError(f"invalid token {text!r}: {exc}", position=position) from exc
