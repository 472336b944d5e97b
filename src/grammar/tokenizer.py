# src/grammar/tokenizer.py — v1
"""Whitespace tokenizer and token classification for group expressions."""

from __future__ import annotations

from dataclasses import dataclass

from ebuildmeta.grammar.nodes import OPERATOR_TYPES

OPEN_PAREN = "("
CLOSE_PAREN = ")"
CONDITIONAL_SUFFIX = "?"
NEGATION_PREFIX = "!"


@dataclass(frozen=True)
class Token:
    text: str
    position: int  # zero-based index in the token stream


def tokenize(text: str) -> list[Token]:
    """Split expression text on any run of whitespace."""
    return [Token(text=part, position=i) for i, part in enumerate(text.split())]


def is_conditional(text: str) -> bool:
    """``flag?`` / ``!flag?`` tokens; ``??`` is an operator, not a conditional."""
    return text.endswith(CONDITIONAL_SUFFIX) and text not in OPERATOR_TYPES


def is_reserved(text: str) -> bool:
    """True for tokens that introduce or close a group."""
    return (
        text in (OPEN_PAREN, CLOSE_PAREN)
        or text in OPERATOR_TYPES
        or is_conditional(text)
    )
