# src/primitives/flags.py — v1
"""USE flag name validity, shared by IUSE parsing and grammar conditionals."""

from __future__ import annotations

import re

from ebuildmeta.core.errors import InvalidFlagNameError

_FLAG_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9+_@-]*$")


def is_valid_flag_name(name: str) -> bool:
    """Return True if ``name`` is a syntactically valid USE flag."""
    return bool(_FLAG_NAME.match(name))


def check_flag_name(name: str, *, position: int | None = None) -> str:
    """Return ``name`` unchanged or raise InvalidFlagNameError."""
    if not is_valid_flag_name(name):
        raise InvalidFlagNameError(f"invalid USE flag name: {name!r}", position=position)
    return name
