# src/primitives/checksum.py — v1
"""Checksum string validation for the ``_md5_`` cache key."""

from __future__ import annotations

import re

from ebuildmeta.core.errors import InvalidChecksumFormatError

_MD5_HEX = re.compile(r"^[0-9a-f]{32}$")


def is_md5_hex(value: str) -> bool:
    return bool(_MD5_HEX.fullmatch(value))


def parse_md5(value: str) -> str:
    """Return ``value`` if it is exactly 32 lowercase hex characters."""
    if not is_md5_hex(value):
        raise InvalidChecksumFormatError(
            f"expected 32 lowercase hex characters, got {value!r} ({len(value)} chars)",
            field="_md5_",
        )
    return value
