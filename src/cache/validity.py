# src/cache/validity.py — v1
"""Staleness checks: does a cache entry still match its ebuild and eclasses?"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Mapping

from ebuildmeta.cache.models import CacheEntry

logger = logging.getLogger(__name__)


def compute_md5(data: bytes) -> str:
    """Lowercase hex MD5 of ``data``, in the format stored under ``_md5_``."""
    return hashlib.md5(data, usedforsecurity=False).hexdigest()


def is_entry_current(
    entry: CacheEntry,
    ebuild_bytes: bytes,
    eclass_checksums: Mapping[str, str],
) -> bool:
    """Return True if ``entry`` was generated from these exact inputs.

    Args:
        entry: Parsed cache entry.
        ebuild_bytes: Current content of the ebuild file.
        eclass_checksums: Current checksum per eclass name.
    """
    if entry.md5 is None:
        logger.debug("Entry has no _md5_, treating as stale")
        return False
    if entry.md5 != compute_md5(ebuild_bytes):
        logger.debug("Ebuild checksum changed")
        return False
    for eclass in entry.eclasses:
        current = eclass_checksums.get(eclass.name)
        if current != eclass.checksum:
            logger.debug("Eclass %s changed (%s -> %s)", eclass.name, eclass.checksum, current)
            return False
    return True
