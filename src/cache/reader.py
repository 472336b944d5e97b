# src/cache/reader.py — v1
"""On-disk helpers for an md5-cache tree laid out as ``<root>/<category>/<PF>``.

Helpers that take a ``root`` fall back to ``Settings.cache_root`` when it
is None.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from ebuildmeta.cache.codec import CacheCodec, default_codec
from ebuildmeta.cache.models import CacheEntry, CacheParseResult
from ebuildmeta.config.settings import load_settings
from ebuildmeta.core.errors import InvalidEncodingError
from ebuildmeta.logging.context import record_context

logger = logging.getLogger(__name__)


def _resolve_root(root: Path | str | None) -> Path:
    if root is None:
        root = load_settings().cache_root
    return Path(root).expanduser()


def cache_entry_path(root: Path | str | None, category: str, pf: str) -> Path:
    """Return the record path for ``category/pf`` under ``root``."""
    if not category or not pf or "/" in category or "/" in pf:
        raise ValueError(f"Invalid cache entry name: {category!r}/{pf!r}")
    return _resolve_root(root) / category / pf


def _package_name(path: Path) -> str:
    return f"{path.parent.name}/{path.name}"


def read_cache_entry(path: Path | str, codec: CacheCodec | None = None) -> CacheParseResult:
    """Read and parse one cache file.

    Log lines emitted while parsing carry the file path and package name.

    Raises:
        OSError: The file cannot be read.
        InvalidEncodingError: The file is not valid UTF-8.
        MetadataError: The record is malformed.
    """
    path = Path(path)
    codec = codec or default_codec()
    with record_context(str(path), _package_name(path)):
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidEncodingError(str(path), exc.start, exc.reason) from exc
        result = codec.parse(text)
        if result.issues:
            logger.info("Parsed with %d issue(s)", len(result.issues))
        return result


def write_cache_entry(
    path: Path | str, entry: CacheEntry, codec: CacheCodec | None = None
) -> None:
    """Serialize ``entry`` to ``path``, creating the category directory if needed."""
    path = Path(path)
    codec = codec or default_codec()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(codec.serialize(entry), encoding="utf-8")


def iter_cache_entries(root: Path | str | None = None) -> Iterator[tuple[str, Path]]:
    """Yield ``(category/PF, path)`` for every record file under ``root``.

    Only the two-level ``category/PF`` layout is walked; hidden entries
    are skipped. Results come in sorted order.
    """
    root = _resolve_root(root)
    if not root.is_dir():
        raise ValueError(f"Cache root is not a directory: {root}")

    for category in sorted(root.iterdir()):
        if not category.is_dir() or category.name.startswith("."):
            continue
        for path in sorted(category.iterdir()):
            if path.is_file() and not path.name.startswith("."):
                yield _package_name(path), path
