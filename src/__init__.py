# src/__init__.py — v1
"""ebuildmeta: EAPI-aware codec for md5-cache ebuild metadata records."""

from __future__ import annotations

from ebuildmeta.cache.codec import CacheCodec, parse_cache_entry, serialize_cache_entry
from ebuildmeta.cache.models import CacheEntry, CacheParseResult, EclassEntry
from ebuildmeta.core.errors import MetadataError, MetadataValidationError
from ebuildmeta.core.models import ValidationIssue, ViolationKind
from ebuildmeta.eapi.capabilities import Eapi, Feature, parse_eapi
from ebuildmeta.metadata.models import EbuildMetadata

__version__ = "0.1.0"

__all__ = [
    "CacheCodec",
    "CacheEntry",
    "CacheParseResult",
    "Eapi",
    "EbuildMetadata",
    "EclassEntry",
    "Feature",
    "MetadataError",
    "MetadataValidationError",
    "ValidationIssue",
    "ViolationKind",
    "parse_cache_entry",
    "parse_eapi",
    "serialize_cache_entry",
]
