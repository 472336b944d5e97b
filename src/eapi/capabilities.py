# src/eapi/capabilities.py — v1
"""EAPI capability table: which grammar operators, variables and phases each level permits.

Known levels are 0 through 8. Any other syntactically valid token is a
forward-compatible "future" level that carries the newest known feature
set, so records written for a newer EAPI are still readable. Gating code
must ask ``Eapi.supports()`` rather than compare ranks.
"""

from __future__ import annotations

import functools
import logging
import re
from dataclasses import dataclass
from enum import Enum

from ebuildmeta.core.errors import InvalidLevelTokenError, UnrecognizedLevelError

logger = logging.getLogger(__name__)

_EAPI_TOKEN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9+_.-]*$")


class Feature(str, Enum):
    """A capability that some EAPIs enable."""

    IUSE_DEFAULTS = "iuse_defaults"
    SLOT_DEPS = "slot_deps"
    SRC_URI_ARROWS = "src_uri_arrows"
    USE_DEPS = "use_deps"
    STRONG_BLOCKERS = "strong_blockers"
    SRC_PREPARE = "src_prepare"
    PROPERTIES = "properties"
    REQUIRED_USE = "required_use"
    EXACTLY_ONE_OF = "exactly_one_of"
    PKG_PRETEND = "pkg_pretend"
    AT_MOST_ONE_OF = "at_most_one_of"
    SUB_SLOTS = "sub_slots"
    SLOT_OPERATORS = "slot_operators"
    BDEPEND = "bdepend"
    IDEPEND = "idepend"
    SELECTIVE_URI_RESTRICTIONS = "selective_uri_restrictions"


# Level at which each feature first appears; never withdrawn afterwards.
FEATURE_INTRODUCED: dict[Feature, int] = {
    Feature.IUSE_DEFAULTS: 1,
    Feature.SLOT_DEPS: 1,
    Feature.SRC_URI_ARROWS: 2,
    Feature.USE_DEPS: 2,
    Feature.STRONG_BLOCKERS: 2,
    Feature.SRC_PREPARE: 2,
    Feature.PROPERTIES: 3,
    Feature.REQUIRED_USE: 4,
    Feature.EXACTLY_ONE_OF: 4,
    Feature.PKG_PRETEND: 4,
    Feature.AT_MOST_ONE_OF: 5,
    Feature.SUB_SLOTS: 5,
    Feature.SLOT_OPERATORS: 5,
    Feature.BDEPEND: 7,
    Feature.IDEPEND: 8,
    Feature.SELECTIVE_URI_RESTRICTIONS: 8,
}

_HIGHEST_KNOWN_RANK = 8
_FUTURE_RANK = _HIGHEST_KNOWN_RANK + 1


def _features_at(rank: int) -> frozenset[Feature]:
    capped = min(rank, _HIGHEST_KNOWN_RANK)
    return frozenset(f for f, since in FEATURE_INTRODUCED.items() if since <= capped)


@functools.total_ordering
@dataclass(frozen=True)
class Eapi:
    """A capability level with its precomputed feature set."""

    token: str
    rank: int
    features: frozenset[Feature]

    @property
    def is_future(self) -> bool:
        """True for tokens this table does not know about."""
        return self.rank > _HIGHEST_KNOWN_RANK

    def supports(self, feature: Feature) -> bool:
        return feature in self.features

    # --- Convenience queries ---

    @property
    def has_bdepend(self) -> bool:
        return self.supports(Feature.BDEPEND)

    @property
    def has_idepend(self) -> bool:
        return self.supports(Feature.IDEPEND)

    @property
    def has_required_use(self) -> bool:
        return self.supports(Feature.REQUIRED_USE)

    @property
    def has_exactly_one_of(self) -> bool:
        return self.supports(Feature.EXACTLY_ONE_OF)

    @property
    def has_at_most_one_of(self) -> bool:
        return self.supports(Feature.AT_MOST_ONE_OF)

    @property
    def has_sub_slots(self) -> bool:
        return self.supports(Feature.SUB_SLOTS)

    @property
    def has_slot_operators(self) -> bool:
        return self.supports(Feature.SLOT_OPERATORS)

    @property
    def has_src_uri_arrows(self) -> bool:
        return self.supports(Feature.SRC_URI_ARROWS)

    @property
    def has_properties(self) -> bool:
        return self.supports(Feature.PROPERTIES)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Eapi):
            return NotImplemented
        return self.rank < other.rank

    def __str__(self) -> str:
        return self.token


KNOWN_EAPIS: dict[str, Eapi] = {
    str(rank): Eapi(token=str(rank), rank=rank, features=_features_at(rank))
    for rank in range(_HIGHEST_KNOWN_RANK + 1)
}

LATEST_EAPI = KNOWN_EAPIS[str(_HIGHEST_KNOWN_RANK)]
DEFAULT_EAPI = KNOWN_EAPIS["0"]


def parse_eapi(token: str, *, strict: bool = False) -> Eapi:
    """Resolve an EAPI token against the capability table.

    Args:
        token: Raw EAPI value from a cache record.
        strict: Raise instead of degrading when the token is unknown.

    Returns:
        The known level, or a future level with the latest feature set.

    Raises:
        InvalidLevelTokenError: Empty or syntactically invalid token.
        UnrecognizedLevelError: Unknown token while ``strict`` is set.
    """
    if not token or not _EAPI_TOKEN.match(token):
        raise InvalidLevelTokenError(f"invalid EAPI token: {token!r}", field="EAPI")

    known = KNOWN_EAPIS.get(token)
    if known is not None:
        return known

    if strict:
        raise UnrecognizedLevelError(f"unrecognized EAPI: {token!r}", field="EAPI")

    logger.warning(
        "Unrecognized EAPI %r, treating it as a future level with EAPI %s features",
        token, LATEST_EAPI.token,
    )
    return Eapi(token=token, rank=_FUTURE_RANK, features=_features_at(_FUTURE_RANK))
