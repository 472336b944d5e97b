# src/primitives/phase.py — v1
"""Lifecycle phases and the DEFINED_PHASES cache value.

The cache stores short names (``compile`` for ``src_compile``). A lone
``-`` means "no phases defined", which is distinct from the key being
absent altogether.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from ebuildmeta.core.errors import InvalidPhaseError

NO_PHASES_SENTINEL = "-"


class Phase(str, Enum):
    """Phase functions, in execution order."""

    PKG_PRETEND = "pkg_pretend"
    PKG_SETUP = "pkg_setup"
    SRC_UNPACK = "src_unpack"
    SRC_PREPARE = "src_prepare"
    SRC_CONFIGURE = "src_configure"
    SRC_COMPILE = "src_compile"
    SRC_TEST = "src_test"
    SRC_INSTALL = "src_install"
    PKG_PREINST = "pkg_preinst"
    PKG_POSTINST = "pkg_postinst"
    PKG_PRERM = "pkg_prerm"
    PKG_POSTRM = "pkg_postrm"
    PKG_CONFIG = "pkg_config"
    PKG_INFO = "pkg_info"
    PKG_NOFETCH = "pkg_nofetch"

    @property
    def short_name(self) -> str:
        """Name as written in DEFINED_PHASES (prefix stripped)."""
        return self.value.split("_", 1)[1]

    @classmethod
    def from_short_name(cls, name: str) -> Phase:
        phase = _BY_SHORT_NAME.get(name)
        if phase is None:
            raise InvalidPhaseError(f"unknown phase: {name!r}", field="DEFINED_PHASES")
        return phase

    @classmethod
    def from_name(cls, name: str) -> Phase:
        """Accept either the full function name or the short cache name."""
        try:
            return cls(name)
        except ValueError:
            return cls.from_short_name(name)


_BY_SHORT_NAME: dict[str, Phase] = {p.short_name: p for p in Phase}


class DefinedPhases(BaseModel):
    """Parsed DEFINED_PHASES value."""

    model_config = ConfigDict(frozen=True)

    phases: tuple[Phase, ...] = ()
    none_sentinel: bool = False

    @property
    def is_conflicting(self) -> bool:
        """The sentinel appeared together with real phase names."""
        return self.none_sentinel and bool(self.phases)

    def __contains__(self, phase: object) -> bool:
        return phase in self.phases

    def __str__(self) -> str:
        tokens = [p.short_name for p in self.phases]
        if self.none_sentinel:
            tokens.insert(0, NO_PHASES_SENTINEL)
        return " ".join(tokens)


def parse_defined_phases(value: str) -> DefinedPhases:
    """Parse a DEFINED_PHASES value of short names or the ``-`` sentinel.

    Conflicting input such as ``- compile`` parses successfully; the
    conflict is reported later by validation.
    """
    none_sentinel = False
    phases: list[Phase] = []
    for token in value.split():
        if token == NO_PHASES_SENTINEL:
            none_sentinel = True
        else:
            phases.append(Phase.from_short_name(token))
    return DefinedPhases(phases=tuple(phases), none_sentinel=none_sentinel)
