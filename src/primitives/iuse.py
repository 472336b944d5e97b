# src/primitives/iuse.py — v1
"""IUSE entries: flag name with an optional ``+``/``-`` default marker."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from ebuildmeta.core.errors import InvalidFlagNameError, InvalidIUseError
from ebuildmeta.primitives.flags import check_flag_name


class IUseDefault(str, Enum):
    NONE = "none"
    ENABLED = "enabled"
    DISABLED = "disabled"


_MARKERS: dict[str, IUseDefault] = {"+": IUseDefault.ENABLED, "-": IUseDefault.DISABLED}
_PREFIXES: dict[IUseDefault, str] = {
    IUseDefault.NONE: "",
    IUseDefault.ENABLED: "+",
    IUseDefault.DISABLED: "-",
}


class IUse(BaseModel):
    """A USE flag declared by the package."""

    model_config = ConfigDict(frozen=True)

    name: str
    default: IUseDefault = IUseDefault.NONE

    @property
    def has_default_marker(self) -> bool:
        return self.default is not IUseDefault.NONE

    def __str__(self) -> str:
        return f"{_PREFIXES[self.default]}{self.name}"


def parse_iuse_entry(token: str) -> IUse:
    """Parse one IUSE token such as ``+ssl`` or ``debug``."""
    if not token:
        raise InvalidIUseError("empty IUSE entry", field="IUSE")

    default = _MARKERS.get(token[0], IUseDefault.NONE)
    name = token[1:] if default is not IUseDefault.NONE else token
    try:
        check_flag_name(name)
    except InvalidFlagNameError as exc:
        raise exc.with_field("IUSE") from None
    return IUse(name=name, default=default)


def parse_iuse(value: str) -> tuple[IUse, ...]:
    """Parse a whitespace-separated IUSE value."""
    return tuple(parse_iuse_entry(token) for token in value.split())
