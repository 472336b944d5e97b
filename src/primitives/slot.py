# src/primitives/slot.py — v1
"""SLOT value: slot name with an optional ``/`` sub-slot."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

from ebuildmeta.core.errors import InvalidSlotError

_SLOT_NAME = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9+_.-]*$")


class Slot(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    subslot: str | None = None

    def __str__(self) -> str:
        if self.subslot is None:
            return self.name
        return f"{self.name}/{self.subslot}"


def parse_slot(value: str) -> Slot:
    """Parse ``0`` or ``0/2.1``."""
    name, sep, subslot = value.partition("/")
    if not _SLOT_NAME.match(name) or (sep and not _SLOT_NAME.match(subslot)):
        raise InvalidSlotError(f"invalid SLOT: {value!r}", field="SLOT")
    return Slot(name=name, subslot=subslot if sep else None)
