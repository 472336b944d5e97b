# src/logging/context.py — v1
"""Contextual logging support: attach record path, package and cache key to log records.

Values live in context variables, so concurrent parses in different
threads or tasks never see each other's context.
"""

from __future__ import annotations

import contextvars
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

_record_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "record_path", default=None
)
_package: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "package", default=None
)
_field: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "field", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    record_path: str | None = None
    package: str | None = None
    field: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        record_path=_record_path.get(),
        package=_package.get(),
        field=_field.get(),
    )


def set_record_context(record_path: str | None, package: str | None = None) -> None:
    """Set record-level context (called once per cache file)."""
    _record_path.set(record_path)
    _package.set(package)


def clear_context() -> None:
    """Reset all context variables."""
    _record_path.set(None)
    _package.set(None)
    _field.set(None)


@contextmanager
def record_context(record_path: str | None, package: str | None = None) -> Iterator[None]:
    """Scope record-level context to a block, restoring the previous values."""
    path_token = _record_path.set(record_path)
    package_token = _package.set(package)
    try:
        yield
    finally:
        _record_path.reset(path_token)
        _package.reset(package_token)


@contextmanager
def field_context(field: str) -> Iterator[None]:
    """Scope the cache key currently being parsed."""
    token = _field.set(field)
    try:
        yield
    finally:
        _field.reset(token)
