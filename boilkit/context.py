"""Immutable request contexts carrying debug and hook settings."""

from __future__ import annotations

import enum
import sys
from types import MappingProxyType
from typing import Any, Hashable, Mapping, TextIO


class _ContextKey(enum.Enum):
    SKIP_HOOKS = enum.auto()
    SKIP_TIMESTAMPS = enum.auto()
    DEBUG = enum.auto()
    DEBUG_WRITER = enum.auto()


# Whether generated SQL and debug information is written to DEBUG_WRITER.
# Keep it off in production to avoid leaking sensitive data.
DEBUG_MODE = False

# Where debug output goes when enabled; None means the current sys.stdout.
DEBUG_WRITER: TextIO | None = None


class Context:
    """An immutable set of key/value pairs; deriving one never changes the parent."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[Hashable, Any] | None = None) -> None:
        self._values = MappingProxyType(dict(values or {}))

    def with_value(self, key: Hashable, value: Any) -> "Context":
        """Return a new context holding ``value`` under ``key``."""
        return Context({**self._values, key: value})

    def value(self, key: Hashable) -> Any:
        """Return the value stored under ``key``, or None."""
        return self._values.get(key)

    def __repr__(self) -> str:
        return f"Context({dict(self._values)!r})"


class HookPoint(enum.IntEnum):
    """The point in time at which a hook runs."""

    BEFORE_INSERT = 1
    BEFORE_UPDATE = 2
    BEFORE_DELETE = 3
    BEFORE_UPSERT = 4
    AFTER_INSERT = 5
    AFTER_SELECT = 6
    AFTER_UPDATE = 7
    AFTER_DELETE = 8
    AFTER_UPSERT = 9


def background() -> Context:
    """Return an empty root context."""
    return Context()


def with_debug(ctx: Context, debug: bool) -> Context:
    """Return a context with debug output switched on or off."""
    return ctx.with_value(_ContextKey.DEBUG, debug)


def is_debug(ctx: Context) -> bool:
    """Return the context's debug flag, or DEBUG_MODE when it has none."""
    debug = ctx.value(_ContextKey.DEBUG)
    if isinstance(debug, bool):
        return debug
    return DEBUG_MODE


def with_debug_writer(ctx: Context, writer: TextIO) -> Context:
    """Return a context whose debug output goes to ``writer``."""
    return ctx.with_value(_ContextKey.DEBUG_WRITER, writer)


def debug_writer_from(ctx: Context) -> TextIO:
    """Return the context's debug writer, or the global one when it has none."""
    writer = ctx.value(_ContextKey.DEBUG_WRITER)
    if writer is not None and hasattr(writer, "write"):
        return writer
    return DEBUG_WRITER if DEBUG_WRITER is not None else sys.stdout


def skip_hooks(ctx: Context) -> Context:
    """Return a context in which hooks do not run."""
    return ctx.with_value(_ContextKey.SKIP_HOOKS, True)


def hooks_are_skipped(ctx: Context) -> bool:
    """Return True if the context skips hooks."""
    return bool(ctx.value(_ContextKey.SKIP_HOOKS))


def skip_timestamps(ctx: Context) -> Context:
    """Return a context in which automatic timestamps are not set."""
    return ctx.with_value(_ContextKey.SKIP_TIMESTAMPS, True)


def timestamps_are_skipped(ctx: Context) -> bool:
    """Return True if the context skips automatic timestamps."""
    return bool(ctx.value(_ContextKey.SKIP_TIMESTAMPS))