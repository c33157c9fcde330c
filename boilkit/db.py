"""Process-wide database handle and timestamp location."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from typing import Any


@dataclass
class _Globals:
    db: Any = None
    location: tzinfo = field(default=timezone.utc)


_globals = _Globals()


def set_db(db: Any) -> None:
    """Set the database handle used by all generated code."""
    _globals.db = db


def get_db() -> Any:
    """Return the global database handle."""
    return _globals.db


def begin() -> Any:
    """Begin a transaction on the global database handle.

    Raises TypeError if the handle cannot begin transactions.
    """
    starter = getattr(_globals.db, "begin", None)
    if not callable(starter):
        raise TypeError("database does not support transactions")
    return starter()


def set_location(loc: tzinfo) -> None:
    """Set the timezone used for automatic created/updated timestamps.

    Raises TypeError if loc is not a timezone.
    """
    if not isinstance(loc, tzinfo):
        raise TypeError(f"location must be a tzinfo, got {type(loc).__name__}")
    _globals.location = loc


def get_location() -> tzinfo:
    """Return the timezone used for automatic timestamps."""
    return _globals.location