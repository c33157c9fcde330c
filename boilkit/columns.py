"""Column lists that steer which columns go into inserts and updates."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field


class ColumnsKind(enum.IntEnum):
    """How a column list interacts with column inference."""

    NONE = 0
    INFER = 1
    WHITELIST = 2
    GREYLIST = 3
    BLACKLIST = 4


def set_complement(a: Iterable[str], b: Iterable[str]) -> list[str]:
    """Return the items of ``a`` that are not in ``b``, keeping their order."""
    exclude = set(b)
    return [item for item in a if item not in exclude]


def set_merge(a: Iterable[str], b: Iterable[str]) -> list[str]:
    """Return the union of ``a`` and ``b`` without duplicates, in first-seen order."""
    return list(dict.fromkeys([*a, *b]))


def sort_by_keys(keys: Sequence[str], strs: Iterable[str]) -> list[str]:
    """Order ``strs`` by their position in ``keys``; unknown items come first."""
    positions: dict[str, int] = {}
    for index, key in enumerate(keys):
        positions[key] = index
    return sorted(strs, key=lambda item: positions.get(item, -1))


@dataclass(frozen=True)
class Columns:
    """A list of columns together with the kind of list it is."""

    kind: ColumnsKind = ColumnsKind.NONE
    cols: tuple[str, ...] = field(default_factory=tuple)

    def is_none(self) -> bool:
        return self.kind is ColumnsKind.NONE

    def is_infer(self) -> bool:
        return self.kind is ColumnsKind.INFER

    def is_whitelist(self) -> bool:
        return self.kind is ColumnsKind.WHITELIST

    def is_blacklist(self) -> bool:
        return self.kind is ColumnsKind.BLACKLIST

    def is_greylist(self) -> bool:
        return self.kind is ColumnsKind.GREYLIST

    def insert_column_set(
        self,
        cols: Sequence[str],
        defaults: Sequence[str],
        no_defaults: Sequence[str],
        non_zero_defaults: Sequence[str] | None,
    ) -> tuple[list[str], list[str]]:
        """Return the columns to insert and the columns to read back.

        None:      insert nothing, return nothing
        Infer:     insert no-default + non-zero-default columns; return defaults - insert
        Whitelist: insert the whitelist; return defaults - whitelist
        Blacklist: insert inferred - blacklist; return defaults - insert
        Greylist:  insert inferred + greylist; return defaults - insert
        """
        inferred = [*no_defaults, *(non_zero_defaults or ())]

        if self.kind is ColumnsKind.NONE:
            return [], []
        if self.kind is ColumnsKind.WHITELIST:
            return list(self.cols), set_complement(defaults, self.cols)
        if self.kind is ColumnsKind.INFER:
            insert = inferred
        elif self.kind is ColumnsKind.BLACKLIST:
            insert = set_complement(inferred, self.cols)
        elif self.kind is ColumnsKind.GREYLIST:
            insert = set_merge(inferred, self.cols)
        else:
            raise ValueError(f"not a real column list kind: {self.kind!r}")

        insert = sort_by_keys(cols, insert)
        return insert, set_complement(defaults, insert)

    def update_column_set(
        self, all_columns: Sequence[str], pkey_cols: Sequence[str]
    ) -> list[str]:
        """Return the columns to update.

        None: empty; Infer: all - pkeys; Whitelist: whitelist;
        Blacklist: all - pkeys - blacklist; Greylist: all - pkeys + greylist.
        """
        if self.kind is ColumnsKind.NONE:
            return []
        if self.kind is ColumnsKind.INFER:
            return set_complement(all_columns, pkey_cols)
        if self.kind is ColumnsKind.WHITELIST:
            return list(self.cols)
        if self.kind is ColumnsKind.BLACKLIST:
            return set_complement(set_complement(all_columns, pkey_cols), self.cols)
        if self.kind is ColumnsKind.GREYLIST:
            update = [*set_complement(all_columns, pkey_cols), *self.cols]
            return sort_by_keys(all_columns, update)
        raise ValueError(f"not a real column list kind: {self.kind!r}")


def none() -> Columns:
    """An empty column list: nothing is inserted or updated."""
    return Columns(ColumnsKind.NONE)


def infer() -> Columns:
    """Infer the final list of columns."""
    return Columns(ColumnsKind.INFER)


def whitelist(*args: str) -> Columns:
    """A list that fully overrides column inference."""
    return Columns(ColumnsKind.WHITELIST, tuple(args))


def blacklist(*args: str) -> Columns:
    """A list of columns removed from the inferred list."""
    return Columns(ColumnsKind.BLACKLIST, tuple(args))


def greylist(*args: str) -> Columns:
    """A list of columns added to the inferred list."""
    return Columns(ColumnsKind.GREYLIST, tuple(args))