"""Generator configuration and conversion of loosely typed config values."""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from boilkit.aliases import Aliases, RelationshipAlias, TableAlias
from boilkit.model import Column, ImportCollection, ImportSet


@dataclass
class AutoColumns:
    """Names of the columns used for automatic timestamps and soft deletes."""

    created: str = ""
    updated: str = ""
    deleted: str = ""


@dataclass
class TypeReplace:
    """Replaces the type of every column that matches ``match``."""

    tables: list[str] = field(default_factory=list)
    match: Column = field(default_factory=Column)
    replace: Column = field(default_factory=Column)
    imports: ImportSet = field(default_factory=ImportSet)


@dataclass
class Config:
    """Settings for one generation run."""

    driver_name: str = ""
    driver_config: dict[str, Any] = field(default_factory=dict)

    pkg_name: str = ""
    out_folder: str = ""
    template_dirs: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    replacements: list[str] = field(default_factory=list)
    debug: bool = False
    add_global: bool = False
    add_panic: bool = False
    add_soft_deletes: bool = False
    add_enum_types: bool = False
    no_context: bool = False
    no_tests: bool = False
    no_hooks: bool = False
    no_auto_timestamps: bool = False
    no_rows_affected: bool = False
    no_driver_templates: bool = False
    no_back_referencing: bool = False
    wipe: bool = False
    struct_tag_casing: str = ""
    relation_tag: str = ""
    tag_ignore: list[str] = field(default_factory=list)

    imports: ImportCollection = field(default_factory=ImportCollection)

    aliases: Aliases = field(default_factory=Aliases)
    type_replaces: list[TypeReplace] = field(default_factory=list)
    auto_columns: AutoColumns = field(default_factory=AutoColumns)

    version: str = ""

    def output_dir_depth(self) -> int:
        """Return how many directories deep the output folder is."""
        cleaned = os.path.normpath(self.out_folder or ".").replace(os.sep, "/")
        if cleaned == ".":
            return 0
        return cleaned.count("/") + 1


def _to_string_map(value: Any) -> dict[str, Any]:
    if isinstance(value, Mapping):
        return {str(key): item for key, item in value.items()}
    return {}


def _to_string_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return []


def _as_str(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{what} must be a string, got {type(value).__name__}")
    return value


def _as_bool(value: Any, what: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{what} must be a boolean, got {type(value).__name__}")
    return value


def _iterate_map_or_list(value: Any) -> Iterator[tuple[str, Any]]:
    """Yield (name, entry) pairs from a mapping or from a list of named entries."""
    if isinstance(value, Mapping):
        yield from _to_string_map(value).items()
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield _as_str(_to_string_map(item).get("name"), "name"), item


def _column_alias(value: Any) -> str:
    if isinstance(value, Mapping):
        return _as_str(_to_string_map(value).get("alias"), "alias")
    if isinstance(value, str):
        return value
    return ""


def _table_alias(value: Any) -> TableAlias:
    entry = _to_string_map(value)
    alias = TableAlias()

    for key in ("up_plural", "up_singular", "down_plural", "down_singular"):
        if entry.get(key) is not None:
            setattr(alias, key, _as_str(entry[key], key))

    if "columns" in entry:
        alias.columns = {
            name: _column_alias(col) for name, col in _iterate_map_or_list(entry["columns"])
        }

    if "relationships" in entry:
        for name, rel_value in _iterate_map_or_list(entry["relationships"]):
            rel = _to_string_map(rel_value)
            local = rel.get("local")
            foreign = rel.get("foreign")
            alias.relationships[name] = RelationshipAlias(
                local=_as_str(local, "local") if local is not None else "",
                foreign=_as_str(foreign, "foreign") if foreign is not None else "",
            )

    return alias


def convert_aliases(value: Any) -> Aliases:
    """Build Aliases from nested mappings, or lists of entries with a ``name`` key."""
    aliases = Aliases()
    if value is None:
        return aliases

    top_level = _to_string_map(value)
    for name, table_value in _iterate_map_or_list(top_level.get("tables")):
        aliases.tables[name] = _table_alias(table_value)
    return aliases


def _column_from_value(value: Any) -> Column:
    entry = _to_string_map(value)
    column = Column()
    for key in ("name", "type", "db_type", "udt_name", "full_db_type", "arr_type", "domain_name"):
        if entry.get(key) is not None:
            setattr(column, key, _as_str(entry[key], key))
    for key in ("auto_generated", "nullable"):
        if entry.get(key) is not None:
            setattr(column, key, _as_bool(entry[key], key))
    return column


def _strict_string_list(value: Any, what: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"{what} must be a list, got {type(value).__name__}")
    return [_as_str(item, what) for item in value]


def _import_set_from_value(value: Any) -> ImportSet:
    entry = _to_string_map(value)
    return ImportSet(
        standard=_strict_string_list(entry.get("standard"), "standard"),
        third_party=_strict_string_list(entry.get("third_party"), "third_party"),
    )


def convert_type_replace(value: Any) -> list[TypeReplace]:
    """Build TypeReplace entries from a list of mappings.

    Raises ValueError when an entry lacks ``match`` or ``replace``.
    """
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"type replacements must be a list, got {type(value).__name__}")

    replaces = []
    for item in value:
        entry = _to_string_map(item)
        if entry.get("match") is None or entry.get("replace") is None:
            raise ValueError("replace types must specify both match and replace")

        replace = TypeReplace(
            tables=_to_string_list(_to_string_map(entry["match"]).get("tables")),
            match=_column_from_value(entry["match"]),
            replace=_column_from_value(entry["replace"]),
        )
        if entry.get("imports") is not None:
            replace.imports = _import_set_from_value(entry["imports"])
        replaces.append(replace)

    return replaces