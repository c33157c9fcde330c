"""Database schema description shared by the generator: tables, columns, keys, imports."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field


@dataclass
class Column:
    """A column of a table as reported by a database driver."""

    name: str = ""
    type: str = ""
    db_type: str = ""
    default: str = ""
    nullable: bool = False
    unique: bool = False
    auto_generated: bool = False
    arr_type: str | None = None
    udt_name: str = ""
    domain_name: str | None = None
    full_db_type: str = ""


@dataclass
class ForeignKey:
    """A foreign key from ``table.column`` to ``foreign_table.foreign_column``."""

    name: str = ""
    table: str = ""
    column: str = ""
    nullable: bool = False
    unique: bool = False
    foreign_table: str = ""
    foreign_column: str = ""
    foreign_column_nullable: bool = False
    foreign_column_unique: bool = False


@dataclass
class Table:
    """A table with its columns, primary key and foreign keys."""

    name: str = ""
    columns: list[Column] = field(default_factory=list)
    pkey: tuple[str, ...] | None = None
    fkeys: list[ForeignKey] = field(default_factory=list)
    is_join_table: bool = False

    def get_column(self, name: str) -> Column:
        """Return the column called ``name``; raise KeyError if there is none."""
        for column in self.columns:
            if column.name == name:
                return column
        raise KeyError(f"could not find column name {name}")


@dataclass
class Dialect:
    """Quoting characters and SQL features of a database flavour."""

    lq: str = '"'
    rq: str = '"'
    use_index_placeholders: bool = False
    use_last_insert_id: bool = False
    use_schema: bool = False
    use_default_keyword: bool = False
    use_auto_columns: bool = False
    use_top: bool = False
    use_output_clause: bool = False
    use_case_when_exists_clause: bool = False


def _import_path(spec: str) -> str:
    quote = spec.find('"')
    return spec[quote:] if quote >= 0 else spec


def _sorted_unique(imports: Iterable[str]) -> list[str]:
    return sorted(dict.fromkeys(imports), key=_import_path)


@dataclass
class ImportSet:
    """Standard-library and third-party import specifications."""

    standard: list[str] = field(default_factory=list)
    third_party: list[str] = field(default_factory=list)

    def format(self) -> str:
        """Render the set as an import clause; empty when there is nothing to import."""
        everything = [*self.standard, *self.third_party]
        if not everything:
            return ""
        if len(everything) == 1:
            return f"import {everything[0]}"

        lines = ["import ("]
        lines.extend(f"\t{spec}" for spec in self.standard)
        if self.standard and self.third_party:
            lines.append("")
        lines.extend(f"\t{spec}" for spec in self.third_party)
        lines.append(")")
        return "\n".join(lines) + "\n"


@dataclass
class ImportCollection:
    """All import sets used while generating output."""

    all: ImportSet = field(default_factory=ImportSet)
    test: ImportSet = field(default_factory=ImportSet)
    singleton: dict[str, ImportSet] = field(default_factory=dict)
    test_singleton: dict[str, ImportSet] = field(default_factory=dict)
    based_on_type: dict[str, ImportSet] = field(default_factory=dict)


def get_table(tables: Iterable[Table], name: str) -> Table:
    """Return the table called ``name``; raise KeyError if there is none."""
    for table in tables:
        if table.name == name:
            return table
    raise KeyError(f"could not find table name: {name}")


def add_type_imports(
    imports: ImportSet,
    based_on_type: Mapping[str, ImportSet],
    column_types: Iterable[str],
) -> ImportSet:
    """Return ``imports`` extended by the imports each column type needs.

    Duplicates are dropped and both lists are sorted by import path.
    The given set is left unchanged.
    """
    standard = list(imports.standard)
    third_party = list(imports.third_party)
    for typ in column_types:
        extra = based_on_type.get(typ)
        if extra is not None:
            standard.extend(extra.standard)
            third_party.extend(extra.third_party)
    return ImportSet(_sorted_unique(standard), _sorted_unique(third_party))