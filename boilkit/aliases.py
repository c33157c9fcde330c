"""Generated names for tables, columns and relationships."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from boilkit.model import Table
from boilkit.naming import camel_case, plural, singular, title_case, txt_name_to_many, txt_name_to_one


@dataclass(frozen=True)
class RelationshipAlias:
    """Names for both sides of a foreign key."""

    local: str = ""
    foreign: str = ""


@dataclass
class TableAlias:
    """Spellings of a table name, plus its column and relationship aliases."""

    up_plural: str = ""
    up_singular: str = ""
    down_plural: str = ""
    down_singular: str = ""
    columns: dict[str, str] = field(default_factory=dict)
    relationships: dict[str, RelationshipAlias] = field(default_factory=dict)

    def column(self, column: str) -> str:
        """Return the alias of ``column``; raise KeyError if there is none."""
        try:
            return self.columns[column]
        except KeyError:
            raise KeyError(
                f"could not find column alias for: {self.up_singular}.{column}"
            ) from None

    def relationship(self, fkey: str) -> RelationshipAlias:
        """Return the alias of foreign key ``fkey``; raise KeyError if there is none."""
        try:
            return self.relationships[fkey]
        except KeyError:
            raise KeyError(
                f"could not find relationship alias for: {self.up_singular}.{fkey}"
            ) from None


@dataclass
class Aliases:
    """Aliases for every table of a generation run."""

    tables: dict[str, TableAlias] = field(default_factory=dict)

    def table(self, name: str) -> TableAlias:
        """Return the aliases of table ``name``; raise KeyError if there are none."""
        try:
            return self.tables[name]
        except KeyError:
            raise KeyError(f"could not find table aliases for: {name}") from None

    def many_relationship(
        self, table: str, fkey: str, join_table: str, join_table_fkey: str
    ) -> RelationshipAlias:
        """Look up a relationship, through the join table when one is given."""
        if join_table:
            return self.table(join_table).relationship(join_table_fkey)
        return self.table(table).relationship(fkey)


def _fill_table(table: TableAlias, t: Table) -> None:
    table.up_plural = table.up_plural or title_case(plural(t.name))
    table.up_singular = table.up_singular or title_case(singular(t.name))
    table.down_plural = table.down_plural or camel_case(plural(t.name))
    table.down_singular = table.down_singular or camel_case(singular(t.name))

    for column in t.columns:
        table.columns.setdefault(column.name, title_case(column.name))

    for fk in t.fkeys:
        current = table.relationships.get(fk.name, RelationshipAlias())
        if current.local and current.foreign:
            continue
        local, foreign = txt_name_to_one(fk)
        table.relationships[fk.name] = RelationshipAlias(
            current.local or local, current.foreign or foreign
        )


def _fill_join_table(table: TableAlias, t: Table) -> None:
    lhs, rhs = t.fkeys[0], t.fkeys[1]
    lhs_alias = table.relationships.get(lhs.name, RelationshipAlias())
    rhs_alias = table.relationships.get(rhs.name, RelationshipAlias())

    if lhs_alias.local and lhs_alias.foreign and rhs_alias.local and rhs_alias.foreign:
        return

    # Local/foreign are reversed here to match one-to-many relationships:
    # local is the side that would hold the foreign key without a join table.
    lhs_name, rhs_name = txt_name_to_many(lhs, rhs)

    if lhs_alias.local:
        rhs_name = lhs_alias.local
    elif rhs_alias.local:
        lhs_name = rhs_alias.local

    if lhs_alias.foreign:
        lhs_name = lhs_alias.foreign
    elif rhs_alias.foreign:
        rhs_name = rhs_alias.foreign

    table.relationships[lhs.name] = RelationshipAlias(
        lhs_alias.local or rhs_name, lhs_alias.foreign or lhs_name
    )
    table.relationships[rhs.name] = RelationshipAlias(
        rhs_alias.local or lhs_name, rhs_alias.foreign or rhs_name
    )


def fill_aliases(aliases: Aliases, tables: Iterable[Table]) -> None:
    """Fill in every alias the user has not provided, in place."""
    tables = list(tables)

    for t in tables:
        table = aliases.tables.setdefault(t.name, TableAlias())
        if not t.is_join_table:
            _fill_table(table, t)

    for t in tables:
        if t.is_join_table:
            _fill_join_table(aliases.tables[t.name], t)