"""Name mangling: casing, pluralisation and relationship names."""

from __future__ import annotations

import re
from collections.abc import Iterable

from boilkit.model import ForeignKey, Table, get_table

_UPPERCASE_WORDS = frozenset(
    {
        "acl", "api", "ascii", "cpu", "css", "db", "dns", "eof", "guid", "html",
        "http", "https", "id", "ip", "json", "lhs", "oauth", "qps", "ram", "rhs",
        "rpc", "sla", "smtp", "sql", "ssh", "tcp", "tls", "ttl", "udp", "ui",
        "uid", "uuid", "uri", "url", "utf8", "vm", "xml", "xmpp", "xsrf", "xss",
    }
)

_WORD_WITH_DIGITS = re.compile(r"^([a-z]+)(\d+)$", re.IGNORECASE)


def _title_word(word: str) -> str:
    lower = word.lower()
    if lower in _UPPERCASE_WORDS:
        return word.upper()
    digits = _WORD_WITH_DIGITS.match(word)
    if digits and digits.group(1).lower() in _UPPERCASE_WORDS:
        return word.upper()
    return word[:1].upper() + word[1:]


def title_case(name: str) -> str:
    """Turn ``snake_case`` into ``TitleCase``, upper-casing initialisms like ID."""
    return "".join(_title_word(part) for part in name.split("_") if part)


def camel_case(name: str) -> str:
    """Turn ``snake_case`` into ``camelCase``."""
    parts = [part for part in name.split("_") if part]
    if not parts:
        return ""
    return parts[0].lower() + "".join(_title_word(part) for part in parts[1:])


def _rules(pairs: Iterable[tuple[str, str]]) -> list[tuple[re.Pattern[str], str]]:
    return [(re.compile(pattern, re.IGNORECASE), repl) for pattern, repl in pairs]


# Highest priority first.
_PLURAL_RULES = _rules(
    [
        (r"(quiz)$", r"\1zes"),
        (r"^(oxen)$", r"\1"),
        (r"^(ox)$", r"\1en"),
        (r"^(m|l)ice$", r"\1ice"),
        (r"^(m|l)ouse$", r"\1ice"),
        (r"(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
        (r"(x|ch|ss|sh)$", r"\1es"),
        (r"([^aeiouy]|qu)y$", r"\1ies"),
        (r"(hive)$", r"\1s"),
        (r"(?:([^f])fe|([lr])f)$", r"\1\2ves"),
        (r"sis$", "ses"),
        (r"([ti])a$", r"\1a"),
        (r"([ti])um$", r"\1a"),
        (r"(buffal|tomat)o$", r"\1oes"),
        (r"(bu)s$", r"\1ses"),
        (r"(alias|status)$", r"\1es"),
        (r"(octop|vir)i$", r"\1i"),
        (r"(octop|vir)us$", r"\1i"),
        (r"^(ax|test)is$", r"\1es"),
        (r"s$", "s"),
        (r"$", "s"),
    ]
)

_SINGULAR_RULES = _rules(
    [
        (r"(database)s$", r"\1"),
        (r"(quiz)zes$", r"\1"),
        (r"(matr)ices$", r"\1ix"),
        (r"(vert|ind)ices$", r"\1ex"),
        (r"^(ox)en", r"\1"),
        (r"(alias|status)(es)?$", r"\1"),
        (r"(octop|vir)(us|i)$", r"\1us"),
        (r"^(a)x[ie]s$", r"\1xis"),
        (r"(cris|test)(is|es)$", r"\1is"),
        (r"(shoe)s$", r"\1"),
        (r"(o)es$", r"\1"),
        (r"(bus)(es)?$", r"\1"),
        (r"^(m|l)ice$", r"\1ouse"),
        (r"(x|ch|ss|sh)es$", r"\1"),
        (r"(m)ovies$", r"\1ovie"),
        (r"(s)eries$", r"\1eries"),
        (r"([^aeiouy]|qu)ies$", r"\1y"),
        (r"([lr])ves$", r"\1f"),
        (r"(tive)s$", r"\1"),
        (r"(hive)s$", r"\1"),
        (r"([^f])ves$", r"\1fe"),
        (r"(^analy)(sis|ses)$", r"\1sis"),
        (
            r"((a)naly|(b)a|(d)iagno|(p)arenthe|(p)rogno|(s)ynop|(t)he)(sis|ses)$",
            r"\1sis",
        ),
        (r"([ti])a$", r"\1um"),
        (r"(n)ews$", r"\1ews"),
        (r"(ss)$", r"\1"),
        (r"s$", ""),
    ]
)

_UNCOUNTABLE = frozenset(
    {"equipment", "information", "rice", "money", "species", "series", "fish", "sheep", "jeans", "police"}
)

_IRREGULAR_PLURAL = {
    "person": "people", "people": "people",
    "man": "men", "men": "men",
    "child": "children", "children": "children",
}
_IRREGULAR_SINGULAR = {
    "people": "person", "person": "person",
    "men": "man", "man": "man",
    "children": "child", "child": "child",
}


def _inflect(
    name: str,
    rules: list[tuple[re.Pattern[str], str]],
    irregular: dict[str, str],
) -> str:
    head, sep, word = name.rpartition("_")
    lower = word.lower()
    if not word or lower in _UNCOUNTABLE:
        return name
    if lower in irregular:
        replacement = irregular[lower]
        if word[:1].isupper():
            replacement = replacement[:1].upper() + replacement[1:]
        return head + sep + replacement
    for pattern, repl in rules:
        if pattern.search(word):
            return head + sep + pattern.sub(repl, word, count=1)
    return name


def plural(name: str) -> str:
    """Return the plural form of the last word of ``name``."""
    return _inflect(name, _PLURAL_RULES, _IRREGULAR_PLURAL)


def singular(name: str) -> str:
    """Return the singular form of the last word of ``name``."""
    return _inflect(name, _SINGULAR_RULES, _IRREGULAR_SINGULAR)


IDENTIFIER_SUFFIXES = ("_id", "_uuid", "_guid", "_oid")


def trim_suffixes(value: str) -> str:
    """Remove the first matching identifier suffix such as ``_id``."""
    for suffix in IDENTIFIER_SUFFIXES:
        if value.endswith(suffix):
            return value[: -len(suffix)]
    return value


def txt_name_to_one(fk: ForeignKey) -> tuple[str, str]:
    """Return the local and foreign names of a one-to-many or one-to-one relation.

    The local side is the one holding the foreign key.
    """
    fk_trimmed = singular(trim_suffixes(fk.column))
    singular_foreign_table = singular(fk.foreign_table)
    fk_not_table_name = fk_trimmed != singular_foreign_table

    if fk_trimmed == singular_foreign_table:
        if fk.column != singular_foreign_table:
            foreign_fn = title_case(fk_trimmed)
        else:
            foreign_fn = title_case(f"{singular(fk.table)}_{fk_trimmed}")
    elif fk_trimmed == fk.column:
        foreign_fn = title_case(f"{fk_trimmed}_{singular_foreign_table}")
    else:
        foreign_fn = title_case(fk_trimmed)

    local_fn = title_case(fk_trimmed) if fk_not_table_name else ""
    plurality = singular if fk.unique else plural
    local_fn += title_case(plurality(fk.table))

    return local_fn, foreign_fn


def txt_name_to_many(lhs: ForeignKey, rhs: ForeignKey) -> tuple[str, str]:
    """Return the names of both sides of a many-to-many relation."""

    def side(fk: ForeignKey) -> str:
        key = singular(trim_suffixes(fk.column))
        prefix = title_case(key) if key != singular(fk.foreign_table) else ""
        return prefix + title_case(plural(fk.foreign_table))

    return side(lhs), side(rhs)


_PRIMITIVES = frozenset(
    {
        "int", "int8", "int16", "int32", "int64",
        "uint", "uint8", "uint16", "uint32", "uint64",
        "float32", "float64",
        "byte", "rune", "string",
    }
)


def is_primitive(typ: str) -> bool:
    """Return True if ``typ`` is a primitive type comparable with ``==``."""
    return typ in _PRIMITIVES


def uses_primitives(
    tables: Iterable[Table],
    table: str,
    column: str,
    foreign_table: str,
    foreign_column: str,
) -> bool:
    """Return True if both ends of a relation have primitive types."""
    tables = list(tables)
    local_col = get_table(tables, table).get_column(column)
    foreign_col = get_table(tables, foreign_table).get_column(foreign_column)
    return is_primitive(local_col.type) and is_primitive(foreign_col.type)