"""Template loading, the data handed to templates and the helpers they may call."""

from __future__ import annotations

import base64
import binascii
import hashlib
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Protocol

import jinja2

from boilkit.aliases import Aliases, TableAlias
from boilkit.config import AutoColumns
from boilkit.model import Column, Dialect, Table, get_table
from boilkit.naming import camel_case, is_primitive, plural, singular, title_case, uses_primitives


class Once(set):
    """A set of strings used by templates to emit something only once."""

    def has(self, s: str) -> bool:
        return s in self

    def put(self, s: str) -> bool:
        """Add ``s``; return False if it was already there."""
        if s in self:
            return False
        self.add(s)
        return True


def _quote_wrap(s: str) -> str:
    return f'"{s}"'


TEMPLATE_STRING_MAPPERS: dict[str, Callable[[str], str]] = {
    "quote_wrap": _quote_wrap,
    "title_case": title_case,
    "camel_case": camel_case,
}


@dataclass
class TemplateData:
    """Everything a template can see while it is rendered."""

    tables: list[Table] = field(default_factory=list)
    table: Table = field(default_factory=Table)
    aliases: Aliases = field(default_factory=Aliases)

    pkg_name: str = ""
    schema: str = ""

    driver_name: str = ""
    dialect: Dialect = field(default_factory=Dialect)

    lq: str = ""
    rq: str = ""

    add_global: bool = False
    add_panic: bool = False
    add_soft_deletes: bool = False
    add_enum_types: bool = False
    no_context: bool = False
    no_hooks: bool = False
    no_auto_timestamps: bool = False
    no_rows_affected: bool = False
    no_driver_templates: bool = False
    no_back_referencing: bool = False

    tags: list[str] = field(default_factory=list)
    relation_tag: str = ""
    struct_tag_casing: str = ""
    tag_ignore: set[str] = field(default_factory=set)
    output_dir_depth: int = 0

    db_types: Once = field(default_factory=Once)
    string_funcs: dict[str, Callable[[str], str]] = field(
        default_factory=lambda: dict(TEMPLATE_STRING_MAPPERS)
    )
    auto_columns: AutoColumns = field(default_factory=AutoColumns)

    def quotes(self, s: str) -> str:
        """Wrap ``s`` in the dialect's quote characters."""
        return f"{self.lq}{s}{self.rq}"

    def schema_table(self, table: str) -> str:
        """Return the quoted table name, prefixed by the schema when it is used."""
        if self.dialect.use_schema and self.schema:
            return f"{self.lq}{self.schema}{self.rq}.{self.lq}{table}{self.rq}"
        return f"{self.lq}{table}{self.rq}"


class _TemplateLoader(Protocol):
    def load(self) -> bytes: ...


@dataclass(frozen=True)
class FileLoader:
    """Loads a template from a file on disk."""

    path: str

    def load(self) -> bytes:
        try:
            return Path(self.path).read_bytes()
        except OSError as err:
            raise OSError(f"failed to load template: {self.path}") from err

    def __str__(self) -> str:
        return f"file:{self.path}"


def _decode_base64(contents: str) -> bytes:
    return base64.b64decode(contents, validate=True)


@dataclass(frozen=True)
class Base64Loader:
    """Loads a template supplied as base64 text."""

    contents: str

    def load(self) -> bytes:
        try:
            return _decode_base64(self.contents)
        except (binascii.Error, ValueError) as err:
            raise ValueError("failed to decode driver's template, should be base64") from err

    def __str__(self) -> str:
        try:
            decoded = _decode_base64(self.contents)
        except (binascii.Error, ValueError) as err:
            raise ValueError("base64 loader does not hold proper base64") from err
        return f"base64:(sha256 of content): {hashlib.sha256(decoded).hexdigest()}"


@dataclass(frozen=True)
class LazyTemplate:
    """A template name together with the loader that fetches its text."""

    name: str
    loader: _TemplateLoader


def sort_template_names(names: Iterable[str]) -> list[str]:
    """Sort template names, with ``struct.tpl`` first."""
    return sorted(names, key=lambda name: (name != "struct.tpl", name))


def _go_varname(s: str) -> str:
    return s.replace("[", "_").replace("]", "_").replace(".", "_")


def _split_lines(s: str) -> list[str]:
    return s.split("\n") if s else []


def _alias_cols(alias: TableAlias) -> Callable[[str], str]:
    return alias.column


def _once_put(once: Once, s: str) -> bool:
    return once.put(s)


def _once_has(once: Once, s: str) -> bool:
    return once.has(s)


TEMPLATE_FUNCTIONS: dict[str, Callable[..., Any]] = {
    "quote_wrap": _quote_wrap,
    "go_varname": _go_varname,
    "singular": singular,
    "plural": plural,
    "title_case": title_case,
    "camel_case": camel_case,
    "join": lambda sep, items: sep.join(items),
    "string_map": lambda fn, items: [fn(item) for item in items],
    "prefix_string_slice": lambda prefix, items: [prefix + item for item in items],
    "contains_any": lambda items, *finds: any(f in items for f in finds),
    "set_include": lambda s, items: s in items,
    "once_new": Once,
    "once_put": _once_put,
    "once_has": _once_has,
    "alias_cols": _alias_cols,
    "uses_primitives": uses_primitives,
    "is_primitive": is_primitive,
    "split_lines": _split_lines,
    "get_table": get_table,
    "column_names": lambda columns: [c.name for c in columns],
}


def _new_environment(sources: Mapping[str, str]) -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.DictLoader(dict(sources)),
        keep_trailing_newline=True,
        undefined=jinja2.StrictUndefined,
        autoescape=False,
    )
    env.globals.update(TEMPLATE_FUNCTIONS)
    return env


@dataclass
class TemplateList:
    """A set of parsed templates that can be rendered by name."""

    environment: jinja2.Environment

    def templates(self) -> list[str]:
        """Return the names of all ``.tpl`` templates, sorted."""
        names = self.environment.list_templates()
        return sort_template_names(name for name in names if name.endswith(".tpl"))

    def render(self, name: str, data: Any) -> str:
        """Render the template ``name``; the fields of ``data`` become its variables."""
        if is_dataclass(data) and not isinstance(data, type):
            variables = {f.name: getattr(data, f.name) for f in fields(data)}
        elif isinstance(data, Mapping):
            variables = dict(data)
        else:
            variables = {}
        variables["data"] = data
        return self.environment.get_template(name).render(variables)


def _is_test_template(name: str) -> bool:
    first_dir = re.split(r"[\\/]", name, maxsplit=1)[0]
    return first_dir == "test" or first_dir.endswith("_test")


def load_templates(lazy_templates: Sequence[LazyTemplate], test_templates: bool) -> TemplateList:
    """Load and parse either the regular or the test templates.

    Raises OSError or ValueError when a template cannot be loaded,
    and ValueError when one cannot be parsed.
    """
    sources: dict[str, str] = {}
    for template in lazy_templates:
        if _is_test_template(template.name) != test_templates:
            continue
        try:
            contents = template.loader.load()
        except OSError as err:
            raise OSError(f"failed to load template: {template.name}") from err
        except ValueError as err:
            raise ValueError(f"failed to load template: {template.name}") from err
        sources[template.name] = contents.decode("utf-8")

    env = _new_environment(sources)
    for name in sources:
        try:
            env.get_template(name)
        except jinja2.TemplateSyntaxError as err:
            raise ValueError(f"failed to parse template: {name}: {err}") from err

    return TemplateList(env)


__all__ = [
    "Base64Loader",
    "Column",
    "FileLoader",
    "LazyTemplate",
    "Once",
    "TEMPLATE_FUNCTIONS",
    "TEMPLATE_STRING_MAPPERS",
    "TemplateData",
    "TemplateList",
    "load_templates",
    "sort_template_names",
]