"""The generation run: template discovery, type replacements and file output."""

from __future__ import annotations

import dataclasses
import json
import os
import re
import shutil
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from boilkit.aliases import fill_aliases
from boilkit.config import Config, TypeReplace
from boilkit.model import Column, Dialect, ImportSet, Table, add_type_imports
from boilkit.output import (
    disclaimer,
    execute_template,
    get_long_ext,
    imports_clause,
    output_filename_parts,
    package_clause,
    write_file,
)
from boilkit.templates import (
    Base64Loader,
    FileLoader,
    LazyTemplate,
    TemplateData,
    TemplateList,
    load_templates,
)

# Tags must look like: json, xml, etc.
_VALID_TAG = re.compile(r"[a-zA-Z_.]+")
# Ignored columns are written as column_name or table_name.column_name.
_VALID_TABLE_COLUMN = re.compile(r"^\w+\.\w+$|^\w+$", re.ASCII)

DirExtMap = dict[str, dict[str, list[str]]]


def normalize_slashes(path: str) -> str:
    """Convert forward and back slashes to the native path separator."""
    return path.replace("/", os.sep).replace("\\", os.sep)


def denormalize_slashes(path: str) -> str:
    """Convert back slashes to forward slashes."""
    return path.replace("\\", "/")


def match_column(column: Column, matcher: Column) -> bool:
    """Return True if ``column`` satisfies every specifier set in ``matcher``.

    Strings are compared only when set in the matcher; the auto-generated and
    nullable flags must always be equal.
    """
    for name in ("name", "type", "db_type", "udt_name", "full_db_type"):
        wanted = getattr(matcher, name)
        if wanted and wanted != getattr(column, name):
            return False

    for name in ("arr_type", "domain_name"):
        wanted = getattr(matcher, name)
        if wanted is None:
            continue
        actual = getattr(column, name)
        if actual is None or (wanted and wanted != actual):
            return False

    return (
        matcher.auto_generated == column.auto_generated
        and matcher.nullable == column.nullable
    )


def column_merge(dst: Column, src: Column) -> Column:
    """Return ``dst`` with the non-empty type fields of ``src`` copied over.

    The name is never copied.
    """
    changes: dict[str, Any] = {
        name: getattr(src, name)
        for name in ("type", "db_type", "udt_name", "full_db_type")
        if getattr(src, name)
    }
    if src.arr_type:
        changes["arr_type"] = src.arr_type
    return dataclasses.replace(dst, **changes)


def should_replace_in_table(table: Table, replace: TypeReplace) -> bool:
    """Return True if ``replace`` applies to ``table``: no tables listed, or it is one of them."""
    return not replace.tables or table.name in replace.tables


def check_pkeys(tables: Iterable[Table]) -> None:
    """Raise ValueError naming every table without a primary key."""
    missing = [table.name for table in tables if table.pkey is None]
    if missing:
        raise ValueError(f"primary key missing in tables ({', '.join(missing)})")


def group_templates(templates: TemplateList) -> DirExtMap:
    """Group non-singleton templates by output directory and file extension."""
    dirs: DirExtMap = {}
    for name in templates.templates():
        parts = output_filename_parts(name)
        if parts.is_singleton:
            continue
        directory = os.path.dirname(parts.normalized)
        if directory == ".":
            directory = ""
        ext = get_long_ext(os.path.basename(name)).removesuffix(".tpl")
        dirs.setdefault(directory, {}).setdefault(ext, []).append(name)
    return dirs


def find_templates(root: str | os.PathLike[str], base: str) -> dict[str, FileLoader]:
    """Find every ``.tpl`` file below ``root/base``.

    Keys are paths relative to ``root`` (so they start with ``base``);
    raises FileNotFoundError when the directory does not exist.
    """
    root = os.fspath(root)
    root_base = os.path.join(root, base)
    if not os.path.exists(root_base):
        raise FileNotFoundError(f"template directory does not exist: {root_base}")

    found: dict[str, FileLoader] = {}
    for dirpath, _dirnames, filenames in os.walk(root_base):
        for filename in filenames:
            if os.path.splitext(filename)[1] != ".tpl":
                continue
            path = os.path.join(dirpath, filename)
            relative = os.path.relpath(path, root).lstrip(os.sep)
            found[relative] = FileLoader(path)
    return found


def _quote_character(q: str) -> str:
    return '\\"' if q == '"' else q


@dataclass
class State:
    """Everything one generation run needs: configuration, schema and templates.

    ``builtin_templates`` is a directory whose ``.tpl`` files are used when the
    configuration names no template directories; ``driver_templates`` maps
    template names to base64 text supplied by a database driver.
    """

    config: Config
    tables: list[Table] = field(default_factory=list)
    schema: str = ""
    dialect: Dialect = field(default_factory=Dialect)
    driver_templates: dict[str, str] = field(default_factory=dict)
    builtin_templates: str | None = None
    templates: TemplateList | None = field(default=None, init=False)
    test_templates: TemplateList | None = field(default=None, init=False)
    _prepared: bool = field(default=False, init=False, repr=False)

    def process_type_replacements(self) -> None:
        """Apply the configured type replacements to the tables' columns."""
        for replace in self.config.type_replaces:
            for table in self.tables:
                if not should_replace_in_table(table, replace):
                    continue
                for index, column in enumerate(table.columns):
                    if not match_column(column, replace.match):
                        continue
                    merged = column_merge(column, replace.replace)
                    table.columns[index] = merged
                    if replace.imports.standard or replace.imports.third_party:
                        self.config.imports.based_on_type[merged.type] = ImportSet(
                            list(replace.imports.standard),
                            list(replace.imports.third_party),
                        )

    def init_tags(self) -> None:
        """Drop duplicate tags and raise ValueError for a malformed one."""
        self.config.tags = list(dict.fromkeys(self.config.tags))
        for tag in self.config.tags:
            if not _VALID_TAG.search(tag):
                raise ValueError(
                    f"invalid tag format {tag!r} supplied, only specify name, eg: xml"
                )

    def _builtin_loaders(self) -> dict[str, Any]:
        if self.builtin_templates is None:
            return {}
        root = Path(self.builtin_templates)
        return {
            normalize_slashes(path.relative_to(root).as_posix()): FileLoader(str(path))
            for path in sorted(root.rglob("*.tpl"))
            if path.is_file()
        }

    def init_templates(self) -> list[LazyTemplate]:
        """Collect, override and load all templates; return them sorted by name.

        Raises ValueError for a malformed or dangling replacement.
        """
        loaders: dict[str, Any] = {}
        if self.config.template_dirs:
            for directory in self.config.template_dirs:
                absolute = os.path.abspath(directory)
                loaders.update(
                    find_templates(os.path.dirname(absolute), os.path.basename(absolute))
                )
        else:
            loaders.update(self._builtin_loaders())

        if not self.config.no_driver_templates:
            for name, contents in self.driver_templates.items():
                loaders[normalize_slashes(name)] = Base64Loader(contents)

        for replace in self.config.replacements:
            splits = replace.split(";")
            if len(splits) != 2:
                raise ValueError(
                    f"replace parameters must have 2 arguments, given: {replace}"
                )
            original, replacement = normalize_slashes(splits[0]), splits[1]
            if original not in loaders:
                raise ValueError(
                    f"replace can only replace existing templates, {original} does not exist"
                )
            loaders[original] = FileLoader(replacement)

        lazy = [LazyTemplate(name, loaders[name]) for name in sorted(loaders)]

        self.templates = load_templates(lazy, False)
        if not self.config.no_tests:
            self.test_templates = load_templates(lazy, True)
        return lazy

    def init_out_folders(self, lazy_templates: Iterable[LazyTemplate]) -> None:
        """Create the output folder and every sub-folder the templates write to."""
        out = self.config.out_folder
        if self.config.wipe and os.path.exists(out):
            shutil.rmtree(out)

        new_dirs: set[str] = set()
        for template in lazy_templates:
            fragments = template.name.split(os.sep)[1:-1]
            if fragments and fragments[-1] == "singleton":
                fragments = fragments[:-1]
            if fragments:
                new_dirs.add(os.sep.join(fragments))

        os.makedirs(out, exist_ok=True)
        for directory in sorted(new_dirs):
            os.makedirs(os.path.join(out, directory), exist_ok=True)

    def _print_debug(self, lazy_templates: list[LazyTemplate]) -> None:
        payload = {
            "config": dataclasses.asdict(self.config),
            "driver_config": self.config.driver_config,
            "schema": self.schema,
            "dialect": dataclasses.asdict(self.dialect),
            "tables": [dataclasses.asdict(table) for table in self.tables],
            "templates": [
                {"name": t.name, "loader": str(t.loader)} for t in lazy_templates
            ],
        }
        print(json.dumps(payload, default=str))

    def _prepare(self) -> None:
        if self._prepared:
            return
        lazy: list[LazyTemplate] = []
        try:
            if not self.tables:
                raise ValueError("unable to initialize tables: no tables found in database")
            check_pkeys(self.tables)
            if not self.config.no_context:
                self.config.imports.all.standard.append('"context"')
                self.config.imports.test.standard.append('"context"')
            self.process_type_replacements()
            lazy = self.init_templates()
            self.init_out_folders(lazy)
            self.init_tags()
            fill_aliases(self.config.aliases, self.tables)
        finally:
            if self.config.debug:
                self._print_debug(lazy)
        self._prepared = True

    def _template_data(self) -> TemplateData:
        cfg = self.config
        data = TemplateData(
            tables=self.tables,
            aliases=cfg.aliases,
            pkg_name=cfg.pkg_name,
            schema=self.schema,
            driver_name=cfg.driver_name,
            dialect=self.dialect,
            lq=_quote_character(self.dialect.lq),
            rq=_quote_character(self.dialect.rq),
            add_global=cfg.add_global,
            add_panic=cfg.add_panic,
            add_soft_deletes=cfg.add_soft_deletes,
            add_enum_types=cfg.add_enum_types,
            no_context=cfg.no_context,
            no_hooks=cfg.no_hooks,
            no_auto_timestamps=cfg.no_auto_timestamps,
            no_rows_affected=cfg.no_rows_affected,
            no_driver_templates=cfg.no_driver_templates,
            no_back_referencing=cfg.no_back_referencing,
            tags=cfg.tags,
            relation_tag=cfg.relation_tag,
            struct_tag_casing=cfg.struct_tag_casing,
            output_dir_depth=cfg.output_dir_depth(),
            auto_columns=cfg.auto_columns,
        )
        for entry in cfg.tag_ignore:
            if not _VALID_TABLE_COLUMN.search(entry):
                raise ValueError(
                    f"invalid column name {entry!r} supplied, only specify column name "
                    "or table.column, eg: created_at, user.password"
                )
            data.tag_ignore.add(entry)
        return data

    def _header(self, pkg_name: str, imports: ImportSet) -> str:
        return disclaimer(self.config.version) + package_clause(pkg_name) + imports_clause(imports)

    def _generate_singletons(
        self,
        data: TemplateData,
        templates: TemplateList,
        named_imports: Mapping[str, ImportSet],
    ) -> None:
        if data.table.is_join_table:
            return
        for name in templates.templates():
            parts = output_filename_parts(name)
            if not parts.is_singleton:
                continue
            directory, filename = os.path.split(parts.normalized)
            stem = filename.split(".", 1)[0]

            content = ""
            if parts.is_go:
                named = named_imports.get(denormalize_slashes(stem), ImportSet())
                imports = ImportSet(list(named.standard), list(named.third_party))
                pkg_name = self.config.pkg_name if parts.use_pkg else os.path.basename(directory)
                content = self._header(pkg_name, imports)

            content += execute_template(templates, name, data)
            write_file(self.config.out_folder, parts.normalized, content)

    def _generate(
        self,
        data: TemplateData,
        templates: TemplateList,
        dir_exts: DirExtMap,
        import_set: ImportSet,
        combine_imports_on_type: bool,
        is_test: bool,
    ) -> None:
        table = data.table
        if table.is_join_table:
            return

        imports = ImportSet(list(import_set.standard), list(import_set.third_party))
        if combine_imports_on_type:
            imports = add_type_imports(
                imports,
                self.config.imports.based_on_type,
                [column.type for column in table.columns],
            )

        for directory, extensions in dir_exts.items():
            for ext, names in extensions.items():
                content = ""
                if os.path.splitext(ext)[1] == ".go":
                    pkg_name = os.path.basename(directory) if directory else self.config.pkg_name
                    content = self._header(pkg_name, imports)

                content += "".join(execute_template(templates, name, data) for name in names)

                filename = f"und{table.name}" if table.name.startswith("_") else table.name
                if is_test:
                    filename += "_test"
                filename += ext
                if directory:
                    filename = os.path.join(directory, filename)
                write_file(self.config.out_folder, filename, content)

    def run(self) -> None:
        """Prepare the run if needed, then render every template into the output folder."""
        self._prepare()
        data = self._template_data()
        templates = self.templates
        test_templates = None if self.config.no_tests else self.test_templates
        if templates is None:
            raise RuntimeError("templates were not loaded")

        self._generate_singletons(data, templates, self.config.imports.singleton)
        if test_templates is not None:
            self._generate_singletons(data, test_templates, self.config.imports.test_singleton)

        regular = group_templates(templates)
        tests = group_templates(test_templates) if test_templates is not None else {}

        for table in self.tables:
            if table.is_join_table:
                continue
            data.table = table
            self._generate(data, templates, regular, self.config.imports.all, True, False)
            if test_templates is not None:
                self._generate(data, test_templates, tests, self.config.imports.test, False, True)