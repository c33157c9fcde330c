"""Assembling generated files: headers, import clauses, file names and writing."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, NamedTuple

from boilkit.model import ImportSet
from boilkit.templates import TemplateList

_NUMBERED_PREFIX = re.compile(r"^[0-9]+_")
_SEPARATORS = re.compile(r"[\\/]")

SINGLETON_DIR = "singleton"


class OutputFilenameParts(NamedTuple):
    """Where a template's output goes and how it is treated."""

    normalized: str
    is_singleton: bool
    is_go: bool
    use_pkg: bool


def _ext(filename: str) -> str:
    dot = filename.rfind(".")
    return filename[dot:] if dot >= 0 else ""


def output_filename_parts(filename: str) -> OutputFilenameParts:
    """Split a template path such as ``templates/singleton/00_hello.go.tpl``.

    The first directory and any ``singleton`` directory are dropped, the
    ``.tpl`` suffix and a numbered prefix are stripped from the file name.
    """
    fragments = _SEPARATORS.split(filename)
    if len(fragments) < 2:
        raise ValueError(f"template path needs a root directory: {filename}")

    is_singleton = fragments[-2] == SINGLETON_DIR
    remaining = [f for f in fragments[1:] if f != SINGLETON_DIR]
    if not remaining:
        raise ValueError(f"template path has no file name: {filename}")

    name = remaining[-1].removesuffix(".tpl")
    name = _NUMBERED_PREFIX.sub("", name)
    remaining[-1] = name

    return OutputFilenameParts(
        normalized=os.sep.join(remaining),
        is_singleton=is_singleton,
        is_go=_ext(name) == ".go",
        use_pkg=len(remaining) == 1,
    )


def get_long_ext(filename: str) -> str:
    """Return everything from the first dot of ``filename`` on, e.g. ``.go.tpl``."""
    index = filename.find(".")
    if index < 0:
        raise ValueError(f"file name has no extension: {filename}")
    return filename[index:]


def disclaimer(version: str = "") -> str:
    """Return the do-not-edit header placed at the top of generated files."""
    version_part = f" {version}" if version else ""
    return (
        f"// Code generated by boilkit{version_part}. DO NOT EDIT.\n"
        "// This file is meant to be re-generated in place and/or deleted at any time.\n"
        "\n"
    )


def package_clause(pkg_name: str) -> str:
    """Return the package line followed by a blank line."""
    return f"package {pkg_name}\n\n"


def imports_clause(imports: ImportSet) -> str:
    """Return the rendered import clause, or an empty string when there is none."""
    rendered = imports.format()
    return f"{rendered}\n" if rendered else ""


def write_file(out_folder: str | os.PathLike[str], file_name: str, content: str | bytes) -> Path:
    """Write ``content`` to ``out_folder/file_name`` and return the path written.

    Raises OSError, naming the path, when the file cannot be written.
    """
    path = Path(out_folder) / file_name
    data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
    try:
        path.write_bytes(data)
    except OSError as err:
        raise OSError(f"failed to write output file {path}: {err}") from err
    return path


def execute_template(templates: TemplateList, name: str, data: Any) -> str:
    """Render template ``name`` with ``data``.

    Any failure while rendering is raised as RuntimeError naming the template.
    """
    try:
        return templates.render(name, data)
    except Exception as err:  # a broken template may fail in any way
        raise RuntimeError(f"failed to execute template: {name}: {err}") from err