import base64

import jinja2
import pytest

from boilkit.model import Column, Dialect, Table
from boilkit.templates import (
    Base64Loader,
    FileLoader,
    LazyTemplate,
    Once,
    TemplateData,
    load_templates,
    sort_template_names,
)


def _b64(text):
    return base64.b64encode(text.encode()).decode()


def _lazy(name, text):
    return LazyTemplate(name, Base64Loader(_b64(text)))


def test_sort_template_names():
    names = ["bob.tpl", "all.tpl", "struct.tpl", "ttt.tpl"]
    assert sort_template_names(names) == ["struct.tpl", "all.tpl", "bob.tpl", "ttt.tpl"]
    assert names == ["bob.tpl", "all.tpl", "struct.tpl", "ttt.tpl"]


def test_template_list_templates_only_tpl():
    tpl_list = load_templates(
        [_lazy("wat.tpl", "hello"), _lazy("que.tpl", "there"), _lazy("not", "hello")],
        False,
    )
    names = tpl_list.templates()
    assert "wat.tpl" in names
    assert "que.tpl" in names
    assert "not" not in names


def test_load_templates_splits_test_templates():
    lazy = [
        _lazy("templates/a.go.tpl", "regular"),
        _lazy("templates_test/b.go.tpl", "test one"),
        _lazy("test/c.go.tpl", "test two"),
    ]
    assert load_templates(lazy, False).templates() == ["templates/a.go.tpl"]
    assert load_templates(lazy, True).templates() == ["templates_test/b.go.tpl", "test/c.go.tpl"]


def test_load_templates_parse_error():
    with pytest.raises(ValueError, match="failed to parse template: bad.tpl"):
        load_templates([_lazy("bad.tpl", "{% if %}")], False)


def test_load_templates_load_error():
    with pytest.raises(ValueError, match="failed to load template: bad.tpl"):
        load_templates([LazyTemplate("bad.tpl", Base64Loader("!!!not base64"))], False)


def test_render_with_template_data():
    tpl_list = load_templates(
        [_lazy("t.tpl", "{{ pkg_name }}:{{ title_case(table.name) }}:{{ data.quotes('x') }}")],
        False,
    )
    data = TemplateData(pkg_name="models", table=Table(name="videos"), lq="`", rq="`")
    assert tpl_list.render("t.tpl", data) == "models:Videos:`x`"


def test_render_missing_variable_raises():
    tpl_list = load_templates([_lazy("t.tpl", "{{ nothing_here }}")], False)
    with pytest.raises((jinja2.UndefinedError, ValueError), match="nothing_here"):
        tpl_list.render("t.tpl", TemplateData())


def test_render_helpers():
    tpl_list = load_templates(
        [_lazy("t.tpl", "{{ join(', ', column_names(table.columns)) }}|{{ go_varname('a[0].b') }}")],
        False,
    )
    table = Table(name="users", columns=[Column(name="id"), Column(name="name")])
    assert tpl_list.render("t.tpl", TemplateData(table=table)) == "id, name|a_0__b"


def test_once():
    once = Once()
    assert once.has("a") is False
    assert once.put("a") is True
    assert once.put("a") is False
    assert once.has("a") is True


def test_quotes_and_schema_table():
    data = TemplateData(lq='"', rq='"', schema="public", dialect=Dialect(use_schema=True))
    assert data.quotes("users") == '"users"'
    assert data.schema_table("users") == '"public"."users"'
    data.dialect = Dialect(use_schema=False)
    assert data.schema_table("users") == '"users"'


def test_base64_loader():
    loader = Base64Loader(_b64("hello"))
    assert loader.load() == b"hello"
    assert str(loader) == (
        "base64:(sha256 of content): "
        "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
    )


def test_base64_loader_rejects_bad_input():
    with pytest.raises(ValueError, match="should be base64"):
        Base64Loader("@@@").load()


def test_file_loader(tmp_path):
    path = tmp_path / "x.tpl"
    path.write_bytes(b"content")
    loader = FileLoader(str(path))
    assert loader.load() == b"content"
    assert str(loader) == f"file:{path}"


def test_file_loader_missing(tmp_path):
    with pytest.raises(OSError, match="failed to load template"):
        FileLoader(str(tmp_path / "missing.tpl")).load()