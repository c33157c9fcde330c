import os

import pytest

from boilkit.config import Config, convert_aliases, convert_type_replace


@pytest.mark.parametrize(
    "output, depth",
    [(".", 0), ("./", 0), ("foo", 1), ("foo/bar", 2)],
)
def test_output_dir_depth(output, depth):
    assert Config(out_folder=output.replace("/", os.sep)).output_dir_depth() == depth


def _check_table(aliases):
    assert len(aliases.tables) == 1
    table = aliases.tables["table_name"]
    assert table.up_plural == "a"
    assert table.up_singular == "b"
    assert table.down_plural == "c"
    assert table.down_singular == "d"
    assert table.columns == {"a": "b"}
    rel = table.relationships["ib_fk_1"]
    assert rel.local == "a"
    assert rel.foreign == "b"


def test_convert_aliases():
    value = {
        "tables": {
            "table_name": {
                "up_plural": "a",
                "up_singular": "b",
                "down_plural": "c",
                "down_singular": "d",
                "columns": {"a": "b"},
                "relationships": {"ib_fk_1": {"local": "a", "foreign": "b"}},
            }
        }
    }
    _check_table(convert_aliases(value))


def test_convert_aliases_alt_syntax():
    value = {
        "tables": [
            {
                "name": "table_name",
                "up_plural": "a",
                "up_singular": "b",
                "down_plural": "c",
                "down_singular": "d",
                "columns": [{"name": "a", "alias": "b"}],
                "relationships": [{"name": "ib_fk_1", "local": "a", "foreign": "b"}],
            }
        ]
    }
    _check_table(convert_aliases(value))


def test_convert_aliases_none_is_empty():
    assert convert_aliases(None).tables == {}


def test_convert_aliases_list_entry_needs_name():
    with pytest.raises(TypeError):
        convert_aliases({"tables": [{"up_plural": "a"}]})


def test_convert_type_replace():
    full_column = {
        "name": "a",
        "type": "b",
        "db_type": "c",
        "udt_name": "d",
        "full_db_type": "e",
        "arr_type": "f",
        "tables": ["g", "h"],
        "auto_generated": True,
        "nullable": True,
    }
    value = [
        {
            "match": full_column,
            "replace": full_column,
            "imports": {"standard": ["abc"], "third_party": ["example.com/abc"]},
        }
    ]

    replaces = convert_type_replace(value)
    assert len(replaces) == 1
    r = replaces[0]
    for column in (r.match, r.replace):
        assert column.name == "a"
        assert column.type == "b"
        assert column.db_type == "c"
        assert column.udt_name == "d"
        assert column.full_db_type == "e"
        assert column.arr_type == "f"
        assert column.auto_generated is True
        assert column.nullable is True
    assert r.imports.standard == ["abc"]
    assert r.imports.third_party == ["example.com/abc"]
    assert r.tables == ["g", "h"]


def test_convert_type_replace_without_tables():
    replaces = convert_type_replace([{"match": {"db_type": "serial"}, "replace": {"type": "int"}}])
    assert replaces[0].tables == []
    assert replaces[0].match.db_type == "serial"
    assert replaces[0].replace.type == "int"


def test_convert_type_replace_requires_match_and_replace():
    with pytest.raises(ValueError, match="both match and replace"):
        convert_type_replace([{"match": {"type": "int"}}])


def test_convert_type_replace_none():
    assert convert_type_replace(None) == []


def test_convert_type_replace_rejects_non_list():
    with pytest.raises(TypeError):
        convert_type_replace({"match": {}, "replace": {}})