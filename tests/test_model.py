import pytest

from boilkit.model import (
    Column,
    ImportSet,
    Table,
    add_type_imports,
    get_table,
)


def _tables():
    return [
        Table(name="users", columns=[Column(name="id", type="int")]),
        Table(name="videos", columns=[Column(name="id"), Column(name="user_id", type="int64")]),
    ]


def test_get_column_found():
    table = _tables()[1]
    assert table.get_column("user_id").type == "int64"


def test_get_column_missing_raises():
    with pytest.raises(KeyError):
        _tables()[0].get_column("nope")


def test_get_table_found():
    assert get_table(_tables(), "videos").name == "videos"


def test_get_table_missing_raises():
    with pytest.raises(KeyError):
        get_table(_tables(), "hangars")


def test_format_empty():
    assert ImportSet().format() == ""


def test_format_single():
    assert ImportSet(standard=['"fmt"']).format() == 'import "fmt"'


def test_format_groups_standard_then_third_party():
    imps = ImportSet(standard=['"fmt"', '"time"'], third_party=['"github.com/x/y"'])
    lines = imps.format().splitlines()
    assert lines == ["import (", '\t"fmt"', '\t"time"', "", '\t"github.com/x/y"', ")"]


def test_format_only_third_party_has_no_blank_line():
    imps = ImportSet(third_party=['"a.com/one"', '"a.com/two"'])
    assert "" not in imps.format().splitlines()


def test_add_type_imports_adds_matching_types_only():
    base = ImportSet(standard=['"fmt"'])
    based_on_type = {
        "null.String": ImportSet(third_party=['"github.com/volatiletech/null/v8"']),
        "time.Time": ImportSet(standard=['"time"']),
        "big.Int": ImportSet(standard=['"math/big"']),
    }
    result = add_type_imports(base, based_on_type, ["time.Time", "null.String", "time.Time"])
    assert result.standard == ['"fmt"', '"time"']
    assert result.third_party == ['"github.com/volatiletech/null/v8"']
    assert base.standard == ['"fmt"']


def test_add_type_imports_sorts_by_path_ignoring_alias():
    base = ImportSet(third_party=['_ "b.com/z"', 'null "a.com/y"', '_ "b.com/z"'])
    result = add_type_imports(base, {}, [])
    assert result.third_party == ['null "a.com/y"', '_ "b.com/z"']