import pytest

from boilkit.columns import (
    Columns,
    ColumnsKind,
    blacklist,
    greylist,
    infer,
    none,
    set_complement,
    set_merge,
    sort_by_keys,
    whitelist,
)


def test_whitelist_kind_and_cols():
    cols = whitelist("a", "b")
    assert cols.kind is ColumnsKind.WHITELIST
    assert cols.is_whitelist()
    assert list(cols.cols) == ["a", "b"]


def test_blacklist_kind_and_cols():
    cols = blacklist("a", "b")
    assert cols.kind is ColumnsKind.BLACKLIST
    assert cols.is_blacklist()
    assert list(cols.cols) == ["a", "b"]


def test_greylist_kind_and_cols():
    cols = greylist("a", "b")
    assert cols.kind is ColumnsKind.GREYLIST
    assert cols.is_greylist()
    assert list(cols.cols) == ["a", "b"]


def test_infer_kind_and_cols():
    cols = infer()
    assert cols.kind is ColumnsKind.INFER
    assert cols.is_infer()
    assert len(cols.cols) == 0


def test_none_kind():
    cols = none()
    assert cols.is_none()
    assert not cols.is_infer()


COLUMNS = ["a", "b", "c"]
DEFAULTS = ["a", "c"]
NO_DEFAULTS = ["b"]


@pytest.mark.parametrize(
    "columns, defaults, no_defaults, non_zero, expected_set, expected_ret",
    [
        (infer(), None, None, None, ["b"], ["a", "c"]),
        (infer(), [], ["a", "b", "c"], None, ["a", "b", "c"], []),
        (infer(), None, None, ["a"], ["a", "b"], ["c"]),
        (infer(), None, None, ["c"], ["b", "c"], ["a"]),
        (whitelist("a"), None, None, None, ["a"], ["c"]),
        (whitelist("c"), None, None, None, ["c"], ["a"]),
        (whitelist("a", "c"), None, None, None, ["a", "c"], []),
        (whitelist("a", "b", "c"), None, None, None, ["a", "b", "c"], []),
        (whitelist("a"), None, None, ["c"], ["a"], ["c"]),
        (whitelist("c"), None, None, ["b"], ["c"], ["a"]),
        (blacklist("b"), None, None, ["c"], ["c"], ["a"]),
        (blacklist("c"), None, None, ["c"], ["b"], ["a", "c"]),
        (greylist("c"), None, None, [], ["b", "c"], ["a"]),
        (greylist("a"), None, None, [], ["a", "b"], ["c"]),
    ],
)
def test_insert_column_set(columns, defaults, no_defaults, non_zero, expected_set, expected_ret):
    defaults = DEFAULTS if defaults is None else defaults
    no_defaults = NO_DEFAULTS if no_defaults is None else no_defaults
    got_set, got_ret = columns.insert_column_set(COLUMNS, defaults, no_defaults, non_zero)
    assert got_set == expected_set
    assert got_ret == expected_ret


def test_insert_column_set_none():
    assert none().insert_column_set(COLUMNS, DEFAULTS, NO_DEFAULTS, ["a"]) == ([], [])


@pytest.mark.parametrize(
    "columns, cols, pkeys, expected",
    [
        (infer(), ["a", "b"], ["a"], ["b"]),
        (whitelist("a"), ["a", "b"], ["a"], ["a"]),
        (whitelist("a", "b"), ["a", "b"], ["a"], ["a", "b"]),
        (blacklist("b"), ["a", "b"], ["a"], []),
        (greylist("a"), ["a", "b"], ["a"], ["a", "b"]),
        (none(), ["a", "b"], ["a"], []),
    ],
)
def test_update_column_set(columns, cols, pkeys, expected):
    assert columns.update_column_set(cols, pkeys) == expected


def test_set_complement_keeps_order():
    assert set_complement(["c", "a", "b"], ["a"]) == ["c", "b"]


def test_set_merge_removes_duplicates():
    assert set_merge(["a", "b", "a"], ["b", "c"]) == ["a", "b", "c"]


def test_sort_by_keys_puts_unknown_first():
    assert sort_by_keys(["a", "b", "c"], ["c", "x", "a"]) == ["x", "a", "c"]


def test_invalid_kind_raises():
    broken = Columns(kind=99)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        broken.update_column_set(["a"], [])
    with pytest.raises(ValueError):
        broken.insert_column_set(["a"], [], ["a"], [])