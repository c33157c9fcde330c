import pytest

from boilkit.errors import BoilError, is_boil_err, wrap_err


def test_plain_error_is_not_boil_err():
    assert is_boil_err(ValueError("test error")) is False


def test_wrapped_error_keeps_message():
    err = wrap_err(ValueError("test error"))
    assert str(err) == "test error"
    assert is_boil_err(err) is True


def test_wrapped_error_keeps_cause():
    original = KeyError("x")
    err = wrap_err(original)
    assert err.err is original
    assert err.__cause__ is original


def test_wrapped_error_can_be_raised():
    original = RuntimeError("boom")
    with pytest.raises(BoilError) as info:
        raise wrap_err(original)
    assert str(info.value) == "boom"
    assert info.value.err is original