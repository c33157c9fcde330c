import sqlite3
from datetime import timedelta, timezone

import pytest

from boilkit import db


@pytest.fixture(autouse=True)
def _restore_globals():
    saved_db = db.get_db()
    saved_loc = db.get_location()
    yield
    db.set_db(saved_db)
    db.set_location(saved_loc)


class _FakeDB:
    def __init__(self):
        self.begun = 0

    def begin(self):
        self.begun += 1
        return "tx"


def test_get_set_db():
    handle = _FakeDB()
    db.set_db(handle)
    assert db.get_db() is handle


def test_begin_uses_handle():
    handle = _FakeDB()
    db.set_db(handle)
    assert db.begin() == "tx"
    assert handle.begun == 1


def test_begin_without_support_raises():
    conn = sqlite3.connect(":memory:")
    try:
        db.set_db(conn)
        with pytest.raises(TypeError, match="does not support transactions"):
            db.begin()
    finally:
        conn.close()


def test_location_defaults_to_utc():
    assert db.get_location() == timezone.utc


def test_set_location():
    tz = timezone(timedelta(hours=9))
    db.set_location(tz)
    assert db.get_location() == tz