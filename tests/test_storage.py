import os
import sqlite3

import pytest

from briefcase.config import Settings
from briefcase.errors import EntryNotFound, InvalidName, IoFailure, StoreNotFound
from briefcase.locations import StoreLocation
from briefcase.storage import FileBackend, SQLiteBackend, default_policy, open_backend


def _sqlite(tmp_path):
    path = tmp_path / "home" / ".briefcase" / "briefcase.db"
    return SQLiteBackend(StoreLocation(path=path, policy="home", source="HOME"))


def _files(tmp_path):
    path = tmp_path / "briefcase"
    return FileBackend(StoreLocation(path=path, policy="temp", source="BRIEFCASE_DIR"))


@pytest.fixture(params=[_sqlite, _files], ids=["sqlite", "files"])
def store(request, tmp_path):
    return request.param(tmp_path)


# Shared contract -------------------------------------------------------------


def test_set_then_get_round_trips_exactly(store):
    store.set("x", "hello")
    assert store.get("x") == "hello"


def test_values_keep_whitespace_and_unicode(store):
    store.set("x", "  line one\nline two\n")
    store.set("y", "héllo ✓")
    store.set("empty", "")
    assert store.get("x") == "  line one\nline two\n"
    assert store.get("y") == "héllo ✓"
    assert store.get("empty") == ""


def test_set_overwrites(store):
    store.set("x", "a")
    store.set("x", "b")
    assert store.get("x") == "b"
    assert store.count() == 1


def test_remove_then_get_is_not_found(store):
    store.set("x", "1")
    store.remove("x")
    with pytest.raises(EntryNotFound):
        store.get("x")
    assert store.count() == 0


def test_remove_missing_entry_is_not_found(store):
    store.set("x", "1")
    with pytest.raises(EntryNotFound):
        store.remove("y")
    assert dict(store.list()) == {"x": "1"}


def test_list_returns_all_pairs(store):
    store.set("a", "1")
    store.set("b", "2")
    assert sorted(store.list()) == [("a", "1"), ("b", "2")]
    assert store.count() == 2


def test_missing_store_reads_as_empty(store):
    assert list(store.list()) == []
    assert store.count() == 0
    with pytest.raises(EntryNotFound):
        store.get("x")
    with pytest.raises(EntryNotFound):
        store.remove("x")
    assert not store.location.path.exists()


def test_ensure_open_is_idempotent(store):
    store.ensure_open()
    store.ensure_open()
    assert store.location.path.exists()
    assert store.count() == 0


def test_purge_destroys_store(store):
    store.set("a", "1")
    store.purge()
    assert not store.location.path.exists()
    assert list(store.list()) == []
    with pytest.raises(EntryNotFound):
        store.get("a")


def test_second_purge_fails_with_store_not_found(store):
    store.set("a", "1")
    store.purge()
    with pytest.raises(StoreNotFound):
        store.purge()


def test_purge_of_never_created_store_fails(store):
    with pytest.raises(StoreNotFound):
        store.purge()


def test_set_after_purge_recreates_store(store):
    store.set("a", "1")
    store.purge()
    store.set("b", "2")
    assert dict(store.list()) == {"b": "2"}


@pytest.mark.parametrize("op", ["get", "set", "remove"])
def test_invalid_name_does_not_touch_store(store, op):
    store.set("keep", "v")
    args = ("2bad", "value") if op == "set" else ("2bad",)
    with pytest.raises(InvalidName):
        getattr(store, op)(*args)
    assert dict(store.list()) == {"keep": "v"}


def test_invalid_name_on_missing_store_creates_nothing(store):
    with pytest.raises(InvalidName):
        store.set("a-b", "v")
    assert not store.location.path.exists()


# File backend ----------------------------------------------------------------


def test_file_layout_is_one_raw_file_per_entry(tmp_path):
    store = _files(tmp_path)
    store.set("MyVar", "data")
    path = tmp_path / "briefcase" / "MyVar"
    assert path.read_bytes() == b"data"
    assert os.listdir(tmp_path / "briefcase") == ["MyVar"]


def test_file_backend_ignores_foreign_files(tmp_path):
    store = _files(tmp_path)
    store.set("a", "1")
    root = tmp_path / "briefcase"
    (root / ".a.tmp").write_text("partial")
    (root / "not-valid").write_text("x")
    (root / "sub").mkdir()
    assert list(store.list()) == [("a", "1")]
    assert store.count() == 1


def test_file_backend_reports_undecodable_value(tmp_path):
    store = _files(tmp_path)
    store.ensure_open()
    (tmp_path / "briefcase" / "bin").write_bytes(b"\xff\xfe")
    with pytest.raises(IoFailure):
        store.get("bin")


def test_file_backend_cleans_up_temp_file_on_failure(tmp_path, monkeypatch):
    store = _files(tmp_path)
    store.ensure_open()

    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", boom)
    with pytest.raises(IoFailure):
        store.set("a", "1")
    assert os.listdir(tmp_path / "briefcase") == []


# SQLite backend --------------------------------------------------------------


def test_sqlite_store_is_a_single_database_file(tmp_path):
    store = _sqlite(tmp_path)
    store.set("a", "1")
    db = tmp_path / "home" / ".briefcase" / "briefcase.db"
    with sqlite3.connect(db) as conn:
        rows = conn.execute("SELECT name, value FROM entries").fetchall()
    assert rows == [("a", "1")]


def test_sqlite_failed_commit_leaves_prior_state(tmp_path):
    store = _sqlite(tmp_path)
    store.set("a", "1")
    db = tmp_path / "home" / ".briefcase" / "briefcase.db"
    blocker = sqlite3.connect(db)
    try:
        blocker.execute("BEGIN EXCLUSIVE")
        store.busy_timeout = 0.05
        with pytest.raises(IoFailure):
            store.set("a", "2")
    finally:
        blocker.rollback()
        blocker.close()
    assert store.get("a") == "1"


def test_sqlite_database_without_table_reads_as_empty(tmp_path):
    store = _sqlite(tmp_path)
    store.location.path.parent.mkdir(parents=True)
    sqlite3.connect(store.location.path).close()
    assert store.count() == 0
    with pytest.raises(EntryNotFound):
        store.get("a")


def test_sqlite_corrupt_database_is_io_failure(tmp_path):
    store = _sqlite(tmp_path)
    store.location.path.parent.mkdir(parents=True)
    store.location.path.write_bytes(b"this is not a database" * 100)
    with pytest.raises(IoFailure):
        store.count()


# Factory ---------------------------------------------------------------------


def test_open_backend_selects_variant(tmp_path):
    loc = StoreLocation(path=tmp_path / "x", policy="temp", source="none")
    assert isinstance(open_backend(Settings(backend="files"), loc), FileBackend)
    backend = open_backend(Settings(backend="sqlite", busy_timeout=1.5), loc)
    assert isinstance(backend, SQLiteBackend)
    assert backend.busy_timeout == 1.5


def test_default_policy_follows_backend(monkeypatch):
    monkeypatch.delenv("BRIEFCASE_LOCATION_POLICY", raising=False)
    assert default_policy(Settings(backend="sqlite")) == "home"
    assert default_policy(Settings(backend="files")) == "temp"
    assert default_policy(Settings(backend="files", location_policy="home")) == "home"
