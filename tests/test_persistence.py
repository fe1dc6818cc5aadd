import json

import pytest

from futsquad.persistence import (
    SESSION_KEY,
    MemoryKeyValueStore,
    SessionSnapshot,
    SqliteKeyValueStore,
    has_saved_session,
    load_session,
    save_session,
)


@pytest.fixture
def sqlite_store(tmp_path, monkeypatch):
    monkeypatch.delenv("FUTSQUAD_DB_PATH", raising=False)
    return SqliteKeyValueStore(tmp_path / "nested" / "session.sqlite")


def test_sqlite_store_round_trip(sqlite_store):
    assert sqlite_store.get("missing") is None

    sqlite_store.set("key", "first")
    sqlite_store.set("key", "second")

    assert sqlite_store.get("key") == "second"
    sqlite_store.remove("key")
    assert sqlite_store.get("key") is None


def test_sqlite_store_honours_env_override(tmp_path, monkeypatch):
    override = tmp_path / "override.sqlite"
    monkeypatch.setenv("FUTSQUAD_DB_PATH", str(override))

    store = SqliteKeyValueStore(tmp_path / "ignored.sqlite")

    assert store.db_path == override
    assert override.exists()


def test_session_snapshot_persists_across_store_instances(tmp_path, monkeypatch):
    monkeypatch.delenv("FUTSQUAD_DB_PATH", raising=False)
    path = tmp_path / "session.sqlite"
    save_session(SqliteKeyValueStore(path), SessionSnapshot("Name,DefinitionId\nA,1", 1200, "club.csv"))

    snapshot = load_session(SqliteKeyValueStore(path))

    assert snapshot == SessionSnapshot("Name,DefinitionId\nA,1", 1200, "club.csv")


def test_saved_blob_uses_stable_keys():
    store = MemoryKeyValueStore()

    save_session(store, SessionSnapshot("csv text", 10, "my.csv"))

    assert json.loads(store.get(SESSION_KEY)) == {"csv": "csv text", "coins": 10, "fileName": "my.csv"}
    assert has_saved_session(store)


def test_missing_session_is_none():
    store = MemoryKeyValueStore()

    assert load_session(store) is None
    assert not has_saved_session(store)


@pytest.mark.parametrize(
    "blob",
    [
        "{not json",
        "[]",
        json.dumps({"coins": 5}),
        json.dumps({"csv": 42}),
        '{"csv": "Name,DefinitionId\\nA,1", "coins": Infinity}',
        '{"csv": "Name,DefinitionId\\nA,1", "coins": NaN}',
        '{"csv": "Name,DefinitionId\\nA,1", "coins": 1e400}',
    ],
)
def test_corrupt_session_is_discarded(blob):
    store = MemoryKeyValueStore({SESSION_KEY: blob})

    assert load_session(store) is None
    assert store.get(SESSION_KEY) is None


def test_missing_optional_fields_use_defaults():
    store = MemoryKeyValueStore({SESSION_KEY: json.dumps({"csv": "data", "coins": "lots"})})

    snapshot = load_session(store)

    assert snapshot.coins == 0
    assert snapshot.file_name == "saved_club.csv"
