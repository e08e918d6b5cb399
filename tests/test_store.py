import json

import pytest

from db import database
from db.store import (
    SESSIONS_KEY,
    MemoryStore,
    SQLiteStore,
    load_list,
    load_one,
    save_list,
)
from models.bookmark import Bookmark
from models.session import RevisionSession


def _sqlite_store(tmp_path, monkeypatch):
    monkeypatch.setattr(database, "CONFIG_DIR", tmp_path)
    monkeypatch.setattr(database, "DB_PATH", tmp_path / "vocabcoach.db")
    database.init_db()
    return database


def test_sqlite_store_upserts_and_lists_keys_by_prefix(tmp_path, monkeypatch):
    db = _sqlite_store(tmp_path, monkeypatch)
    with db.get_conn() as conn:
        store = SQLiteStore(conn)
        store.set("chapter_1", "{}")
        store.set("chapter_2", "{}")
        store.set("chapterX", "{}")
        store.set("chapter_1", '{"title": "updated"}')

        assert store.get("chapter_1") == '{"title": "updated"}'
        assert store.keys("chapter_") == ["chapter_1", "chapter_2"]
        store.delete("chapter_2")
        assert store.get("chapter_2") is None


def test_sqlite_batch_rolls_back_every_write_on_error(tmp_path, monkeypatch):
    db = _sqlite_store(tmp_path, monkeypatch)
    with db.get_conn() as conn:
        store = SQLiteStore(conn)
        store.set("a", "1")
        with pytest.raises(RuntimeError):
            with store.batch():
                store.set("a", "2")
                store.set("b", "2")
                raise RuntimeError("boom")
        assert store.get("a") == "1"
        assert store.get("b") is None


def test_memory_batch_restores_snapshot_on_error():
    store = MemoryStore({"a": "1"})
    with pytest.raises(ValueError):
        with store.batch():
            store.set("a", "2")
            raise ValueError("boom")
    assert store.get("a") == "1"


def test_unparseable_record_is_treated_as_absent():
    store = MemoryStore({SESSIONS_KEY: "{not json"})
    assert load_list(store, SESSIONS_KEY, RevisionSession) == []
    assert load_one(store, SESSIONS_KEY, RevisionSession) is None


def test_corrupt_entries_are_dropped_individually():
    good = {"id": "1", "word": "물", "translation": "water", "chapter": "Basics"}
    store = MemoryStore({"bookmarked_words": json.dumps([good, {"id": "2"}, "junk"])})

    bookmarks = load_list(store, "bookmarked_words", Bookmark)

    assert [bookmark.id for bookmark in bookmarks] == ["1"]


def test_save_list_round_trips_models():
    store = MemoryStore()
    bookmark = Bookmark(id="7", word="불", translation="fire", chapter="Basics")
    save_list(store, "bookmarked_words", [bookmark])
    assert load_list(store, "bookmarked_words", Bookmark) == [bookmark]
