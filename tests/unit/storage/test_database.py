"""Tests for the SQLite save store."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

import pytest

from hanzi_battle.core.exceptions import PersistenceError
from hanzi_battle.storage.database import SaveStore, get_save_store, reset_save_store


@pytest.fixture
def store(tmp_path: Path) -> SaveStore:
    return SaveStore(tmp_path / "nested" / "saves.db")


def _state(level: int = 1, characters: int = 2) -> dict:
    return {
        "version": 1,
        "player": {"level": level},
        "characters": {f"c{index}": {} for index in range(characters)},
    }


class TestSaveStore:
    """Tests for slot operations."""

    def test_creates_parent_directory(self, tmp_path: Path, store: SaveStore) -> None:
        assert (tmp_path / "nested" / "saves.db").exists()

    def test_schema_version(self, store: SaveStore) -> None:
        with sqlite3.connect(store.db_path) as conn:
            (version,) = conn.execute("SELECT version FROM schema_version").fetchone()

        assert version == SaveStore.SCHEMA_VERSION

    def test_save_and_load(self, store: SaveStore) -> None:
        saved = store.save("slot-1", _state(level=3, characters=4))

        loaded = store.load("slot-1")

        assert loaded is not None
        assert loaded.player_level == 3
        assert loaded.character_count == 4
        assert loaded.get_state_dict() == _state(level=3, characters=4)
        assert loaded.created_at == saved.created_at

    def test_unicode_preserved(self, store: SaveStore) -> None:
        store.save("slot-1", {"characters": {"你": {"glyph": "你"}}})

        record = store.load("slot-1")

        assert "你" in record.state_json

    def test_empty_slot(self, store: SaveStore) -> None:
        assert store.load("missing") is None

    def test_overwrite_keeps_created_at(self, store: SaveStore) -> None:
        first = store.save("slot-1", _state(level=1))
        second = store.save("slot-1", _state(level=2))

        loaded = store.load("slot-1")

        assert loaded.player_level == 2
        assert loaded.created_at == first.created_at
        assert loaded.updated_at == second.updated_at
        assert len(store.list_slots()) == 1

    def test_list_slots_newest_first(self, store: SaveStore) -> None:
        store.save("older", _state())
        store.save("newer", _state())

        assert [record.slot for record in store.list_slots()] == ["newer", "older"]

    def test_delete(self, store: SaveStore) -> None:
        store.save("slot-1", _state())

        assert store.delete("slot-1") is True
        assert store.delete("slot-1") is False
        assert store.load("slot-1") is None

    def test_corrupt_json_surfaces_on_parse(self, store: SaveStore) -> None:
        store.save("slot-1", _state())
        with sqlite3.connect(store.db_path) as conn:
            conn.execute("UPDATE saves SET state_json = ? WHERE slot = ?", ("{broken", "slot-1"))

        record = store.load("slot-1")

        with pytest.raises(json.JSONDecodeError):
            record.get_state_dict()

    def test_unreadable_timestamp_raises_persistence_error(self, store: SaveStore) -> None:
        store.save("slot-1", _state())
        with sqlite3.connect(store.db_path) as conn:
            conn.execute("UPDATE saves SET updated_at = ? WHERE slot = ?", ("soon", "slot-1"))

        with pytest.raises(PersistenceError) as exc_info:
            store.load("slot-1")
        with pytest.raises(PersistenceError):
            store.list_slots()

        assert exc_info.value.details["slot"] == "slot-1"

    def test_overwrite_repairs_unreadable_created_at(self, store: SaveStore) -> None:
        store.save("slot-1", _state())
        with sqlite3.connect(store.db_path) as conn:
            conn.execute("UPDATE saves SET created_at = ? WHERE slot = ?", ("soon", "slot-1"))

        record = store.save("slot-1", _state(level=2))

        assert store.load("slot-1").created_at == record.created_at


class TestSingleton:
    """Tests for the global store."""

    def test_uses_configured_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HANZI_BATTLE_DATABASE_PATH", str(tmp_path / "global.db"))

        store = get_save_store()

        assert store.db_path == tmp_path / "global.db"
        assert get_save_store() is store

    def test_reset(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HANZI_BATTLE_DATABASE_PATH", str(tmp_path / "global.db"))
        first = get_save_store()

        reset_save_store()

        assert get_save_store() is not first
