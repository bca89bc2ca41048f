"""Integration tests for saving and restoring whole games.

Covers the save store, the codec and the facade together: progress made
in one game object must come back intact in another one pointed at the
same database, and damaged saves must degrade to a fresh game.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from hanzi_battle.core.config import Settings
from hanzi_battle.core.exceptions import PersistenceError
from hanzi_battle.engine.dice import DiceRoller
from hanzi_battle.engine.game import HanziGame
from hanzi_battle.engine.practice import CompletionSummary
from hanzi_battle.models import DataSource, PhraseCharacter
from hanzi_battle.storage.database import SaveStore


CUSTOM_DATA = {
    "characters": {
        "水": {"pinyin": "shuǐ", "strokes": 4, "difficulty": 1, "frequency": 90},
    },
    "phrases": {
        "你水": {
            "characters": ["你", "水"],
            "requirements": {"你": 1, "水": 1},
            "difficulty": 1,
            "frequency": 10,
            "pinyin": "nǐ shuǐ",
            "meaning": "you water",
        }
    },
}


def second_game(settings: Settings) -> HanziGame:
    """Another game object sharing the same save database."""
    return HanziGame(
        settings=settings,
        dice=DiceRoller(seed=1),
        store=SaveStore(settings.storage.database_path),
    )


class TestSaveRoundTrip:
    """Progress survives a save/load cycle across game objects."""

    def test_progress_restored(self, game: HanziGame, settings: Settings) -> None:
        game.start_practice("你")
        game.complete_practice(CompletionSummary(), completion_time_ms=2_000)
        game.add_item("xp_boost_large")
        game.state.characters["好"].level = 3
        game.state.characters["你"].level = 3
        game.use_item("xp_boost_small", "我")
        assert game.save("main").success is True

        restored = second_game(settings)
        result = restored.load("main")

        assert result.success is True
        assert restored.get_character("你").total_practices == 1
        assert restored.get_character("我").xp == 50
        assert restored.state.bag.get_quantity("xp_boost_large") == 1
        assert restored.state.bag.get_quantity("xp_boost_small") == 1
        assert restored.get_phrase("你好").unlocked is True
        assert restored.state.player.total_phrases == 1
        assert restored.state.player.practice_count == 1
        assert restored.to_dict() == game.to_dict()

    def test_phrase_character_restored(self, game: HanziGame, settings: Settings) -> None:
        game.state.characters["你"].level = 3
        game.state.characters["好"].level = 3
        game.use_item("xp_boost_small", "你")
        start = game.start_phrase_practice("你好")
        for _ in range(start.total):
            game.complete_practice(CompletionSummary(), completion_time_ms=2_000)
        game.save("main")

        restored = second_game(settings)
        restored.load("main")

        assert isinstance(restored.get_character("你好"), PhraseCharacter)
        assert restored.get_phrase("你好").first_time_completed is True

    def test_custom_data_restored(self, game: HanziGame, settings: Settings) -> None:
        assert game.import_data(CUSTOM_DATA).success is True
        assert game.switch_data_source(DataSource.CUSTOM).success is True
        game.add_character("水")
        game.save("main")

        restored = second_game(settings)
        restored.load("main")

        assert restored.catalog.data_source == DataSource.CUSTOM
        assert restored.get_phrase("你水").unlocked is True
        assert "你好" not in restored.state.phrases

    def test_stats_recomputed_after_load(self, game: HanziGame, settings: Settings) -> None:
        game.state.characters["你"].level = 4
        expected = game.get_character("你").stats
        game.save("main")

        restored = second_game(settings)
        restored.load("main")

        assert restored.get_character("你").stats == expected

    def test_new_catalog_phrases_added_on_load(self, game: HanziGame, settings: Settings) -> None:
        data = game.to_dict()
        del data["phrases"]["麵包"]

        game.load_dict(data)

        assert "麵包" in game.state.phrases

    def test_saved_catalog_backs_missing_sections(self, game: HanziGame) -> None:
        catalog = {"data_source": "custom", **CUSTOM_DATA}

        game.load_dict({"version": 1, "catalog": catalog})

        assert game.catalog.data_source == DataSource.CUSTOM
        assert list(game.state.phrases) == ["你水"]


class TestDamagedSaves:
    """Broken saves fall back to a fresh game."""

    def test_corrupt_slot(self, game: HanziGame, settings: Settings) -> None:
        game.add_character("是")
        game.save("main")
        with sqlite3.connect(settings.storage.database_path) as conn:
            conn.execute("UPDATE saves SET state_json = '{oops' WHERE slot = 'main'")

        result = game.load("main")

        assert result.success is False
        assert "是" not in game.state.characters
        assert list(game.state.characters) == ["你", "好", "我"]

    def test_slot_that_is_not_an_object(self, game: HanziGame, settings: Settings) -> None:
        game.add_character("是")
        game.save("main")
        with sqlite3.connect(settings.storage.database_path) as conn:
            conn.execute("UPDATE saves SET state_json = '[1, 2]' WHERE slot = 'main'")

        result = game.load("main")

        assert result.success is False
        assert result.message == "Saved game is corrupt"
        assert list(game.state.characters) == ["你", "好", "我"]

    def test_unreadable_slot_timestamps(self, game: HanziGame, settings: Settings) -> None:
        game.add_character("是")
        game.save("main")
        with sqlite3.connect(settings.storage.database_path) as conn:
            conn.execute("UPDATE saves SET created_at = 'last tuesday' WHERE slot = 'main'")

        loaded = game.load("main")

        assert loaded.success is False
        assert "是" not in game.state.characters
        assert game.save("main").success is True
        assert game.load("main").success is True

    def test_partial_save(self, game: HanziGame) -> None:
        game.load_dict({"version": 1, "characters": {"是": {"strokes": 9, "level": 2}}})

        assert list(game.state.characters) == ["是"]
        assert game.state.player.total_characters == 1
        assert game.state.bag.get_quantity("xp_boost_small") == 2
        assert len(game.state.phrases) == 6

    def test_unusable_database(self, tmp_path: Path, settings: Settings) -> None:
        store = SaveStore(tmp_path / "gone.db")
        (tmp_path / "gone.db").unlink()
        (tmp_path / "gone.db").mkdir()
        game = HanziGame(settings=settings, dice=DiceRoller(seed=3), store=store)
        game.add_character("是")

        saved = game.save()
        loaded = game.load()

        assert saved.success is False
        assert "Failed to save game" in saved.message
        assert loaded.success is False
        assert "是" not in game.state.characters

    def test_store_directory_blocked(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(PersistenceError):
            SaveStore(blocker / "saves.db")
