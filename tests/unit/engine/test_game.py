"""Tests for the HanziGame facade."""

from __future__ import annotations

import pytest

from hanzi_battle.core.exceptions import ValidationError
from hanzi_battle.engine.events import GameEventType
from hanzi_battle.engine.game import HanziGame
from hanzi_battle.engine.practice import CompletionSummary
from hanzi_battle.models import DataSource


CUSTOM_DATA = {
    "characters": {
        "喝": {"pinyin": "hē", "strokes": 12, "difficulty": 2, "frequency": 85},
        "水": {"pinyin": "shuǐ", "strokes": 4, "difficulty": 1, "frequency": 90},
    },
    "phrases": {
        "喝水": {
            "characters": ["喝", "水"],
            "requirements": {"喝": 1, "水": 1},
            "difficulty": 2,
            "frequency": 80,
            "pinyin": "hē shuǐ",
            "meaning": "drink water",
        }
    },
}


def _event_types(game: HanziGame) -> list[GameEventType]:
    return [event.type for event in game.drain_events()]


class TestNewGame:
    """Tests for a freshly created game."""

    def test_starting_state(self, game: HanziGame) -> None:
        assert list(game.state.characters) == ["你", "好", "我"]
        assert game.state.bag.get_quantity("xp_boost_small") == 2
        assert len(game.state.phrases) == 6
        assert game.available_phrases() == []
        assert game.state.player.total_characters == 3

    def test_reset(self, game: HanziGame) -> None:
        game.add_character("是")
        game.state.player.xp = 120

        game.reset()

        assert "是" not in game.state.characters
        assert game.state.player.xp == 0
        assert game.drain_events() == []


class TestRoster:
    """Tests for roster passthroughs and their events."""

    def test_add_character_event(self, game: HanziGame) -> None:
        result = game.add_character("是")

        assert result.success is True
        assert _event_types(game) == [GameEventType.CHARACTER_ADDED]

    def test_add_invalid(self, game: HanziGame) -> None:
        with pytest.raises(ValidationError):
            game.add_character("是", {"difficulty": 9})

    def test_remove_relocks(self, game: HanziGame) -> None:
        game.state.characters["你"].level = 3
        game.state.characters["好"].level = 3
        game.state.phrases["你好"].unlocked = True
        game.state.player.total_phrases = 1

        game.remove_character("好")

        assert _event_types(game) == [GameEventType.CHARACTER_REMOVED, GameEventType.PHRASE_RELOCKED]
        assert game.get_phrase("你好").unlocked is False

    def test_unlockable_phrases(self, game: HanziGame) -> None:
        game.state.characters["你"].level = 3
        game.state.characters["好"].level = 3

        assert [phrase.text for phrase in game.unlockable_phrases()] == ["你好"]


class TestItems:
    """Tests for using items through the facade."""

    def test_use_item(self, game: HanziGame) -> None:
        result = game.use_item("xp_boost_small", "你")

        assert result.success is True
        assert result.xp_gained == 50
        assert game.get_character("你").xp == 50
        assert game.state.bag.get_quantity("xp_boost_small") == 1
        assert _event_types(game) == [GameEventType.ITEM_USED]

    def test_use_item_unknown_character(self, game: HanziGame) -> None:
        result = game.use_item("xp_boost_small", "水")

        assert result.success is False
        assert game.state.bag.get_quantity("xp_boost_small") == 2

    def test_use_missing_item(self, game: HanziGame) -> None:
        assert game.use_item("xp_boost_large", "你").success is False

    def test_use_item_unlocks_phrase(self, game: HanziGame) -> None:
        game.state.characters["你"].level = 3
        game.state.characters["好"].level = 2
        game.state.characters["好"].xp = 150

        result = game.use_item("xp_boost_small", "好")

        assert result.leveled_up is True
        assert _event_types(game) == [
            GameEventType.ITEM_USED,
            GameEventType.LEVEL_UP,
            GameEventType.PHRASE_UNLOCKED,
        ]
        assert game.get_phrase("你好").unlocked is True
        assert game.state.player.total_phrases == 1

    def test_add_and_remove_items(self, game: HanziGame) -> None:
        assert game.add_item("xp_boost_large", 3).success is True
        assert game.remove_item("xp_boost_large", 2).success is True
        assert game.state.bag.get_quantity("xp_boost_large") == 1


class TestCustomData:
    """Tests for import and data-source switching."""

    def test_import_rejected(self, game: HanziGame) -> None:
        result = game.import_data({"characters": {"水": {"strokes": 0}}})

        assert result.success is False
        assert result.violations
        assert game.catalog.has_custom_data() is False

    def test_import_malformed_json(self, game: HanziGame) -> None:
        result = game.import_data("{oops")

        assert result.success is False
        assert result.violations[0].message.startswith("Invalid JSON format")

    def test_import_and_switch(self, game: HanziGame) -> None:
        imported = game.import_data(CUSTOM_DATA)
        assert (imported.characters_imported, imported.phrases_imported) == (2, 1)

        switched = game.switch_data_source("custom")

        assert switched.success is True
        assert switched.data_source == DataSource.CUSTOM
        assert list(game.state.phrases) == ["喝水"]
        assert GameEventType.DATA_SOURCE_CHANGED in _event_types(game)

    def test_switch_unlocks_from_roster(self, game: HanziGame) -> None:
        game.import_data(CUSTOM_DATA)
        game.add_character("喝")
        game.add_character("水")

        switched = game.switch_data_source(DataSource.CUSTOM)

        assert switched.new_unlocks == ["喝水"]
        assert game.state.player.total_phrases == 1

    def test_switch_without_custom_data(self, game: HanziGame) -> None:
        result = game.switch_data_source("custom")

        assert result.success is False
        assert "Import data first" in result.message
        assert result.data_source == DataSource.BUILT_IN

    def test_switch_unknown_source(self, game: HanziGame) -> None:
        assert game.switch_data_source("cloud").success is False

    def test_clear_custom_data(self, game: HanziGame) -> None:
        game.import_data(CUSTOM_DATA)
        game.switch_data_source("custom")

        result = game.clear_custom_data()

        assert result.data_source == DataSource.BUILT_IN
        assert "你好" in game.state.phrases
        assert "喝水" not in game.state.phrases

    def test_reset_keeps_custom_data(self, game: HanziGame) -> None:
        game.import_data(CUSTOM_DATA)

        game.reset()

        assert game.catalog.has_custom_data() is True
        assert set(game.export_custom_data()["characters"]) == {"喝", "水"}


class TestStats:
    """Tests for the stats summary."""

    def test_fresh_stats(self, game: HanziGame) -> None:
        stats = game.game_stats()

        assert stats.player_level == 1
        assert stats.total_characters == 3
        assert stats.total_practices == 0
        assert stats.average_accuracy == 0

    def test_after_practice(self, game: HanziGame) -> None:
        game.start_practice("你")
        game.record_mistake(0)
        game.record_mistake(1)
        game.complete_practice(CompletionSummary(total_mistakes=2), completion_time_ms=1_500)

        stats = game.game_stats()

        assert stats.total_practices == 1
        # 你 estimates 5 of 7 strokes right (71), the others have no practice
        assert stats.average_accuracy == 23
        assert stats.total_practice_time_s == 1
        assert stats.player_xp == game.state.player.xp


class TestPersistence:
    """Tests for saving and loading through the facade."""

    def test_save_and_load(self, game: HanziGame) -> None:
        game.add_character("是", {"level": 4})

        assert game.save("slot-a").success is True
        game.reset()
        result = game.load("slot-a")

        assert result.success is True
        assert game.get_character("是").level == 4

    def test_load_empty_slot(self, game: HanziGame) -> None:
        game.add_character("是")

        result = game.load("nothing-here")

        assert result.success is False
        assert "是" not in game.state.characters

    def test_default_slot(self, game: HanziGame) -> None:
        assert game.save().slot == "autosave"
        assert game.load().success is True

    def test_load_cancels_battle(self, game: HanziGame) -> None:
        game.save("before")
        game.start_battle()

        game.load("before")

        assert game.battle.in_battle is False
