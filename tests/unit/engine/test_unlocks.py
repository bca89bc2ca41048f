"""Tests for phrase unlock evaluation."""

from __future__ import annotations

from hanzi_battle.engine.unlocks import refresh_unlocks, relock_dependents, unlockable_phrases
from hanzi_battle.models import GameState


def _level(state: GameState, glyph: str, level: int) -> None:
    state.characters[glyph].level = level


class TestRefreshUnlocks:
    """Tests for unlocking phrases."""

    def test_nothing_unlocked_at_start(self, game_state: GameState) -> None:
        assert refresh_unlocks(game_state) == []
        assert game_state.player.total_phrases == 0

    def test_nihao_unlocks_at_level_three(self, game_state: GameState) -> None:
        _level(game_state, "你", 3)
        _level(game_state, "好", 2)
        assert refresh_unlocks(game_state) == []

        _level(game_state, "好", 3)
        unlocked = refresh_unlocks(game_state)

        assert [phrase.text for phrase in unlocked] == ["你好"]
        assert game_state.phrases["你好"].unlocked is True
        assert game_state.player.total_phrases == 1

    def test_idempotent(self, game_state: GameState) -> None:
        _level(game_state, "你", 3)
        _level(game_state, "好", 3)
        refresh_unlocks(game_state)

        assert refresh_unlocks(game_state) == []
        assert game_state.player.total_phrases == 1

    def test_unlockable_preview(self, game_state: GameState) -> None:
        _level(game_state, "你", 3)
        _level(game_state, "好", 3)

        assert [phrase.text for phrase in unlockable_phrases(game_state)] == ["你好"]
        assert game_state.phrases["你好"].unlocked is False


class TestRelockDependents:
    """Tests for relocking after a constituent leaves the roster."""

    def test_relock(self, game_state: GameState) -> None:
        _level(game_state, "你", 3)
        _level(game_state, "好", 3)
        refresh_unlocks(game_state)
        del game_state.characters["好"]

        relocked = relock_dependents(game_state, "好")

        assert [phrase.text for phrase in relocked] == ["你好"]
        assert game_state.phrases["你好"].unlocked is False
        assert game_state.player.total_phrases == 0

    def test_locked_phrases_untouched(self, game_state: GameState) -> None:
        game_state.player.total_phrases = 0

        assert relock_dependents(game_state, "好") == []
        assert game_state.player.total_phrases == 0
