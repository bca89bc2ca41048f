"""Integration tests for battles played through the game facade."""

from __future__ import annotations

import random

from hanzi_battle.engine.events import GameEventType
from hanzi_battle.engine.game import HanziGame
from hanzi_battle.models import BattleOpponent
from hanzi_battle.models.enums import BattlePhase


def opponent(name: str, *, hp: int, attack: int, defense: int, **extra) -> BattleOpponent:
    values = {
        "name": name,
        "strokes": 9,
        "difficulty": 2,
        "frequency": 97,
        "level": 2,
        "max_hp": hp,
        "current_hp": hp,
        "attack": attack,
        "defense": defense,
    }
    values.update(extra)
    return BattleOpponent(**values)


class TestBattleFlow:
    """Complete battles from start to outcome."""

    def test_win_captures_and_drops(self, scripted_rng: random.Random, game: HanziGame) -> None:
        # Drop roll passes, rarity roll lands on a small boost
        scripted_rng.floats.extend([0.0, 0.9])
        game.start_battle(opponent=opponent("是", hp=30, attack=15, defense=5))

        turns = []
        while game.battle.in_battle:
            turns.append(game.attack())

        final = turns[-1]
        assert final.phase == BattlePhase.VICTORY
        assert final.enemy_attack is None
        # 6 damage per hit against 30 HP
        assert len(turns) == 5
        assert game.get_character("是").level == 1
        assert game.state.bag.get_quantity("xp_boost_small") == 3

        types = [event.type for event in game.drain_events()]
        assert types[0] == GameEventType.BATTLE_STARTED
        assert GameEventType.BATTLE_WON in types
        assert GameEventType.OPPONENT_CAPTURED in types
        assert GameEventType.ITEM_DROPPED in types

    def test_capture_feeds_unlocks(self, game: HanziGame) -> None:
        game.state.characters["我"].level = 5
        game.start_battle(opponent=opponent("是", hp=1, attack=1, defense=0))

        result = game.attack()

        # 我是 needs 是 at level 6, so capture alone does not unlock it
        assert result.reward.capture.new_unlocks == []
        assert game.get_phrase("我是").unlocked is False

    def test_phrase_opponent_unlocks_phrase(self, game: HanziGame) -> None:
        wild = opponent(
            "你好",
            hp=1,
            attack=1,
            defense=0,
            is_phrase=True,
            constituents=["你", "好"],
            requirements={"你": 3, "好": 3},
        )
        game.start_battle(opponent=wild)

        result = game.attack()

        assert result.reward.capture.success is True
        assert game.get_phrase("你好").unlocked is True
        assert game.start_phrase_practice("你好").success is True

    def test_loss_keeps_progression(self, game: HanziGame) -> None:
        before = game.to_dict()["characters"]
        game.start_battle(opponent=opponent("戴", hp=999, attack=200, defense=200))

        outcomes = []
        while game.battle.in_battle:
            outcomes.append(game.attack())

        assert outcomes[-1].phase == BattlePhase.DEFEAT
        # Each of the three starters falls to one counter
        assert len(outcomes) == 3
        assert [turn.switched_to for turn in outcomes] == ["好", "我", None]
        assert game.to_dict()["characters"] == before
        assert GameEventType.BATTLE_LOST in [event.type for event in game.drain_events()]

    def test_full_bag_loses_drop(self, scripted_rng: random.Random, game: HanziGame) -> None:
        game.add_item("xp_boost_large", game.state.bag.free_space)
        scripted_rng.floats.extend([0.0, 0.9])
        game.start_battle(opponent=opponent("是", hp=1, attack=1, defense=0))

        result = game.attack()

        assert result.reward.drops == []
        assert result.reward.lost_drops == ["xp_boost_small"]
        assert GameEventType.ITEM_LOST in [event.type for event in game.drain_events()]

    def test_flee_then_new_battle(self, game: HanziGame) -> None:
        game.start_battle()
        game.flee()

        battle = game.start_battle()

        assert battle.turn_number == 0
        assert battle.phase == BattlePhase.ACTIVE
