"""Tests for turn-based battle resolution."""

from __future__ import annotations

import random

import pytest

from hanzi_battle.core.exceptions import CombatError, InvalidGameStateError
from hanzi_battle.data.catalog import DataCatalog
from hanzi_battle.engine.battle import BattleSession, calculate_damage, combatant_from_character
from hanzi_battle.engine.dice import DiceRoller
from hanzi_battle.engine.events import EventQueue, GameEventType
from hanzi_battle.models import BattleOpponent, GameState
from hanzi_battle.models.enums import BattlePhase


def _opponent(**overrides) -> BattleOpponent:
    values = {
        "name": "是",
        "strokes": 9,
        "difficulty": 2,
        "frequency": 97,
        "level": 1,
        "max_hp": 5,
        "current_hp": 5,
        "attack": 10,
        "defense": 0,
    }
    values.update(overrides)
    return BattleOpponent(**values)


def _brute() -> BattleOpponent:
    """Opponent that shrugs off hits and one-shots level 1 characters."""
    return _opponent(name="戴", max_hp=500, current_hp=500, attack=100, defense=100)


@pytest.fixture
def events() -> EventQueue:
    return EventQueue()


@pytest.fixture
def session(game_state: GameState, catalog: DataCatalog, scripted_dice: DiceRoller, events: EventQueue) -> BattleSession:
    return BattleSession(game_state, catalog, scripted_dice, events=events)


class TestDamage:
    """Tests for the damage formula."""

    @pytest.mark.parametrize(
        ("attack", "defense", "variance", "expected"),
        [
            (20, 10, 0, 10),
            (20, 10, 2, 12),
            (20, 10, -2, 8),
            (10, 10, 0, 1),
            (10, 10, 2, 3),
            (5, 50, -2, 1),
        ],
    )
    def test_calculate_damage(self, attack: int, defense: int, variance: int, expected: int) -> None:
        assert calculate_damage(attack, defense, variance) == expected

    def test_combatant_snapshot(self, game_state: GameState) -> None:
        combatant = combatant_from_character(game_state.characters["你"])

        assert (combatant.max_hp, combatant.attack, combatant.defense) == (41, 11, 12)
        assert combatant.current_hp == combatant.max_hp


class TestLifecycle:
    """Tests for starting and leaving battles."""

    def test_start_with_default_party(self, session: BattleSession, events: EventQueue) -> None:
        battle = session.start(opponent=_opponent())

        assert [member.glyph for member in battle.party] == ["你", "好", "我"]
        assert battle.phase == BattlePhase.ACTIVE
        assert session.in_battle is True
        assert [event.type for event in events.drain()] == [GameEventType.BATTLE_STARTED]

    def test_start_generates_opponent(self, session: BattleSession, game_state: GameState) -> None:
        battle = session.start()

        assert not game_state.owns(battle.opponent.name)

    def test_explicit_party_skips_unknown(self, session: BattleSession) -> None:
        battle = session.start(party=["好", "水"], opponent=_opponent())

        assert [member.glyph for member in battle.party] == ["好"]

    def test_locked_members_sit_out(self, session: BattleSession, game_state: GameState) -> None:
        game_state.characters["我"].unlocked = False

        battle = session.start(opponent=_opponent())

        assert [member.glyph for member in battle.party] == ["你", "好"]

    def test_empty_roster(self, catalog: DataCatalog, scripted_dice: DiceRoller) -> None:
        with pytest.raises(InvalidGameStateError):
            BattleSession(GameState(), catalog, scripted_dice).start(opponent=_opponent())

    def test_one_battle_at_a_time(self, session: BattleSession) -> None:
        session.start(opponent=_opponent())

        with pytest.raises(CombatError, match="already in progress"):
            session.start(opponent=_opponent())

    def test_flee(self, session: BattleSession, game_state: GameState, events: EventQueue) -> None:
        session.start(opponent=_opponent())

        battle = session.flee()

        assert battle.phase == BattlePhase.FLED
        assert session.battle is None
        assert "是" not in game_state.characters
        assert events.drain()[-1].type == GameEventType.BATTLE_FLED

    def test_actions_without_battle(self, session: BattleSession) -> None:
        with pytest.raises(CombatError, match="No active battle"):
            session.attack()
        with pytest.raises(CombatError):
            session.flee()
        with pytest.raises(CombatError):
            session.switch("好")


class TestAttack:
    """Tests for resolving turns."""

    def test_exchange(self, session: BattleSession) -> None:
        session.start(opponent=_opponent(max_hp=100, current_hp=100, attack=20))

        result = session.attack()

        assert result.turn_number == 1
        assert result.player_attack.damage == 11
        assert result.player_attack.defender_hp == 89
        assert result.enemy_attack is not None
        assert result.enemy_attack.damage == 8
        assert session.battle.active.current_hp == 33
        assert result.phase == BattlePhase.ACTIVE

    def test_variance_applies(self, scripted_rng: random.Random, session: BattleSession) -> None:
        scripted_rng.ints.extend([2, -2])
        session.start(opponent=_opponent(max_hp=100, current_hp=100, attack=20))

        result = session.attack()

        assert result.player_attack.damage == 13
        assert result.enemy_attack.damage == 6

    def test_lethal_hit_skips_counter(self, session: BattleSession, game_state: GameState, events: EventQueue) -> None:
        session.start(opponent=_opponent())

        result = session.attack()

        assert result.phase == BattlePhase.VICTORY
        assert result.enemy_attack is None
        assert result.reward is not None
        assert result.reward.capture.success is True
        assert game_state.characters["是"].level == 1
        assert session.battle is None

        types = [event.type for event in events.drain()]
        assert GameEventType.BATTLE_WON in types
        assert GameEventType.OPPONENT_CAPTURED in types

    def test_victory_drop(self, scripted_rng: random.Random, session: BattleSession, game_state: GameState) -> None:
        scripted_rng.floats.extend([0.0, 0.9])
        session.start(opponent=_opponent())

        result = session.attack()

        assert [drop.item_id for drop in result.reward.drops] == ["xp_boost_small"]
        assert game_state.bag.get_quantity("xp_boost_small") == 1

    def test_forced_switch(self, session: BattleSession, events: EventQueue) -> None:
        session.start(party=["你", "好"], opponent=_brute())
        events.drain()

        result = session.attack()

        assert result.enemy_attack.defender_defeated is True
        assert result.switched_to == "好"
        assert session.battle.active.glyph == "好"
        switched = events.drain()[-1]
        assert switched.type == GameEventType.BATTLE_SWITCHED
        assert switched.data == {"forced": True}

    def test_defeat(self, session: BattleSession, game_state: GameState, events: EventQueue) -> None:
        levels = {glyph: (character.level, character.xp) for glyph, character in game_state.characters.items()}
        session.start(party=["你", "好"], opponent=_brute())

        session.attack()
        result = session.attack()

        assert result.phase == BattlePhase.DEFEAT
        assert session.battle is None
        assert events.drain()[-1].type == GameEventType.BATTLE_LOST
        # Battles never touch persisted progression
        assert {glyph: (c.level, c.xp) for glyph, c in game_state.characters.items()} == levels


class TestSwitch:
    """Tests for voluntary switching."""

    def test_switch(self, session: BattleSession) -> None:
        session.start(opponent=_opponent())

        active = session.switch("我")

        assert active.glyph == "我"
        assert session.battle.active_index == 2

    def test_not_in_party(self, session: BattleSession) -> None:
        session.start(party=["你"], opponent=_opponent())

        with pytest.raises(CombatError, match="not in the party"):
            session.switch("好")

    def test_already_active(self, session: BattleSession) -> None:
        session.start(opponent=_opponent())

        with pytest.raises(CombatError, match="already active"):
            session.switch("你")

    def test_defeated_member(self, session: BattleSession) -> None:
        session.start(party=["你", "好"], opponent=_brute())
        session.attack()

        with pytest.raises(CombatError, match="defeated"):
            session.switch("你")
