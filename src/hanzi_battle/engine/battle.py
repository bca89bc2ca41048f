"""Turn-based battle resolution.

One ``BattleSession`` runs at most one battle at a time:

    start -> [attack | switch]* -> victory | defeat | flee

Each attack applies the player's damage, checks the opponent for defeat
and only then lets the opponent counter. A lethal player hit therefore
ends the battle as a victory with no counter-attack. Battle HP lives on
``BattleCombatant`` snapshots, so no battle outcome touches persisted
character levels or XP.
"""

from __future__ import annotations

from hanzi_battle.core.constants import DAMAGE_VARIANCE, MIN_DAMAGE
from hanzi_battle.core.exceptions import CombatError, InvalidGameStateError
from hanzi_battle.core.logging import get_logger
from hanzi_battle.data.catalog import DataCatalog
from hanzi_battle.engine.dice import DiceRoller
from hanzi_battle.engine.events import EventQueue, GameEventType
from hanzi_battle.engine.opponents import OpponentGenerator
from hanzi_battle.engine.rewards import RewardRoller
from hanzi_battle.models.character import CharacterBase
from hanzi_battle.models.combat import (
    AttackResult,
    BattleCombatant,
    BattleOpponent,
    BattleState,
    BattleTurnResult,
)
from hanzi_battle.models.enums import BattlePhase
from hanzi_battle.models.game_state import GameState


logger = get_logger(__name__)


def calculate_damage(attack: int, defense: int, variance: int) -> int:
    """Damage of one hit: ``max(1, max(1, attack - defense) + variance)``."""
    return max(MIN_DAMAGE, max(MIN_DAMAGE, attack - defense) + variance)


def combatant_from_character(character: CharacterBase) -> BattleCombatant:
    """Snapshot a roster member's current stats for battle."""
    stats = character.stats
    return BattleCombatant(
        glyph=character.glyph,
        level=character.level,
        max_hp=stats.hp,
        current_hp=stats.hp,
        attack=stats.attack,
        defense=stats.defense,
    )


class BattleSession:
    """Battle state machine bound to one game state.

    Not thread-safe; callers serialize battle actions.
    """

    def __init__(
        self,
        state: GameState,
        catalog: DataCatalog,
        dice: DiceRoller,
        *,
        rewards: RewardRoller | None = None,
        generator: OpponentGenerator | None = None,
        events: EventQueue | None = None,
    ) -> None:
        self._state = state
        self._catalog = catalog
        self._dice = dice
        self._rewards = rewards if rewards is not None else RewardRoller(dice)
        self._generator = generator if generator is not None else OpponentGenerator(dice)
        self._events = events if events is not None else EventQueue()
        self._battle: BattleState | None = None

    @property
    def battle(self) -> BattleState | None:
        """The running battle, or None between battles."""
        return self._battle

    @property
    def in_battle(self) -> bool:
        return self._battle is not None

    def _require_battle(self) -> BattleState:
        if self._battle is None:
            raise CombatError("No active battle opponent")
        return self._battle

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(
        self,
        *,
        party: list[str] | None = None,
        opponent: BattleOpponent | None = None,
    ) -> BattleState:
        """Begin a battle.

        Args:
            party: Roster keys to field, in switch order. Defaults to every
                unlocked roster member.
            opponent: Opponent to face. Defaults to a generated wild one.

        Returns:
            The new BattleState.

        Raises:
            CombatError: If a battle is already running.
            InvalidGameStateError: If no roster member can fight.
        """
        if self._battle is not None:
            raise CombatError(
                "A battle is already in progress",
                turn_number=self._battle.turn_number,
            )

        if party is None:
            members = [character for character in self._state.characters.values() if character.unlocked]
        else:
            members = [
                character
                for key in party
                if (character := self._state.get_character(key)) is not None
            ]
        if not members:
            raise InvalidGameStateError(
                "No roster members available for battle",
                current_state="idle",
                expected_states=["roster with at least one character"],
            )

        if opponent is None:
            opponent = self._generator.generate(self._state, self._catalog)

        self._battle = BattleState(
            opponent=opponent,
            party=[combatant_from_character(member) for member in members],
        )
        self._events.emit(GameEventType.BATTLE_STARTED, opponent.name, level=opponent.level)
        logger.info(
            "Battle started",
            opponent=opponent.name,
            opponent_level=opponent.level,
            party=[member.glyph for member in members],
        )
        return self._battle

    def flee(self) -> BattleState:
        """Leave the battle with no consequences.

        Raises:
            CombatError: If no battle is running.
        """
        battle = self._require_battle()
        battle.phase = BattlePhase.FLED
        self._battle = None
        self._events.emit(GameEventType.BATTLE_FLED, battle.opponent.name)
        logger.info("Battle fled", opponent=battle.opponent.name, turn=battle.turn_number)
        return battle

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def switch(self, glyph: str) -> BattleCombatant:
        """Send in another non-defeated party member.

        Raises:
            CombatError: If no battle is running or the target cannot be switched in.
        """
        battle = self._require_battle()
        index = battle.find_member(glyph)
        if index is None:
            raise CombatError(f"{glyph} is not in the party", combatant=glyph, turn_number=battle.turn_number)
        if battle.party[index].defeated:
            raise CombatError(f"{glyph} has been defeated", combatant=glyph, turn_number=battle.turn_number)
        if index == battle.active_index:
            raise CombatError(f"{glyph} is already active", combatant=glyph, turn_number=battle.turn_number)

        battle.active_index = index
        self._events.emit(GameEventType.BATTLE_SWITCHED, glyph)
        logger.info("Battle switch", active=glyph, turn=battle.turn_number)
        return battle.active

    def attack(self) -> BattleTurnResult:
        """Resolve one player attack and the opponent's counter.

        Returns:
            BattleTurnResult describing both hits and the resulting phase.

        Raises:
            CombatError: If no battle is running.
        """
        battle = self._require_battle()
        battle.turn_number += 1
        attacker = battle.active
        opponent = battle.opponent

        damage = calculate_damage(attacker.attack, opponent.defense, self._dice.variance(DAMAGE_VARIANCE))
        opponent.take_damage(damage)
        player_attack = AttackResult(
            attacker=attacker.glyph,
            defender=opponent.name,
            damage=damage,
            defender_hp=opponent.current_hp,
            defender_defeated=opponent.is_defeated,
        )
        logger.debug(
            "Player attack",
            attacker=attacker.glyph,
            damage=damage,
            opponent_hp=opponent.current_hp,
            turn=battle.turn_number,
        )

        if opponent.is_defeated:
            return self._win(battle, player_attack)

        counter = calculate_damage(opponent.attack, attacker.defense, self._dice.variance(DAMAGE_VARIANCE))
        attacker.take_damage(counter)
        enemy_attack = AttackResult(
            attacker=opponent.name,
            defender=attacker.glyph,
            damage=counter,
            defender_hp=attacker.current_hp,
            defender_defeated=attacker.defeated,
        )
        logger.debug(
            "Enemy attack",
            defender=attacker.glyph,
            damage=counter,
            defender_hp=attacker.current_hp,
            turn=battle.turn_number,
        )

        result = BattleTurnResult(
            turn_number=battle.turn_number,
            player_attack=player_attack,
            enemy_attack=enemy_attack,
            phase=battle.phase,
        )
        if attacker.defeated:
            remaining = battle.available_indices()
            if remaining:
                battle.active_index = remaining[0]
                result.switched_to = battle.active.glyph
                self._events.emit(GameEventType.BATTLE_SWITCHED, battle.active.glyph, forced=True)
                logger.info("Party member defeated", defeated=attacker.glyph, next=battle.active.glyph)
            else:
                result.phase = self._lose(battle)
        return result

    # -------------------------------------------------------------------------
    # Outcomes
    # -------------------------------------------------------------------------

    def _win(self, battle: BattleState, player_attack: AttackResult) -> BattleTurnResult:
        battle.phase = BattlePhase.VICTORY
        self._battle = None
        opponent = battle.opponent

        reward = self._rewards.grant(self._state, self._catalog, opponent)

        self._events.emit(GameEventType.BATTLE_WON, opponent.name, turns=battle.turn_number)
        if reward.capture.success:
            self._events.emit(GameEventType.OPPONENT_CAPTURED, opponent.name, kind=str(reward.capture.kind))
        for text in reward.capture.new_unlocks:
            self._events.emit(GameEventType.PHRASE_UNLOCKED, text)
        for drop in reward.drops:
            self._events.emit(GameEventType.ITEM_DROPPED, drop.item_id, quantity=drop.quantity)
        for item_id in reward.lost_drops:
            self._events.emit(GameEventType.ITEM_LOST, item_id)

        logger.info(
            "Battle won",
            opponent=opponent.name,
            turns=battle.turn_number,
            captured=reward.capture.success,
            drops=[drop.item_id for drop in reward.drops],
        )
        return BattleTurnResult(
            turn_number=battle.turn_number,
            player_attack=player_attack,
            phase=BattlePhase.VICTORY,
            reward=reward,
        )

    def _lose(self, battle: BattleState) -> BattlePhase:
        battle.phase = BattlePhase.DEFEAT
        self._battle = None
        self._events.emit(GameEventType.BATTLE_LOST, battle.opponent.name, turns=battle.turn_number)
        logger.info("Battle lost", opponent=battle.opponent.name, turns=battle.turn_number)
        return BattlePhase.DEFEAT


__all__ = [
    "calculate_damage",
    "combatant_from_character",
    "BattleSession",
]
