"""Victory rewards: capturing the opponent and rolling item drops."""

from __future__ import annotations

from hanzi_battle.core.constants import (
    DEFAULT_ITEM_DROP_CHANCE,
    RARE_DROP_THRESHOLD,
    RARITY_DIFFICULTY_BONUS,
    RARITY_LEVEL_BONUS_CAP,
    RARITY_LEVEL_BONUS_PER_LEVEL,
    UNCOMMON_DROP_THRESHOLD,
)
from hanzi_battle.core.logging import get_logger
from hanzi_battle.data.catalog import DataCatalog
from hanzi_battle.engine.dice import DiceRoller
from hanzi_battle.engine.roster import add_character
from hanzi_battle.models.combat import BattleOpponent, CaptureResult, ItemDrop, VictoryReward
from hanzi_battle.models.enums import CaptureKind
from hanzi_battle.models.game_state import GameState
from hanzi_battle.models.phrase import Phrase


logger = get_logger(__name__)


def rarity_roll_bonus(level: int, difficulty: int) -> float:
    """Shift toward rarer drops for tougher opponents."""
    return min(RARITY_LEVEL_BONUS_CAP, level * RARITY_LEVEL_BONUS_PER_LEVEL) + difficulty * RARITY_DIFFICULTY_BONUS


def item_for_roll(adjusted_roll: float) -> str:
    """Map an adjusted rarity roll onto an item id."""
    if adjusted_roll < RARE_DROP_THRESHOLD:
        return "xp_boost_large"
    if adjusted_roll < UNCOMMON_DROP_THRESHOLD:
        return "xp_boost_medium"
    return "xp_boost_small"


class RewardRoller:
    """Grants the spoils of a won battle.

    Attributes:
        drop_chance: Probability that a victory drops an item.
    """

    def __init__(self, dice: DiceRoller, *, drop_chance: float = DEFAULT_ITEM_DROP_CHANCE) -> None:
        self._dice = dice
        self.drop_chance = drop_chance

    def capture(self, state: GameState, catalog: DataCatalog, opponent: BattleOpponent) -> CaptureResult:
        """Add the defeated opponent to the player's collection at level 1."""
        if opponent.is_phrase:
            return self._capture_phrase(state, opponent)

        if state.owns(opponent.name):
            return CaptureResult(
                kind=CaptureKind.CHARACTER,
                key=opponent.name,
                success=False,
                already_owned=True,
                message="Already owned",
            )

        result = add_character(
            state,
            catalog,
            opponent.name,
            {
                "pinyin": opponent.pinyin,
                "strokes": opponent.strokes,
                "difficulty": opponent.difficulty,
                "frequency": opponent.frequency,
                "level": 1,
                "xp": 0,
            },
        )
        logger.info("Opponent captured", name=opponent.name, kind="character", success=result.success)
        return CaptureResult(
            kind=CaptureKind.CHARACTER,
            key=opponent.name,
            success=result.success,
            message=result.message,
            new_unlocks=result.new_unlocks,
        )

    def _capture_phrase(self, state: GameState, opponent: BattleOpponent) -> CaptureResult:
        phrase = state.get_phrase(opponent.name)
        if phrase is not None and phrase.unlocked:
            return CaptureResult(
                kind=CaptureKind.PHRASE,
                key=opponent.name,
                success=False,
                already_owned=True,
                message="Already unlocked",
            )

        if phrase is None:
            phrase = Phrase(
                text=opponent.name,
                characters=list(opponent.constituents),
                requirements=dict(opponent.requirements),
                difficulty=min(5, opponent.difficulty),
                frequency=opponent.frequency,
                pinyin=opponent.pinyin,
                meaning=opponent.meaning,
            )
            state.phrases[opponent.name] = phrase

        phrase.unlocked = True
        phrase.level = 1
        phrase.xp = 0
        state.player.total_phrases += 1

        logger.info("Opponent captured", name=opponent.name, kind="phrase")
        return CaptureResult(
            kind=CaptureKind.PHRASE,
            key=opponent.name,
            success=True,
            message="Phrase unlocked",
        )

    def roll_drops(self, state: GameState, opponent: BattleOpponent) -> tuple[list[ItemDrop], list[str]]:
        """Maybe drop one item; a full bag silently loses it.

        Returns:
            Tuple of (drops added to the bag, item ids lost to a full bag).
        """
        if not self._dice.chance(self.drop_chance):
            return [], []

        adjusted = self._dice.random() + rarity_roll_bonus(opponent.level, opponent.difficulty)
        item_id = item_for_roll(adjusted)

        added = state.bag.add_item(item_id, 1)
        if not added.success or added.item is None:
            logger.info("Bag full, item drop lost", item_id=item_id, bag_total=state.bag.total_count)
            return [], [item_id]

        logger.info("Item dropped", item_id=item_id, rarity=str(added.item.rarity), roll=round(adjusted, 3))
        return [ItemDrop(item_id=item_id, item=added.item.model_copy(update={"quantity": 1}), quantity=1)], []

    def grant(self, state: GameState, catalog: DataCatalog, opponent: BattleOpponent) -> VictoryReward:
        """Capture the opponent and roll for drops."""
        capture = self.capture(state, catalog, opponent)
        drops, lost = self.roll_drops(state, opponent)
        return VictoryReward(capture=capture, drops=drops, lost_drops=lost)


__all__ = [
    "rarity_roll_bonus",
    "item_for_roll",
    "RewardRoller",
]
