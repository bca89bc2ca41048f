"""Battle models.

Everything here is ephemeral: a battle's opponent, the party's transient
HP and the turn results exist only for one battle session and are never
written into the saved game.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from hanzi_battle.models.enums import BattlePhase, CaptureKind
from hanzi_battle.models.items import ItemStack


# =============================================================================
# Combatants
# =============================================================================


class BattleOpponent(BaseModel):
    """A generated wild opponent.

    Attributes:
        name: Glyph or phrase text; also the roster key on capture.
        pinyin: Pronunciation.
        meaning: English gloss, if known.
        is_phrase: Whether the opponent represents a phrase.
        constituents: Constituent glyphs (phrases only).
        requirements: Unlock requirements carried over for capture (phrases only).
        strokes: Own stroke count, or the constituent sum for a phrase.
        difficulty: Difficulty rating.
        frequency: Frequency score.
        level: Generated level.
        is_mystery: Whether it came from the fallback pool.
    """

    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(min_length=1)
    pinyin: str = ""
    meaning: str = ""
    is_phrase: bool = False
    constituents: list[str] = Field(default_factory=list)
    requirements: dict[str, int] = Field(default_factory=dict)
    strokes: int = Field(ge=1)
    difficulty: int = Field(ge=1)
    frequency: float = Field(ge=0, le=100)
    level: int = Field(ge=1)
    is_mystery: bool = False

    max_hp: int = Field(ge=1)
    current_hp: int = Field(ge=0)
    attack: int
    defense: int

    @property
    def is_defeated(self) -> bool:
        return self.current_hp <= 0

    def take_damage(self, amount: int) -> int:
        """Apply damage, flooring HP at zero. Returns remaining HP."""
        self.current_hp = max(0, self.current_hp - amount)
        return self.current_hp


class BattleCombatant(BaseModel):
    """A roster member's transient battle state.

    Snapshot of the character's stats at battle start; damage taken here
    never touches the persisted character.
    """

    model_config = ConfigDict(validate_assignment=True)

    glyph: str
    level: int = Field(ge=1)
    max_hp: int = Field(ge=1)
    current_hp: int = Field(ge=0)
    attack: int
    defense: int
    defeated: bool = False

    def take_damage(self, amount: int) -> int:
        """Apply damage, flooring HP at zero and marking defeat."""
        self.current_hp = max(0, self.current_hp - amount)
        if self.current_hp == 0:
            self.defeated = True
        return self.current_hp


# =============================================================================
# Rewards
# =============================================================================


class CaptureResult(BaseModel):
    """Outcome of adding a defeated opponent to the roster."""

    kind: CaptureKind
    key: str
    success: bool
    already_owned: bool = False
    message: str
    new_unlocks: list[str] = Field(default_factory=list)


class ItemDrop(BaseModel):
    """An item that made it into the bag."""

    item_id: str
    item: ItemStack
    quantity: int = 1


class VictoryReward(BaseModel):
    """Everything a victory granted.

    Attributes:
        capture: Roster capture outcome.
        drops: Items added to the bag.
        lost_drops: Item ids rolled but lost to a full bag.
    """

    capture: CaptureResult
    drops: list[ItemDrop] = Field(default_factory=list)
    lost_drops: list[str] = Field(default_factory=list)


# =============================================================================
# Turn Results
# =============================================================================


class AttackResult(BaseModel):
    """One side hitting the other."""

    attacker: str
    defender: str
    damage: int = Field(ge=1)
    defender_hp: int = Field(ge=0)
    defender_defeated: bool


class BattleTurnResult(BaseModel):
    """Outcome of one player attack and the counter-attack it provoked.

    Attributes:
        turn_number: 1-based turn index.
        player_attack: The player's hit.
        enemy_attack: The counter, absent when the opponent fell.
        switched_to: Roster member sent in after the active one fell.
        phase: Battle phase after the turn.
        reward: Victory reward, when the turn won the battle.
    """

    turn_number: int
    player_attack: AttackResult
    enemy_attack: AttackResult | None = None
    switched_to: str | None = None
    phase: BattlePhase
    reward: VictoryReward | None = None


# =============================================================================
# Battle State
# =============================================================================


class BattleState(BaseModel):
    """State of one battle session."""

    model_config = ConfigDict(validate_assignment=True)

    opponent: BattleOpponent
    party: list[BattleCombatant] = Field(min_length=1)
    active_index: int = Field(default=0, ge=0)
    phase: BattlePhase = BattlePhase.ACTIVE
    turn_number: int = Field(default=0, ge=0)

    @property
    def active(self) -> BattleCombatant:
        return self.party[self.active_index]

    @property
    def is_over(self) -> bool:
        return self.phase != BattlePhase.ACTIVE

    def available_indices(self) -> list[int]:
        """Indices of party members that can still fight."""
        return [index for index, member in enumerate(self.party) if not member.defeated]

    def find_member(self, glyph: str) -> int | None:
        for index, member in enumerate(self.party):
            if member.glyph == glyph:
                return index
        return None


__all__ = [
    "BattleOpponent",
    "BattleCombatant",
    "CaptureResult",
    "ItemDrop",
    "VictoryReward",
    "AttackResult",
    "BattleTurnResult",
    "BattleState",
]
