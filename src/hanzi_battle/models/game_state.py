"""Game state container.

``GameState`` is the single object holding every persisted piece of a
game: the player, the roster, the phrase map and the bag. Engine
functions receive it explicitly and mutate it in place.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field

from hanzi_battle.core.constants import MISSING_CONSTITUENT_STROKES
from hanzi_battle.models.character import Character, CharacterBase
from hanzi_battle.models.items import Bag
from hanzi_battle.models.phrase import Phrase
from hanzi_battle.models.player import Player


class RosterLevelStats(BaseModel):
    """Average, minimum and maximum roster level."""

    model_config = ConfigDict(frozen=True)

    average: int = 1
    minimum: int = 1
    maximum: int = 1


class GameState(BaseModel):
    """Everything that survives a save/load cycle.

    Attributes:
        player: Player progression.
        characters: Roster keyed by glyph (or phrase text for phrase-characters).
        phrases: Phrase map keyed by phrase text.
        bag: Item bag.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    player: Player = Field(default_factory=Player)
    characters: dict[str, Character] = Field(default_factory=dict)
    phrases: dict[str, Phrase] = Field(default_factory=dict)
    bag: Bag = Field(default_factory=Bag)

    def get_character(self, key: str) -> CharacterBase | None:
        return self.characters.get(key)

    def get_phrase(self, text: str) -> Phrase | None:
        return self.phrases.get(text)

    def owns(self, key: str) -> bool:
        return key in self.characters

    def unlocked_phrases(self) -> list[Phrase]:
        return [phrase for phrase in self.phrases.values() if phrase.unlocked]

    def level_stats(self) -> RosterLevelStats:
        """Roster level summary; an empty roster reports 1/1/1."""
        levels = [character.level for character in self.characters.values()]
        if not levels:
            return RosterLevelStats()
        return RosterLevelStats(
            average=math.floor(sum(levels) / len(levels)),
            minimum=min(levels),
            maximum=max(levels),
        )

    def constituent_strokes(self, glyphs: list[str] | tuple[str, ...]) -> int:
        """Sum the roster stroke counts of ``glyphs``, 5 for any not owned."""
        total = 0
        for glyph in glyphs:
            character = self.characters.get(glyph)
            total += character.strokes if character else MISSING_CONSTITUENT_STROKES
        return total

    def sync_counters(self) -> None:
        """Refresh the player's cached roster and phrase counters."""
        self.player.total_characters = len(self.characters)
        self.player.total_phrases = len(self.unlocked_phrases())


__all__ = [
    "RosterLevelStats",
    "GameState",
]
