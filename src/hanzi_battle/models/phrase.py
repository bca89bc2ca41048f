"""Phrases and synthetic phrase views."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hanzi_battle.core.constants import PHRASE_XP_PER_LEVEL
from hanzi_battle.models.progression import LevelProgress, calculate_phrase_reward
from hanzi_battle.models.stats import CombatStats, calculate_stats


if TYPE_CHECKING:
    from hanzi_battle.models.character import CharacterBase, PhraseCharacter


class PhraseCompletion(BaseModel):
    """Result of one full phrase-sequence completion."""

    text: str
    first_completion: bool
    xp_gained: int
    leveled_up: bool
    level: int


class Phrase(LevelProgress):
    """A multi-character compound unlocked by leveling its constituents.

    Attributes:
        text: Full phrase text, also its key in the phrase map.
        characters: Ordered constituent glyphs.
        requirements: Minimum level per constituent glyph.
        difficulty: Difficulty rating 1-5.
        frequency: Frequency score 0-100.
        pinyin: Pronunciation.
        meaning: English gloss.
        unlocked: Whether the unlock predicate has held.
        total_practices: Completed sequences.
        first_time_completed: Whether a sequence was ever completed.
    """

    XP_PER_LEVEL: ClassVar[int] = PHRASE_XP_PER_LEVEL

    text: str = Field(min_length=1)
    characters: list[str] = Field(default_factory=list)
    requirements: dict[str, int] = Field(default_factory=dict)
    difficulty: int = Field(default=1, ge=1, le=5)
    frequency: float = Field(default=50, ge=0, le=100)
    pinyin: str = ""
    meaning: str = ""

    unlocked: bool = False
    total_practices: int = Field(default=0, ge=0)
    first_time_completed: bool = False

    @model_validator(mode="after")
    def validate_requirements(self) -> Self:
        """Constituents and requirement keys must be the same set."""
        if set(self.characters) != set(self.requirements):
            raise ValueError(
                f"phrase {self.text!r}: characters {sorted(set(self.characters))} "
                f"do not match requirement keys {sorted(self.requirements)}"
            )
        return self

    def can_unlock(self, roster: Mapping[str, CharacterBase]) -> bool:
        """Check whether every constituent is owned at its required level."""
        for glyph in self.characters:
            character = roster.get(glyph)
            if character is None or character.level < self.requirements[glyph]:
                return False
        return True

    def combat_stats(self, strokes: int) -> CombatStats:
        """Combat stats for the current level given the summed constituent strokes."""
        return calculate_stats(
            level=self.level,
            strokes=strokes,
            difficulty=self.difficulty,
            frequency=self.frequency,
            is_phrase=True,
            constituent_count=len(self.characters),
        )

    def completion_bonus(self) -> int:
        """Bonus the next completion would award."""
        return calculate_phrase_reward(
            len(self.characters),
            first_completion=not self.first_time_completed,
        )

    def record_completion(self) -> PhraseCompletion:
        """Record a finished practice sequence and award the phrase bonus."""
        first_completion = not self.first_time_completed
        xp_gained = self.completion_bonus()

        self.total_practices += 1
        self.first_time_completed = True
        leveled_up = self.add_xp(xp_gained)

        return PhraseCompletion(
            text=self.text,
            first_completion=first_completion,
            xp_gained=xp_gained,
            leveled_up=leveled_up,
            level=self.level,
        )


class SyntheticPhraseView(BaseModel):
    """Read-only phrase shape for a phrase-character whose phrase is gone.

    Lets a phrase-character be practiced as a sequence after a data-source
    switch removed its phrase definition. Completing one never awards
    phrase XP because there is no phrase to award it to.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    characters: tuple[str, ...]
    pinyin: str = ""
    meaning: str = ""
    difficulty: int = 1
    frequency: float = 50

    @classmethod
    def from_phrase_character(cls, character: PhraseCharacter) -> SyntheticPhraseView:
        return cls(
            text=character.original_phrase,
            characters=tuple(character.original_phrase),
            pinyin=character.pinyin,
            difficulty=character.difficulty,
            frequency=character.frequency,
        )


PhraseSource = Phrase | SyntheticPhraseView
"""What a phrase-practice sequence can run over."""


__all__ = [
    "PhraseCompletion",
    "Phrase",
    "SyntheticPhraseView",
    "PhraseSource",
]
