"""Roster characters.

A roster entry is either a single hanzi (``HanziCharacter``) or a phrase
minted into a standalone practiceable unit (``PhraseCharacter``). Both
share the character XP curve and stat formulas; the ``kind`` field is the
discriminator used when loading saved rosters.
"""

from __future__ import annotations

import math
from typing import Annotated, Any, ClassVar, Literal

from pydantic import BaseModel, Discriminator, Field, Tag

from hanzi_battle.core.constants import CHARACTER_XP_PER_LEVEL
from hanzi_battle.models.enums import CharacterKind
from hanzi_battle.models.progression import LevelProgress, calculate_practice_reward
from hanzi_battle.models.stats import CombatStats, calculate_stats


class PracticeOutcome(BaseModel):
    """Result of recording one completed practice on a character."""

    glyph: str
    accuracy: int = Field(ge=0, le=100)
    xp_gained: int
    leveled_up: bool
    level: int


class CharacterBase(LevelProgress):
    """Shared state of every roster entry.

    Attributes:
        glyph: Roster key. A single hanzi, or a phrase's full text.
        pinyin: Pronunciation.
        strokes: Stroke count.
        difficulty: Difficulty rating 1-5.
        frequency: Frequency score 0-100.
        total_practices: Completed practice sessions.
        total_mistakes: Mistakes across all sessions.
        best_accuracy: Best session accuracy ever recorded.
        unlocked: Whether the character can be practiced.
    """

    XP_PER_LEVEL: ClassVar[int] = CHARACTER_XP_PER_LEVEL

    glyph: str = Field(min_length=1, description="Glyph or phrase text")
    pinyin: str = Field(default="", description="Pronunciation")
    strokes: int = Field(default=1, ge=1, description="Stroke count")
    difficulty: int = Field(default=1, ge=1, le=5, description="Difficulty rating")
    frequency: float = Field(default=50, ge=0, le=100, description="Frequency score")

    total_practices: int = Field(default=0, ge=0)
    total_mistakes: int = Field(default=0, ge=0)
    best_accuracy: int = Field(default=0, ge=0, le=100)
    unlocked: bool = Field(default=True)

    # -------------------------------------------------------------------------
    # Derived combat stats
    # -------------------------------------------------------------------------

    @property
    def stats(self) -> CombatStats:
        """Combat stats for the current level."""
        return calculate_stats(
            level=self.level,
            strokes=self.strokes,
            difficulty=self.difficulty,
            frequency=self.frequency,
        )

    @property
    def hp(self) -> int:
        return self.stats.hp

    @property
    def attack(self) -> int:
        return self.stats.attack

    @property
    def defense(self) -> int:
        return self.stats.defense

    @property
    def is_phrase_character(self) -> bool:
        return False

    # -------------------------------------------------------------------------
    # Practice bookkeeping
    # -------------------------------------------------------------------------

    def record_practice(
        self,
        mistake_count: int,
        accuracy: int,
        completion_time_ms: int,
    ) -> PracticeOutcome:
        """Record a finished practice session and award its XP.

        Args:
            mistake_count: Mistakes made during the session.
            accuracy: Session accuracy percentage (0-100).
            completion_time_ms: Time taken to finish the character.

        Returns:
            PracticeOutcome with the XP granted and level-up flag.
        """
        self.total_practices += 1
        self.total_mistakes += mistake_count
        if accuracy > self.best_accuracy:
            self.best_accuracy = accuracy

        xp_gained = calculate_practice_reward(accuracy / 100, mistake_count, completion_time_ms)
        leveled_up = self.add_xp(xp_gained)

        return PracticeOutcome(
            glyph=self.glyph,
            accuracy=accuracy,
            xp_gained=xp_gained,
            leveled_up=leveled_up,
            level=self.level,
        )

    def lifetime_accuracy(self) -> int:
        """Rough lifetime accuracy for display.

        Treats every past session as ``strokes`` attempts and subtracts the
        recorded mistakes. This is an estimate and is never used for rewards.
        """
        if self.total_practices == 0:
            return 0
        estimated_strokes = self.total_practices * self.strokes
        estimated_correct = max(0, estimated_strokes - self.total_mistakes)
        return min(100, max(0, math.floor(estimated_correct / estimated_strokes * 100)))


class HanziCharacter(CharacterBase):
    """A single hanzi in the roster."""

    kind: Literal[CharacterKind.BASE] = CharacterKind.BASE


class PhraseCharacter(CharacterBase):
    """A phrase practiced as one roster entry.

    Created the first time its phrase sequence is completed; keyed by the
    phrase's full text.
    """

    kind: Literal[CharacterKind.PHRASE_DERIVED] = CharacterKind.PHRASE_DERIVED
    original_phrase: str = Field(min_length=1, description="Key of the source phrase")

    @property
    def is_phrase_character(self) -> bool:
        return True


def _character_kind(value: Any) -> str:
    """Pick the roster variant, tolerating entries saved without ``kind``."""
    if isinstance(value, dict):
        kind = value.get("kind")
        if kind is None:
            kind = CharacterKind.PHRASE_DERIVED if value.get("original_phrase") else CharacterKind.BASE
        return str(kind)
    return str(getattr(value, "kind", CharacterKind.BASE))


Character = Annotated[
    Annotated[HanziCharacter, Tag(CharacterKind.BASE.value)]
    | Annotated[PhraseCharacter, Tag(CharacterKind.PHRASE_DERIVED.value)],
    Discriminator(_character_kind),
]
"""Any roster entry."""


__all__ = [
    "PracticeOutcome",
    "CharacterBase",
    "HanziCharacter",
    "PhraseCharacter",
    "Character",
]
