"""Player progression wrapper."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from hanzi_battle.core.constants import PLAYER_XP_PER_LEVEL
from hanzi_battle.models.progression import LevelProgress


class Player(LevelProgress):
    """Overall player progress.

    The player levels on its own curve, independent of any character.

    Attributes:
        total_characters: Cached roster size.
        total_phrases: Cached count of unlocked phrases.
        total_practice_time_ms: Time spent in completed practices.
        practice_count: Completed character practices.
        achievements: Earned achievement ids.
    """

    XP_PER_LEVEL: ClassVar[int] = PLAYER_XP_PER_LEVEL

    total_characters: int = Field(default=0, ge=0)
    total_phrases: int = Field(default=0, ge=0)
    total_practice_time_ms: int = Field(default=0, ge=0)
    practice_count: int = Field(default=0, ge=0)
    achievements: list[str] = Field(default_factory=list)

    def decrement_phrases(self) -> None:
        """Drop the unlocked-phrase counter by one, never below zero."""
        self.total_phrases = max(0, self.total_phrases - 1)


__all__ = ["Player"]
