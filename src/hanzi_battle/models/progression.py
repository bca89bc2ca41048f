"""Progression ledger.

XP thresholds, reward formulas and the shared level-up loop used by
characters, phrases and the player. Each entity kind has its own linear
curve ``threshold(level) = level * XP_PER_LEVEL``.
"""

from __future__ import annotations

import math
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from hanzi_battle.core.constants import (
    CHARACTER_XP_PER_LEVEL,
    PHRASE_BASE_XP,
    PHRASE_FIRST_COMPLETION_XP,
    PHRASE_XP_PER_CONSTITUENT,
    PRACTICE_ACCURACY_XP,
    PRACTICE_BASE_XP,
    PRACTICE_MIN_XP,
    PRACTICE_MISTAKE_PENALTY_XP,
    PRACTICE_SPEED_BONUS_XP,
    PRACTICE_SPEED_THRESHOLD_MS,
)


# =============================================================================
# Reward Formulas
# =============================================================================


def calculate_practice_reward(
    accuracy: float,
    mistake_count: int,
    completion_time_ms: int,
) -> int:
    """XP granted to a character for one completed practice.

    Args:
        accuracy: Session accuracy as a fraction in [0, 1].
        mistake_count: Mistakes made during the session.
        completion_time_ms: Wall-clock time to finish the character.

    Returns:
        ``max(5, 20 + floor(accuracy*30) + speed_bonus - mistakes*2)``.
    """
    speed_bonus = PRACTICE_SPEED_BONUS_XP if completion_time_ms < PRACTICE_SPEED_THRESHOLD_MS else 0
    reward = (
        PRACTICE_BASE_XP
        + math.floor(accuracy * PRACTICE_ACCURACY_XP)
        + speed_bonus
        - mistake_count * PRACTICE_MISTAKE_PENALTY_XP
    )
    return max(PRACTICE_MIN_XP, reward)


def calculate_phrase_reward(constituent_count: int, *, first_completion: bool) -> int:
    """Flat bonus for finishing a full phrase sequence."""
    bonus = PHRASE_BASE_XP + PHRASE_XP_PER_CONSTITUENT * constituent_count
    if first_completion:
        bonus += PHRASE_FIRST_COMPLETION_XP
    return bonus


# =============================================================================
# Level Ledger
# =============================================================================


class LevelProgress(BaseModel):
    """Level and in-level XP with the shared multi-level-up loop.

    Subclasses set ``XP_PER_LEVEL`` to pick their curve.

    Attributes:
        level: Current level (>= 1).
        xp: XP accumulated toward the next level.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
    )

    XP_PER_LEVEL: ClassVar[int] = CHARACTER_XP_PER_LEVEL

    level: int = Field(default=1, ge=1, description="Current level")
    xp: int = Field(default=0, ge=0, description="XP toward next level")

    @classmethod
    def threshold(cls, level: int) -> int:
        """XP required to advance from ``level`` to ``level + 1``."""
        return level * cls.XP_PER_LEVEL

    def xp_for_next_level(self) -> int:
        """XP required to leave the current level."""
        return self.threshold(self.level)

    def xp_progress(self) -> tuple[int, int]:
        """Get (current_xp_in_level, xp_needed_for_level) for progress display."""
        return (self.xp, self.xp_for_next_level())

    def add_xp(self, amount: int) -> bool:
        """Add XP and apply every level-up it pays for.

        A single large reward may cross several thresholds; the loop
        consumes one threshold per level gained and keeps the remainder.

        Args:
            amount: Non-negative XP to add.

        Returns:
            True if at least one level-up occurred.
        """
        if amount < 0:
            raise ValueError(f"XP amount must be non-negative, got {amount}")

        xp = self.xp + amount
        level = self.level
        leveled_up = False
        while xp >= self.threshold(level):
            xp -= self.threshold(level)
            level += 1
            leveled_up = True

        self.level = level
        self.xp = xp
        return leveled_up


__all__ = [
    "calculate_practice_reward",
    "calculate_phrase_reward",
    "LevelProgress",
]
