"""Entity stat model.

Pure functions mapping an entity's static linguistic attributes and its
current level to derived combat stats. Nothing here is stored: callers
recompute from the current level every time, so a stat can never refer
to a stale level.

Characters:
    HP      = 20 + strokes*3 + (level-1)*5
    Attack  = 10 + (10 - floor(frequency/10)) + (level-1)*2
    Defense = 8 + difficulty*4 + (level-1)*2

Phrases use base HP ``50 + 20*constituents``, base Attack 15, base Defense
12 and a level coefficient of 3.

Wild opponents share the structure but swap the attribute terms:
difficulty drives Attack (5 per point for phrases, 4 for characters) and
the frequency discount ``max(0, 10 - floor(frequency/10))`` drives Defense.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field

from hanzi_battle.core.constants import (
    CHARACTER_BASE_ATTACK,
    CHARACTER_BASE_DEFENSE,
    CHARACTER_BASE_HP,
    CHARACTER_LEVEL_COEFFICIENT,
    DEFENSE_PER_DIFFICULTY,
    FREQUENCY_TERM_CEILING,
    HP_PER_LEVEL,
    HP_PER_STROKE,
    OPPONENT_CHARACTER_ATTACK_PER_DIFFICULTY,
    OPPONENT_PHRASE_ATTACK_PER_DIFFICULTY,
    PHRASE_BASE_ATTACK,
    PHRASE_BASE_DEFENSE,
    PHRASE_BASE_HP,
    PHRASE_HP_PER_CONSTITUENT,
    PHRASE_LEVEL_COEFFICIENT,
)


class CombatStats(BaseModel):
    """Derived HP/Attack/Defense triple."""

    model_config = ConfigDict(frozen=True)

    hp: int = Field(ge=1, description="Maximum hit points")
    attack: int = Field(description="Attack power")
    defense: int = Field(description="Defense power")


def frequency_term(frequency: float) -> int:
    """Attack bonus for rare characters: ``10 - floor(frequency / 10)``."""
    return FREQUENCY_TERM_CEILING - math.floor(frequency / 10)


def level_coefficient(is_phrase: bool) -> int:
    """Attack/Defense gained per level."""
    return PHRASE_LEVEL_COEFFICIENT if is_phrase else CHARACTER_LEVEL_COEFFICIENT


def calculate_stats(
    *,
    level: int,
    strokes: int,
    difficulty: int,
    frequency: float,
    is_phrase: bool = False,
    constituent_count: int = 0,
) -> CombatStats:
    """Compute the combat stats of an owned character or phrase.

    Args:
        level: Current level (>= 1).
        strokes: Stroke count; for a phrase, the sum over its constituents.
        difficulty: Difficulty rating 1-5.
        frequency: Frequency score 0-100.
        is_phrase: Whether the entity is a phrase.
        constituent_count: Number of constituent characters (phrases only).

    Returns:
        The derived CombatStats.
    """
    level_steps = level - 1
    coefficient = level_coefficient(is_phrase)

    if is_phrase:
        base_hp = PHRASE_BASE_HP + PHRASE_HP_PER_CONSTITUENT * constituent_count
        base_attack = PHRASE_BASE_ATTACK
        base_defense = PHRASE_BASE_DEFENSE
    else:
        base_hp = CHARACTER_BASE_HP
        base_attack = CHARACTER_BASE_ATTACK
        base_defense = CHARACTER_BASE_DEFENSE

    return CombatStats(
        hp=base_hp + strokes * HP_PER_STROKE + level_steps * HP_PER_LEVEL,
        attack=base_attack + frequency_term(frequency) + level_steps * coefficient,
        defense=base_defense + difficulty * DEFENSE_PER_DIFFICULTY + level_steps * coefficient,
    )


def calculate_opponent_stats(
    *,
    level: int,
    strokes: int,
    difficulty: int,
    frequency: float,
    is_phrase: bool,
) -> CombatStats:
    """Compute the combat stats of a generated wild opponent.

    Args:
        level: Generated opponent level (>= 1).
        strokes: Stroke count (summed over constituents for phrases).
        difficulty: Difficulty rating.
        frequency: Frequency score.
        is_phrase: Whether the opponent represents a phrase.

    Returns:
        The derived CombatStats.
    """
    level_steps = level - 1
    coefficient = level_coefficient(is_phrase)

    if is_phrase:
        base_hp, base_attack, base_defense = PHRASE_BASE_HP, PHRASE_BASE_ATTACK, PHRASE_BASE_DEFENSE
        attack_per_difficulty = OPPONENT_PHRASE_ATTACK_PER_DIFFICULTY
    else:
        base_hp, base_attack, base_defense = (
            CHARACTER_BASE_HP,
            CHARACTER_BASE_ATTACK,
            CHARACTER_BASE_DEFENSE,
        )
        attack_per_difficulty = OPPONENT_CHARACTER_ATTACK_PER_DIFFICULTY

    return CombatStats(
        hp=base_hp + strokes * HP_PER_STROKE + level_steps * HP_PER_LEVEL,
        attack=base_attack + difficulty * attack_per_difficulty + level_steps * coefficient,
        defense=base_defense + max(0, frequency_term(frequency)) + level_steps * coefficient,
    )


__all__ = [
    "CombatStats",
    "frequency_term",
    "level_coefficient",
    "calculate_stats",
    "calculate_opponent_stats",
]
