"""Rule constants for the Hanzi Battle engine.

Balancing numbers shared by the stat model, the progression ledger, the
opponent generator and the reward roller live here so that every formula
reads from one place.
"""

from __future__ import annotations

# =============================================================================
# Entity Stat Model
# =============================================================================

CHARACTER_BASE_HP = 20
"""Base HP of a single character before stroke and level bonuses."""

PHRASE_BASE_HP = 50
"""Base HP of a phrase before constituent, stroke and level bonuses."""

PHRASE_HP_PER_CONSTITUENT = 20
"""Extra base HP a phrase gains for each constituent character."""

HP_PER_STROKE = 3
HP_PER_LEVEL = 5

CHARACTER_BASE_ATTACK = 10
PHRASE_BASE_ATTACK = 15

CHARACTER_BASE_DEFENSE = 8
PHRASE_BASE_DEFENSE = 12

CHARACTER_LEVEL_COEFFICIENT = 2
"""Attack/Defense gained per level by a single character."""

PHRASE_LEVEL_COEFFICIENT = 3
"""Attack/Defense gained per level by a phrase."""

DEFENSE_PER_DIFFICULTY = 4

FREQUENCY_TERM_CEILING = 10
"""Rarer characters hit harder: ``10 - floor(frequency / 10)``."""

OPPONENT_PHRASE_ATTACK_PER_DIFFICULTY = 5
OPPONENT_CHARACTER_ATTACK_PER_DIFFICULTY = 4

# =============================================================================
# Progression Ledger
# =============================================================================

CHARACTER_XP_PER_LEVEL = 100
PHRASE_XP_PER_LEVEL = 150
PLAYER_XP_PER_LEVEL = 200

PRACTICE_BASE_XP = 20
PRACTICE_ACCURACY_XP = 30
PRACTICE_SPEED_BONUS_XP = 10
PRACTICE_SPEED_THRESHOLD_MS = 30_000
PRACTICE_MISTAKE_PENALTY_XP = 2
PRACTICE_MIN_XP = 5

PHRASE_BASE_XP = 25
PHRASE_XP_PER_CONSTITUENT = 5
PHRASE_FIRST_COMPLETION_XP = 50

MISSING_CONSTITUENT_STROKES = 5
"""Stroke count assumed for a phrase constituent with no known definition."""

UNKNOWN_PHRASE_STROKES = 10
"""Stroke count assumed for a phrase candidate with no constituent data at all."""

# =============================================================================
# Opponent Generator
# =============================================================================

EARLY_GAME_MAX_AVERAGE_LEVEL = 3
"""Roster average level at or below which the early-game rules apply."""

MAX_LEVEL_SPREAD = 3

MYSTERY_CHARACTERS = ("龙", "凤", "麒", "麟", "神", "魔", "仙", "妖")
"""Fallback opponents used when every defined entity is already owned."""

MYSTERY_STROKES = (15, 25)
MYSTERY_DIFFICULTY = (4, 5)
MYSTERY_FREQUENCY = (20, 50)

# =============================================================================
# Battle Resolver & Rewards
# =============================================================================

MIN_DAMAGE = 1
DAMAGE_VARIANCE = 2
"""Damage is adjusted by a uniform integer in ``[-2, +2]``."""

DEFAULT_ITEM_DROP_CHANCE = 0.25
RARITY_LEVEL_BONUS_PER_LEVEL = 0.05
RARITY_LEVEL_BONUS_CAP = 0.3
RARITY_DIFFICULTY_BONUS = 0.05
RARE_DROP_THRESHOLD = 0.15
UNCOMMON_DROP_THRESHOLD = 0.45

DEFAULT_BAG_CAPACITY = 50


__all__ = [
    "CHARACTER_BASE_HP",
    "PHRASE_BASE_HP",
    "PHRASE_HP_PER_CONSTITUENT",
    "HP_PER_STROKE",
    "HP_PER_LEVEL",
    "CHARACTER_BASE_ATTACK",
    "PHRASE_BASE_ATTACK",
    "CHARACTER_BASE_DEFENSE",
    "PHRASE_BASE_DEFENSE",
    "CHARACTER_LEVEL_COEFFICIENT",
    "PHRASE_LEVEL_COEFFICIENT",
    "DEFENSE_PER_DIFFICULTY",
    "FREQUENCY_TERM_CEILING",
    "OPPONENT_PHRASE_ATTACK_PER_DIFFICULTY",
    "OPPONENT_CHARACTER_ATTACK_PER_DIFFICULTY",
    "CHARACTER_XP_PER_LEVEL",
    "PHRASE_XP_PER_LEVEL",
    "PLAYER_XP_PER_LEVEL",
    "PRACTICE_BASE_XP",
    "PRACTICE_ACCURACY_XP",
    "PRACTICE_SPEED_BONUS_XP",
    "PRACTICE_SPEED_THRESHOLD_MS",
    "PRACTICE_MISTAKE_PENALTY_XP",
    "PRACTICE_MIN_XP",
    "PHRASE_BASE_XP",
    "PHRASE_XP_PER_CONSTITUENT",
    "PHRASE_FIRST_COMPLETION_XP",
    "MISSING_CONSTITUENT_STROKES",
    "UNKNOWN_PHRASE_STROKES",
    "EARLY_GAME_MAX_AVERAGE_LEVEL",
    "MAX_LEVEL_SPREAD",
    "MYSTERY_CHARACTERS",
    "MYSTERY_STROKES",
    "MYSTERY_DIFFICULTY",
    "MYSTERY_FREQUENCY",
    "MIN_DAMAGE",
    "DAMAGE_VARIANCE",
    "DEFAULT_ITEM_DROP_CHANCE",
    "RARITY_LEVEL_BONUS_PER_LEVEL",
    "RARITY_LEVEL_BONUS_CAP",
    "RARITY_DIFFICULTY_BONUS",
    "RARE_DROP_THRESHOLD",
    "UNCOMMON_DROP_THRESHOLD",
    "DEFAULT_BAG_CAPACITY",
]
