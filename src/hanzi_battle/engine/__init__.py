"""Game engine module for Hanzi Battle.

This module provides the rules that act on a ``GameState``: unlock
evaluation, roster edits, practice sessions and phrase sequences,
opponent generation, battle resolution, victory rewards and the
``HanziGame`` facade tying them together.

Submodules:
    dice: Injectable random source
    events: Game event queue for the presentation layer
    unlocks: Phrase unlock and relock evaluation
    roster: Adding, removing and synthesizing roster entries
    practice: Stroke sessions and the phrase-sequence controller
    opponents: Wild opponent generation
    battle: Turn-based battle resolution
    rewards: Capture and item drops
    game: HanziGame facade

Example:
    >>> from hanzi_battle.engine import HanziGame, DiceRoller
    >>>
    >>> game = HanziGame(dice=DiceRoller(seed=42))
    >>> game.start_battle()
    >>> turn = game.attack()
    >>> print(turn.phase)
"""

from __future__ import annotations

# =============================================================================
# Randomness & Events
# =============================================================================
from hanzi_battle.engine.dice import DiceRoller
from hanzi_battle.engine.events import EventQueue, GameEvent, GameEventType

# =============================================================================
# Roster & Unlocks
# =============================================================================
from hanzi_battle.engine.unlocks import (
    refresh_unlocks,
    relock_dependents,
    unlockable_phrases,
)
from hanzi_battle.engine.roster import (
    UNKNOWN_CHARACTER_DEFAULTS,
    RosterResult,
    add_character,
    add_starter_characters,
    available_characters,
    available_phrases,
    create_phrase_character,
    ensure_phrases,
    rebuild_phrases,
    remove_character,
)

# =============================================================================
# Practice
# =============================================================================
from hanzi_battle.engine.practice import (
    CompletionSummary,
    Idle,
    InSequence,
    MistakeRecord,
    PhraseProgress,
    PhraseSequenceResult,
    PracticeCompletion,
    PracticeController,
    PracticeStartResult,
    StrokeRecord,
    StrokeSession,
)

# =============================================================================
# Battle
# =============================================================================
from hanzi_battle.engine.opponents import (
    OpponentCandidate,
    OpponentGenerator,
    selection_weight,
    stroke_modifier,
)
from hanzi_battle.engine.rewards import (
    RewardRoller,
    item_for_roll,
    rarity_roll_bonus,
)
from hanzi_battle.engine.battle import (
    BattleSession,
    calculate_damage,
    combatant_from_character,
)

# =============================================================================
# Facade
# =============================================================================
from hanzi_battle.engine.game import (
    DataSourceResult,
    GameStats,
    HanziGame,
    ImportResult,
    SaveResult,
)


__all__ = [
    # Randomness & Events
    "DiceRoller",
    "EventQueue",
    "GameEvent",
    "GameEventType",
    # Roster & Unlocks
    "refresh_unlocks",
    "relock_dependents",
    "unlockable_phrases",
    "UNKNOWN_CHARACTER_DEFAULTS",
    "RosterResult",
    "add_character",
    "add_starter_characters",
    "available_characters",
    "available_phrases",
    "create_phrase_character",
    "ensure_phrases",
    "rebuild_phrases",
    "remove_character",
    # Practice
    "CompletionSummary",
    "Idle",
    "InSequence",
    "MistakeRecord",
    "PhraseProgress",
    "PhraseSequenceResult",
    "PracticeCompletion",
    "PracticeController",
    "PracticeStartResult",
    "StrokeRecord",
    "StrokeSession",
    # Battle
    "OpponentCandidate",
    "OpponentGenerator",
    "selection_weight",
    "stroke_modifier",
    "RewardRoller",
    "item_for_roll",
    "rarity_roll_bonus",
    "BattleSession",
    "calculate_damage",
    "combatant_from_character",
    # Facade
    "DataSourceResult",
    "GameStats",
    "HanziGame",
    "ImportResult",
    "SaveResult",
]
