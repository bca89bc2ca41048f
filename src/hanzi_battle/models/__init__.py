"""Pydantic V2 data model for the Hanzi Battle engine.

Submodules:
    enums: Enumeration types (CharacterKind, ItemRarity, BattlePhase, ...)
    stats: Derived combat stat formulas
    progression: XP curves, reward formulas and the level-up loop
    character: Roster entries (HanziCharacter, PhraseCharacter)
    phrase: Phrases and synthetic phrase views
    player: Player progression
    items: Item catalog and bag
    definitions: Static character/phrase definitions
    combat: Ephemeral battle models
    game_state: The persisted game state container

Example:
    >>> from hanzi_battle.models import HanziCharacter
    >>> ni = HanziCharacter(glyph="你", pinyin="nǐ", strokes=7, difficulty=1, frequency=95)
    >>> (ni.hp, ni.attack, ni.defense)
    (41, 11, 12)
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from hanzi_battle.models.enums import (
    BattlePhase,
    CaptureKind,
    CharacterKind,
    DataSource,
    ItemRarity,
    ItemType,
)

# =============================================================================
# Stats & Progression
# =============================================================================
from hanzi_battle.models.stats import (
    CombatStats,
    calculate_opponent_stats,
    calculate_stats,
)
from hanzi_battle.models.progression import (
    LevelProgress,
    calculate_phrase_reward,
    calculate_practice_reward,
)

# =============================================================================
# Entities
# =============================================================================
from hanzi_battle.models.character import (
    Character,
    CharacterBase,
    HanziCharacter,
    PhraseCharacter,
    PracticeOutcome,
)
from hanzi_battle.models.phrase import (
    Phrase,
    PhraseCompletion,
    PhraseSource,
    SyntheticPhraseView,
)
from hanzi_battle.models.player import Player
from hanzi_battle.models.definitions import CharacterDefinition, PhraseDefinition

# =============================================================================
# Items
# =============================================================================
from hanzi_battle.models.items import (
    ITEM_CATALOG,
    Bag,
    BagResult,
    ItemDefinition,
    ItemStack,
    ItemUseResult,
    get_item_definition,
)

# =============================================================================
# Battle & State
# =============================================================================
from hanzi_battle.models.combat import (
    AttackResult,
    BattleCombatant,
    BattleOpponent,
    BattleState,
    BattleTurnResult,
    CaptureResult,
    ItemDrop,
    VictoryReward,
)
from hanzi_battle.models.game_state import GameState, RosterLevelStats


__all__ = [
    # Enumerations
    "BattlePhase",
    "CaptureKind",
    "CharacterKind",
    "DataSource",
    "ItemRarity",
    "ItemType",
    # Stats & Progression
    "CombatStats",
    "calculate_stats",
    "calculate_opponent_stats",
    "LevelProgress",
    "calculate_practice_reward",
    "calculate_phrase_reward",
    # Entities
    "Character",
    "CharacterBase",
    "HanziCharacter",
    "PhraseCharacter",
    "PracticeOutcome",
    "Phrase",
    "PhraseCompletion",
    "PhraseSource",
    "SyntheticPhraseView",
    "Player",
    "CharacterDefinition",
    "PhraseDefinition",
    # Items
    "ITEM_CATALOG",
    "Bag",
    "BagResult",
    "ItemDefinition",
    "ItemStack",
    "ItemUseResult",
    "get_item_definition",
    # Battle & State
    "AttackResult",
    "BattleCombatant",
    "BattleOpponent",
    "BattleState",
    "BattleTurnResult",
    "CaptureResult",
    "ItemDrop",
    "VictoryReward",
    "GameState",
    "RosterLevelStats",
]
