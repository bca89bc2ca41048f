"""Hanzi Battle - hanzi practice progression and battle engine.

Practicing Chinese characters earns XP, leveling characters unlocks
phrases, and the roster fights procedurally leveled wild opponents.

ARCHITECTURE:
- One explicit GameState holds everything that is saved
- Engine functions take the state as an argument and mutate it in place
- All randomness flows through an injectable DiceRoller
- Presentation code reads result models and drains the event queue

Example:
    >>> from hanzi_battle import HanziGame
    >>>
    >>> game = HanziGame()
    >>> game.start_practice("你").success
    True
    >>> completion = game.complete_practice()
    >>> completion.outcome.xp_gained
    60

Modules:
    core: Configuration, logging, constants and exceptions.
    models: Pydantic V2 data model (characters, phrases, bag, battle).
    data: Built-in catalog and custom data import.
    engine: Practice, unlocks, opponents, battles and the game facade.
    storage: Save codec and SQLite save slots.
"""

from __future__ import annotations

# Core
from hanzi_battle.core.config import Settings, get_settings
from hanzi_battle.core.exceptions import HanziBattleError
from hanzi_battle.core.logging import configure_logging, get_logger

# Data model
from hanzi_battle.models import (
    Bag,
    Character,
    GameState,
    HanziCharacter,
    Phrase,
    PhraseCharacter,
    Player,
)

# Catalog
from hanzi_battle.data import DataCatalog, ImportMode

# Engine
from hanzi_battle.engine import (
    DiceRoller,
    GameEvent,
    GameEventType,
    HanziGame,
)


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "HanziBattleError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Data model
    "Bag",
    "Character",
    "GameState",
    "HanziCharacter",
    "Phrase",
    "PhraseCharacter",
    "Player",
    # Catalog
    "DataCatalog",
    "ImportMode",
    # Engine
    "DiceRoller",
    "GameEvent",
    "GameEventType",
    "HanziGame",
]
