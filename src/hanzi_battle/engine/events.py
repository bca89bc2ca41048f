"""Game event queue.

Engine components append ``GameEvent`` records as things happen; the
presentation layer drains them when convenient. Nothing in the engine
calls back into the presentation layer.
"""

from __future__ import annotations

from collections import deque
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GameEventType(StrEnum):
    """Kinds of events the engine emits."""

    CHARACTER_ADDED = "character_added"
    CHARACTER_REMOVED = "character_removed"
    PRACTICE_COMPLETED = "practice_completed"
    LEVEL_UP = "level_up"
    PLAYER_LEVEL_UP = "player_level_up"
    PHRASE_UNLOCKED = "phrase_unlocked"
    PHRASE_RELOCKED = "phrase_relocked"
    PHRASE_COMPLETED = "phrase_completed"
    PHRASE_CHARACTER_CREATED = "phrase_character_created"
    ITEM_USED = "item_used"
    ITEM_DROPPED = "item_dropped"
    ITEM_LOST = "item_lost"
    BATTLE_STARTED = "battle_started"
    BATTLE_SWITCHED = "battle_switched"
    BATTLE_WON = "battle_won"
    BATTLE_LOST = "battle_lost"
    BATTLE_FLED = "battle_fled"
    OPPONENT_CAPTURED = "opponent_captured"
    DATA_SOURCE_CHANGED = "data_source_changed"


class GameEvent(BaseModel):
    """A single engine event."""

    model_config = ConfigDict(frozen=True)

    type: GameEventType
    key: str | None = Field(default=None, description="Character, phrase or item involved")
    data: dict[str, Any] = Field(default_factory=dict)


class EventQueue:
    """FIFO of pending game events."""

    def __init__(self) -> None:
        self._events: deque[GameEvent] = deque()

    def emit(self, event_type: GameEventType, key: str | None = None, **data: Any) -> GameEvent:
        event = GameEvent(type=event_type, key=key, data=data)
        self._events.append(event)
        return event

    def drain(self) -> list[GameEvent]:
        """Return and clear every pending event, oldest first."""
        events = list(self._events)
        self._events.clear()
        return events

    def __len__(self) -> int:
        return len(self._events)


__all__ = [
    "GameEventType",
    "GameEvent",
    "EventQueue",
]
