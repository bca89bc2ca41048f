"""Save-game codec.

Converts a ``GameState`` (and the catalog it was played with) to and from
a single JSON-compatible mapping:

    {
        "version": 1,
        "player": {...},
        "characters": {"你": {...}, ...},
        "phrases": {"你好": {...}, ...},
        "bag": {"max_slots": 50, "items": {...}},
        "catalog": {"data_source": "built-in", "characters": {...}, "phrases": {...}}
    }

Combat stats are derived properties and never written. Loading is
tolerant: a missing or unreadable section falls back to the matching
section of a freshly created game, and a single unreadable roster or
phrase entry is skipped with a warning.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from hanzi_battle.core.exceptions import DataImportError
from hanzi_battle.core.logging import get_logger
from hanzi_battle.data.catalog import DataCatalog
from hanzi_battle.models.character import Character
from hanzi_battle.models.game_state import GameState
from hanzi_battle.models.items import Bag
from hanzi_battle.models.phrase import Phrase
from hanzi_battle.models.player import Player


logger = get_logger(__name__)

SAVE_FORMAT_VERSION = 1

_character_adapter: TypeAdapter[Character] = TypeAdapter(Character)


# =============================================================================
# Serialization
# =============================================================================


def serialize(state: GameState, catalog: DataCatalog | None = None) -> dict[str, Any]:
    """Dump the game state to a JSON-compatible mapping."""
    data: dict[str, Any] = {"version": SAVE_FORMAT_VERSION}
    data.update(state.model_dump(mode="json"))
    if catalog is not None:
        data["catalog"] = catalog.to_dict()
    return data


def export_state(state: GameState, catalog: DataCatalog | None = None) -> dict[str, Any]:
    """Serialized state stamped with an export timestamp, for backups."""
    data = serialize(state, catalog)
    data["export_date"] = datetime.now(UTC).isoformat()
    return data


def dumps(state: GameState, catalog: DataCatalog | None = None) -> str:
    return json.dumps(serialize(state, catalog), ensure_ascii=False)


# =============================================================================
# Deserialization
# =============================================================================


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        logger.warning("Save section is not an object", section=key, type=type(value).__name__)
        return None
    return value


def _load_characters(section: Mapping[str, Any]) -> dict[str, Character]:
    characters: dict[str, Character] = {}
    for key, raw in section.items():
        if not isinstance(raw, Mapping):
            logger.warning("Skipping unreadable roster entry", key=key)
            continue
        entry = dict(raw)
        entry.setdefault("glyph", key)
        try:
            characters[key] = _character_adapter.validate_python(entry)
        except PydanticValidationError as exc:
            logger.warning("Skipping invalid roster entry", key=key, errors=exc.error_count())
    return characters


def _load_phrases(section: Mapping[str, Any]) -> dict[str, Phrase]:
    phrases: dict[str, Phrase] = {}
    for text, raw in section.items():
        if not isinstance(raw, Mapping):
            logger.warning("Skipping unreadable phrase entry", text=text)
            continue
        entry = dict(raw)
        entry.setdefault("text", text)
        try:
            phrases[text] = Phrase.model_validate(entry)
        except PydanticValidationError as exc:
            logger.warning("Skipping invalid phrase entry", text=text, errors=exc.error_count())
    return phrases


def decode_catalog(data: Mapping[str, Any]) -> DataCatalog:
    """The catalog a save was played with; built-in when absent or unreadable."""
    if not isinstance(data, Mapping):
        return DataCatalog()
    catalog_section = _section(data, "catalog")
    if catalog_section is None:
        return DataCatalog()
    try:
        return DataCatalog.from_dict(catalog_section)
    except (DataImportError, ValueError) as exc:
        logger.warning("Invalid catalog section, using built-in data", error=str(exc))
        return DataCatalog()


def deserialize(
    data: Mapping[str, Any],
    defaults: GameState | None = None,
    catalog: DataCatalog | None = None,
) -> tuple[GameState, DataCatalog]:
    """Rebuild a game state from a saved mapping.

    Args:
        data: Mapping produced by ``serialize``. Anything else is treated
            as an empty save.
        defaults: Fresh game whose sections stand in for missing ones.
            Defaults to an empty ``GameState``.
        catalog: Catalog already decoded with ``decode_catalog``. Decoded
            from ``data`` when omitted.

    Returns:
        Tuple of (game state, catalog). The catalog is built-in only when
        the save carries no readable catalog section.
    """
    if not isinstance(data, Mapping):
        logger.warning("Save is not a JSON object, using defaults", type=type(data).__name__)
        data = {}
    fresh = defaults if defaults is not None else GameState()

    player = fresh.player
    player_section = _section(data, "player")
    if player_section is not None:
        try:
            player = Player.model_validate(player_section)
        except PydanticValidationError as exc:
            logger.warning("Invalid player section, using defaults", errors=exc.error_count())
    else:
        logger.warning("Save has no player section, using defaults")

    characters_section = _section(data, "characters")
    characters = _load_characters(characters_section) if characters_section is not None else fresh.characters

    phrases_section = _section(data, "phrases")
    phrases = _load_phrases(phrases_section) if phrases_section is not None else fresh.phrases

    bag = fresh.bag
    bag_section = _section(data, "bag")
    if bag_section is not None:
        try:
            bag = Bag.model_validate(bag_section)
        except PydanticValidationError as exc:
            logger.warning("Invalid bag section, using defaults", errors=exc.error_count())

    if catalog is None:
        catalog = decode_catalog(data)

    state = GameState(player=player, characters=characters, phrases=phrases, bag=bag)
    logger.info(
        "Save decoded",
        version=data.get("version"),
        characters=len(state.characters),
        phrases=len(state.phrases),
        items=state.bag.total_count,
    )
    return state, catalog


def loads(text: str | bytes, defaults: GameState | None = None) -> tuple[GameState, DataCatalog]:
    """Decode a JSON save; unparseable text is logged and yields the defaults."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Save is not valid JSON, using defaults", error=str(exc))
        data = {}
    return deserialize(data, defaults)


__all__ = [
    "SAVE_FORMAT_VERSION",
    "serialize",
    "export_state",
    "dumps",
    "decode_catalog",
    "deserialize",
    "loads",
]
