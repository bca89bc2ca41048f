"""Character and phrase catalog.

Holds the built-in definition set, any imported custom set, and which of
the two is active. Roster additions look up definitions here and the
phrase map is rebuilt from the active phrases whenever the source or the
custom data changes.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from hanzi_battle.core.exceptions import InvalidGameStateError, ValidationError
from hanzi_battle.core.logging import get_logger
from hanzi_battle.data.importer import (
    ImportMode,
    parse_payload,
    validate_characters,
    validate_combined,
    validate_phrases,
)
from hanzi_battle.models.definitions import CharacterDefinition, PhraseDefinition
from hanzi_battle.models.enums import DataSource


logger = get_logger(__name__)

CUSTOM_DATA_EXPORT_VERSION = "1.0"


# =============================================================================
# Built-in Data
# =============================================================================

_BUILT_IN_CHARACTERS: dict[str, dict[str, Any]] = {
    "你": {"pinyin": "nǐ", "strokes": 7, "difficulty": 1, "frequency": 95},
    "好": {"pinyin": "hǎo", "strokes": 6, "difficulty": 1, "frequency": 88},
    "我": {"pinyin": "wǒ", "strokes": 7, "difficulty": 1, "frequency": 98},
    "是": {"pinyin": "shì", "strokes": 9, "difficulty": 2, "frequency": 97},
    "的": {"pinyin": "de", "strokes": 8, "difficulty": 2, "frequency": 100},
    "一": {"pinyin": "yī", "strokes": 1, "difficulty": 1, "frequency": 99},
    "不": {"pinyin": "bù", "strokes": 4, "difficulty": 1, "frequency": 92},
    "在": {"pinyin": "zài", "strokes": 6, "difficulty": 2, "frequency": 85},
    "了": {"pinyin": "le", "strokes": 2, "difficulty": 1, "frequency": 96},
    "有": {"pinyin": "yǒu", "strokes": 6, "difficulty": 2, "frequency": 89},
    "戴": {"pinyin": "dài", "strokes": 17, "difficulty": 4, "frequency": 80},
    "吃": {"pinyin": "chī", "strokes": 6, "difficulty": 1, "frequency": 85},
    "喝": {"pinyin": "hē", "strokes": 12, "difficulty": 2, "frequency": 85},
    "夠": {"pinyin": "gòu", "strokes": 11, "difficulty": 4, "frequency": 80},
    "麵": {"pinyin": "miàn", "strokes": 20, "difficulty": 4, "frequency": 80},
    "飯": {"pinyin": "fàn", "strokes": 13, "difficulty": 2, "frequency": 87},
    "菜": {"pinyin": "cài", "strokes": 12, "difficulty": 2, "frequency": 86},
    "果": {"pinyin": "guǒ", "strokes": 8, "difficulty": 2, "frequency": 83},
    "汁": {"pinyin": "zhī", "strokes": 6, "difficulty": 1, "frequency": 83},
    "奶": {"pinyin": "nǎi", "strokes": 5, "difficulty": 1, "frequency": 83},
    "包": {"pinyin": "bāo", "strokes": 5, "difficulty": 1, "frequency": 89},
    "湯": {"pinyin": "tāng", "strokes": 13, "difficulty": 2, "frequency": 82},
    "茶": {"pinyin": "chá", "strokes": 10, "difficulty": 2, "frequency": 84},
}

_BUILT_IN_PHRASES: dict[str, dict[str, Any]] = {
    "你好": {
        "characters": ["你", "好"],
        "requirements": {"你": 3, "好": 3},
        "difficulty": 1,
        "frequency": 95,
        "pinyin": "nǐ hǎo",
        "meaning": "hello",
    },
    "我是": {
        "characters": ["我", "是"],
        "requirements": {"我": 5, "是": 6},
        "difficulty": 2,
        "frequency": 80,
        "pinyin": "wǒ shì",
        "meaning": "I am",
    },
    "好的": {
        "characters": ["好", "的"],
        "requirements": {"好": 4, "的": 5},
        "difficulty": 2,
        "frequency": 75,
        "pinyin": "hǎo de",
        "meaning": "okay/good",
    },
    "不好": {
        "characters": ["不", "好"],
        "requirements": {"不": 3, "好": 4},
        "difficulty": 2,
        "frequency": 70,
        "pinyin": "bù hǎo",
        "meaning": "not good",
    },
    "一个": {
        "characters": ["一", "个"],
        "requirements": {"一": 2, "个": 4},
        "difficulty": 2,
        "frequency": 85,
        "pinyin": "yī gè",
        "meaning": "one (measure word)",
    },
    "麵包": {
        "characters": ["麵", "包"],
        "requirements": {"麵": 2, "包": 3},
        "difficulty": 3,
        "frequency": 82,
        "pinyin": "miàn bāo",
        "meaning": "bread",
    },
}

DEFAULT_CHARACTERS: dict[str, CharacterDefinition] = validate_characters(_BUILT_IN_CHARACTERS)
DEFAULT_PHRASES: dict[str, PhraseDefinition] = validate_phrases(_BUILT_IN_PHRASES)


# =============================================================================
# Catalog
# =============================================================================


class DataCatalog:
    """Built-in and custom definitions plus the active data source.

    Each category falls back to the built-in set independently: with the
    custom source active but only custom phrases imported, characters
    still come from the built-in set.

    Example:
        >>> catalog = DataCatalog()
        >>> catalog.get_character_definition("你").strokes
        7
    """

    def __init__(
        self,
        *,
        custom_characters: Mapping[str, CharacterDefinition] | None = None,
        custom_phrases: Mapping[str, PhraseDefinition] | None = None,
        data_source: DataSource | str = DataSource.BUILT_IN,
    ) -> None:
        self._custom_characters: dict[str, CharacterDefinition] = dict(custom_characters or {})
        self._custom_phrases: dict[str, PhraseDefinition] = dict(custom_phrases or {})
        self._data_source = DataSource(data_source)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    @property
    def data_source(self) -> DataSource:
        return self._data_source

    @property
    def custom_characters(self) -> dict[str, CharacterDefinition]:
        return dict(self._custom_characters)

    @property
    def custom_phrases(self) -> dict[str, PhraseDefinition]:
        return dict(self._custom_phrases)

    def has_custom_data(self) -> bool:
        return bool(self._custom_characters or self._custom_phrases)

    def active_characters(self) -> Mapping[str, CharacterDefinition]:
        if self._data_source == DataSource.CUSTOM and self._custom_characters:
            return self._custom_characters
        return DEFAULT_CHARACTERS

    def active_phrases(self) -> Mapping[str, PhraseDefinition]:
        if self._data_source == DataSource.CUSTOM and self._custom_phrases:
            return self._custom_phrases
        return DEFAULT_PHRASES

    def get_character_definition(self, glyph: str) -> CharacterDefinition | None:
        return self.active_characters().get(glyph)

    def get_phrase_definition(self, text: str) -> PhraseDefinition | None:
        return self.active_phrases().get(text)

    # -------------------------------------------------------------------------
    # Import
    # -------------------------------------------------------------------------

    def import_data(
        self,
        payload: str | bytes | Mapping[str, Any],
        mode: ImportMode | str = ImportMode.COMBINED,
    ) -> tuple[int, int]:
        """Validate and store custom definitions.

        Nothing is stored unless the whole payload validates.

        Args:
            payload: JSON text or decoded mapping.
            mode: Which shape the payload has.

        Returns:
            Tuple of (characters imported, phrases imported).

        Raises:
            DataImportError: If the payload is malformed or any entry is invalid.
        """
        data = parse_payload(payload)
        mode = ImportMode(mode)

        characters: dict[str, CharacterDefinition] | None = None
        phrases: dict[str, PhraseDefinition] | None = None
        if mode == ImportMode.CHARACTERS:
            characters = validate_characters(data)
        elif mode == ImportMode.PHRASES:
            phrases = validate_phrases(data)
        else:
            characters, phrases = validate_combined(data)

        if characters is not None:
            self._custom_characters = characters
        if phrases is not None:
            self._custom_phrases = phrases

        character_count = len(characters or {})
        phrase_count = len(phrases or {})
        logger.info(
            "Custom data imported",
            mode=str(mode),
            characters=character_count,
            phrases=phrase_count,
        )
        return character_count, phrase_count

    # -------------------------------------------------------------------------
    # Source management
    # -------------------------------------------------------------------------

    def set_data_source(self, source: DataSource | str) -> None:
        """Switch between the built-in and custom definition sets.

        Raises:
            ValidationError: If ``source`` is not a known data source.
            InvalidGameStateError: If switching to custom with nothing imported.
        """
        try:
            source = DataSource(source)
        except ValueError as exc:
            raise ValidationError(
                'Data source must be "built-in" or "custom"',
                field_name="data_source",
                invalid_value=source,
            ) from exc

        if source == DataSource.CUSTOM and not self.has_custom_data():
            raise InvalidGameStateError(
                "No custom data available. Import data first.",
                current_state=str(self._data_source),
            )

        self._data_source = source
        logger.info("Data source switched", data_source=str(source))

    def clear_custom_data(self) -> None:
        """Drop all custom definitions and fall back to the built-in set."""
        self._custom_characters = {}
        self._custom_phrases = {}
        self._data_source = DataSource.BUILT_IN
        logger.info("Custom data cleared")

    # -------------------------------------------------------------------------
    # Export & persistence
    # -------------------------------------------------------------------------

    def export_custom_data(self) -> dict[str, Any]:
        """Custom definitions in import-compatible form plus export metadata."""
        return {
            "characters": {k: v.model_dump() for k, v in self._custom_characters.items()},
            "phrases": {k: v.model_dump() for k, v in self._custom_phrases.items()},
            "metadata": {
                "export_date": datetime.now(UTC).isoformat(),
                "version": CUSTOM_DATA_EXPORT_VERSION,
                "description": "Custom Hanzi Battle data export",
            },
        }

    def stats(self) -> dict[str, Any]:
        return {
            "built_in_characters": len(DEFAULT_CHARACTERS),
            "built_in_phrases": len(DEFAULT_PHRASES),
            "custom_characters": len(self._custom_characters),
            "custom_phrases": len(self._custom_phrases),
            "current_source": str(self._data_source),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "data_source": str(self._data_source),
            "characters": {k: v.model_dump() for k, v in self._custom_characters.items()},
            "phrases": {k: v.model_dump() for k, v in self._custom_phrases.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DataCatalog:
        """Rebuild a catalog saved with ``to_dict``.

        Raises:
            DataImportError: If the saved definitions no longer validate.
        """
        characters = validate_characters(data.get("characters") or {})
        phrases = validate_phrases(data.get("phrases") or {})
        source = DataSource(data.get("data_source", DataSource.BUILT_IN))
        if source == DataSource.CUSTOM and not (characters or phrases):
            source = DataSource.BUILT_IN
        return cls(custom_characters=characters, custom_phrases=phrases, data_source=source)


__all__ = [
    "DEFAULT_CHARACTERS",
    "DEFAULT_PHRASES",
    "DataCatalog",
]
