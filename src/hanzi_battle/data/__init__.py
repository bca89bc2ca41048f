"""Character/phrase catalog and custom data import."""

from hanzi_battle.data.catalog import DEFAULT_CHARACTERS, DEFAULT_PHRASES, DataCatalog
from hanzi_battle.data.importer import (
    ImportMode,
    ImportViolation,
    parse_payload,
    validate_characters,
    validate_combined,
    validate_phrases,
)

__all__ = [
    "DEFAULT_CHARACTERS",
    "DEFAULT_PHRASES",
    "DataCatalog",
    "ImportMode",
    "ImportViolation",
    "parse_payload",
    "validate_characters",
    "validate_combined",
    "validate_phrases",
]
