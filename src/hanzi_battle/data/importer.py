"""Custom data import validation.

Turns raw JSON (text, bytes or already-parsed mappings) into validated
definition maps. Validation is all-or-nothing: every problem in the
payload is collected into an itemized list of ``ImportViolation`` and the
whole import is rejected with ``DataImportError`` if the list is not
empty.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import StrEnum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from hanzi_battle.core.exceptions import DataImportError
from hanzi_battle.core.logging import get_logger
from hanzi_battle.models.definitions import CharacterDefinition, PhraseDefinition


logger = get_logger(__name__)

DefinitionT = TypeVar("DefinitionT", CharacterDefinition, PhraseDefinition)


class ImportMode(StrEnum):
    """Shape of an import payload."""

    CHARACTERS = "characters"
    PHRASES = "phrases"
    COMBINED = "combined"


class ImportViolation(BaseModel):
    """One problem found in an import payload.

    Attributes:
        section: ``characters``, ``phrases`` or ``payload`` for whole-file problems.
        key: Glyph or phrase text the problem belongs to.
        field: Offending field path within the entry.
        message: Human-readable description.
    """

    model_config = ConfigDict(frozen=True)

    section: str
    key: str | None = None
    field: str | None = None
    message: str

    def __str__(self) -> str:
        where = self.section
        if self.key is not None:
            where += f"[{self.key}]"
        if self.field:
            where += f".{self.field}"
        return f"{where}: {self.message}"


# =============================================================================
# Parsing
# =============================================================================


def parse_payload(payload: str | bytes | Mapping[str, Any]) -> Mapping[str, Any]:
    """Decode an import payload into a mapping.

    Args:
        payload: JSON text, UTF-8 bytes, or an already-decoded mapping.

    Returns:
        The decoded top-level mapping.

    Raises:
        DataImportError: If the text is not JSON or not a JSON object.
    """
    if isinstance(payload, bytes):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DataImportError(
                "Import payload is not valid UTF-8",
                violations=[ImportViolation(section="payload", message=str(exc))],
            ) from exc

    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise DataImportError(
                "Invalid JSON format",
                violations=[ImportViolation(section="payload", message=f"Invalid JSON format: {exc.msg}")],
            ) from exc

    if not isinstance(payload, Mapping):
        raise DataImportError(
            "Import payload must be an object",
            violations=[ImportViolation(section="payload", message="Data must be an object")],
        )
    return payload


# =============================================================================
# Validation
# =============================================================================


def _collect(
    section: str,
    data: Any,
    model: type[DefinitionT],
) -> tuple[dict[str, DefinitionT], list[ImportViolation]]:
    """Validate every entry of one section, gathering all violations."""
    if not isinstance(data, Mapping):
        return {}, [ImportViolation(section=section, message="Data must be an object")]

    parsed: dict[str, DefinitionT] = {}
    violations: list[ImportViolation] = []

    for key, entry in data.items():
        if not isinstance(key, str) or not key:
            violations.append(ImportViolation(section=section, key=str(key), message="Invalid key"))
            continue
        if not isinstance(entry, Mapping):
            violations.append(ImportViolation(section=section, key=key, message="Entry must be an object"))
            continue

        try:
            parsed[key] = model.model_validate(entry)
        except PydanticValidationError as exc:
            for error in exc.errors():
                field = ".".join(str(part) for part in error["loc"]) or None
                violations.append(
                    ImportViolation(section=section, key=key, field=field, message=error["msg"])
                )

    return parsed, violations


def _reject(message: str, violations: list[ImportViolation]) -> DataImportError:
    logger.warning("Import rejected", reason=message, violation_count=len(violations))
    return DataImportError(message, violations=violations)


def validate_characters(data: Any) -> dict[str, CharacterDefinition]:
    """Validate a glyph -> character definition map.

    Raises:
        DataImportError: With every violation found.
    """
    parsed, violations = _collect("characters", data, CharacterDefinition)
    if violations:
        raise _reject("Character data failed validation", violations)
    return parsed


def validate_phrases(data: Any) -> dict[str, PhraseDefinition]:
    """Validate a phrase text -> phrase definition map.

    Raises:
        DataImportError: With every violation found.
    """
    parsed, violations = _collect("phrases", data, PhraseDefinition)
    if violations:
        raise _reject("Phrase data failed validation", violations)
    return parsed


def validate_combined(
    data: Mapping[str, Any],
) -> tuple[dict[str, CharacterDefinition] | None, dict[str, PhraseDefinition] | None]:
    """Validate a ``{"characters": ..., "phrases": ...}`` payload.

    Either section may be absent but not both. Both sections are checked
    before anything is returned, so a bad phrase section also rejects a
    good character section.

    Returns:
        Tuple of (characters, phrases); an absent section is ``None``.

    Raises:
        DataImportError: With every violation found in either section.
    """
    if "characters" not in data and "phrases" not in data:
        raise _reject(
            "No characters or phrases found",
            [ImportViolation(section="payload", message='No valid "characters" or "phrases" data found')],
        )

    violations: list[ImportViolation] = []
    characters: dict[str, CharacterDefinition] | None = None
    phrases: dict[str, PhraseDefinition] | None = None

    if "characters" in data:
        characters, found = _collect("characters", data["characters"], CharacterDefinition)
        violations.extend(found)
    if "phrases" in data:
        phrases, found = _collect("phrases", data["phrases"], PhraseDefinition)
        violations.extend(found)

    if violations:
        raise _reject("Combined data failed validation", violations)
    return characters, phrases


__all__ = [
    "ImportMode",
    "ImportViolation",
    "parse_payload",
    "validate_characters",
    "validate_phrases",
    "validate_combined",
]
