"""Roster operations.

Adding, removing and synthesizing roster entries, plus rebuilding the
phrase map from the catalog. Every edit refreshes the player's cached
counters and re-runs the unlock evaluator.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from hanzi_battle.core.exceptions import ValidationError
from hanzi_battle.core.logging import get_logger
from hanzi_battle.data.catalog import DataCatalog
from hanzi_battle.engine.unlocks import refresh_unlocks, relock_dependents
from hanzi_battle.models.character import CharacterBase, HanziCharacter, PhraseCharacter
from hanzi_battle.models.game_state import GameState
from hanzi_battle.models.phrase import Phrase


logger = get_logger(__name__)

UNKNOWN_CHARACTER_DEFAULTS: dict[str, Any] = {
    "pinyin": "",
    "strokes": 5,
    "difficulty": 1,
    "frequency": 50,
}
"""Attributes for a glyph the active catalog does not define."""


class RosterResult(BaseModel):
    """Outcome of a roster edit.

    Attributes:
        success: Whether the edit happened.
        message: Human-readable outcome.
        key: Roster key involved.
        new_unlocks: Phrases unlocked as a consequence.
        relocked: Phrases relocked as a consequence.
    """

    success: bool
    message: str
    key: str
    new_unlocks: list[str] = Field(default_factory=list)
    relocked: list[str] = Field(default_factory=list)


def add_character(
    state: GameState,
    catalog: DataCatalog,
    glyph: str,
    overrides: Mapping[str, Any] | None = None,
) -> RosterResult:
    """Add a single hanzi to the roster.

    The active catalog definition is merged with ``overrides``; glyphs the
    catalog does not know get neutral defaults.

    Args:
        state: Game state to update.
        catalog: Source of character definitions.
        glyph: Glyph to add.
        overrides: Field values taking precedence over the definition.

    Returns:
        RosterResult; unsuccessful if the glyph is already owned.

    Raises:
        ValidationError: If the merged attributes are invalid.
    """
    if state.owns(glyph):
        return RosterResult(success=False, message="Character already exists", key=glyph)

    definition = catalog.get_character_definition(glyph)
    data: dict[str, Any] = (
        definition.model_dump() if definition is not None else dict(UNKNOWN_CHARACTER_DEFAULTS)
    )
    data.update(overrides or {})
    data["glyph"] = glyph

    try:
        character = HanziCharacter.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Invalid attributes for character {glyph!r}",
            field_name="character",
            invalid_value=glyph,
            details={"errors": [error["msg"] for error in exc.errors()]},
        ) from exc

    state.characters[glyph] = character
    state.player.total_characters = len(state.characters)
    new_unlocks = refresh_unlocks(state)

    logger.info(
        "Character added",
        glyph=glyph,
        known=definition is not None,
        level=character.level,
        new_unlocks=len(new_unlocks),
    )
    return RosterResult(
        success=True,
        message="Character added successfully",
        key=glyph,
        new_unlocks=[phrase.text for phrase in new_unlocks],
    )


def remove_character(state: GameState, glyph: str) -> RosterResult:
    """Remove a roster entry and relock the phrases that depended on it."""
    if not state.owns(glyph):
        return RosterResult(success=False, message="Character does not exist", key=glyph)

    del state.characters[glyph]
    state.player.total_characters = len(state.characters)
    relocked = relock_dependents(state, glyph)

    logger.info("Character removed", glyph=glyph, relocked=len(relocked))
    return RosterResult(
        success=True,
        message="Character removed successfully",
        key=glyph,
        relocked=[phrase.text for phrase in relocked],
    )


def create_phrase_character(state: GameState, phrase: Phrase) -> PhraseCharacter:
    """Mint the standalone roster entry for a completed phrase.

    Stroke count is the sum of the constituents' roster stroke counts,
    with 5 for any constituent not in the roster. An existing entry under
    the phrase text is returned unchanged.
    """
    existing = state.characters.get(phrase.text)
    if isinstance(existing, PhraseCharacter):
        return existing
    if existing is not None:
        raise ValidationError(
            f"Roster key {phrase.text!r} is already taken by a single character",
            field_name="glyph",
            invalid_value=phrase.text,
        )

    character = PhraseCharacter(
        glyph=phrase.text,
        original_phrase=phrase.text,
        pinyin=phrase.pinyin,
        strokes=max(1, state.constituent_strokes(phrase.characters)),
        difficulty=phrase.difficulty,
        frequency=phrase.frequency,
    )
    state.characters[phrase.text] = character
    state.player.total_characters = len(state.characters)

    logger.info("Phrase character created", phrase=phrase.text, strokes=character.strokes)
    return character


def add_starter_characters(state: GameState, catalog: DataCatalog, starters: list[str]) -> None:
    """Seed a fresh roster with the starters the active catalog defines."""
    for glyph in starters:
        definition = catalog.get_character_definition(glyph)
        if definition is None:
            logger.warning("Starter character not in catalog", glyph=glyph)
            continue
        state.characters[glyph] = HanziCharacter(glyph=glyph, **definition.model_dump())
    state.player.total_characters = len(state.characters)


def rebuild_phrases(state: GameState, catalog: DataCatalog) -> list[Phrase]:
    """Replace the phrase map with fresh phrases from the active catalog.

    Phrase progress is discarded. Unlocks are re-evaluated and the
    unlocked-phrase counter is recounted from scratch.

    Returns:
        Phrases unlocked by the re-evaluation.
    """
    state.phrases = {
        text: Phrase(text=text, **definition.model_dump())
        for text, definition in catalog.active_phrases().items()
    }
    state.player.total_phrases = 0
    unlocked = refresh_unlocks(state)
    state.sync_counters()
    logger.info("Phrase map rebuilt", phrases=len(state.phrases), unlocked=len(unlocked))
    return unlocked


def ensure_phrases(state: GameState, catalog: DataCatalog) -> None:
    """Add phrases from the active catalog that the phrase map lacks."""
    for text, definition in catalog.active_phrases().items():
        if text not in state.phrases:
            state.phrases[text] = Phrase(text=text, **definition.model_dump())


def available_characters(state: GameState) -> list[CharacterBase]:
    return [character for character in state.characters.values() if character.unlocked]


def available_phrases(state: GameState) -> list[Phrase]:
    return state.unlocked_phrases()


__all__ = [
    "UNKNOWN_CHARACTER_DEFAULTS",
    "RosterResult",
    "add_character",
    "remove_character",
    "create_phrase_character",
    "add_starter_characters",
    "rebuild_phrases",
    "ensure_phrases",
    "available_characters",
    "available_phrases",
]
