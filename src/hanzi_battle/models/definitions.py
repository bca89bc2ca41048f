"""Static character and phrase definitions.

Definitions are the catalog's raw material: the linguistic attributes of
a character or phrase with no progression attached. Both the built-in
data set and imported custom data are parsed into these models, so their
field constraints double as the import validation rules.
"""

from __future__ import annotations

from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, model_validator


Difficulty = Annotated[StrictInt, Field(ge=1, le=5)]
Frequency = Annotated[StrictFloat, Field(ge=0, le=100)]


class CharacterDefinition(BaseModel):
    """Definition of a single hanzi.

    Attributes:
        pinyin: Pronunciation.
        strokes: Stroke count, a positive integer.
        difficulty: Integer rating 1-5.
        frequency: Usage score 0-100.
        meaning: Optional English gloss.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    pinyin: StrictStr
    strokes: Annotated[StrictInt, Field(ge=1)]
    difficulty: Difficulty
    frequency: Frequency
    meaning: StrictStr = ""


class PhraseDefinition(BaseModel):
    """Definition of a multi-character phrase.

    Attributes:
        characters: Ordered constituent glyphs, at least one.
        requirements: Minimum level per constituent glyph.
        difficulty: Integer rating 1-5.
        frequency: Usage score 0-100.
        pinyin: Pronunciation.
        meaning: English gloss.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    characters: Annotated[list[StrictStr], Field(min_length=1)]
    requirements: dict[StrictStr, Annotated[StrictInt, Field(ge=1)]]
    difficulty: Difficulty
    frequency: Frequency
    pinyin: StrictStr
    meaning: StrictStr

    @model_validator(mode="after")
    def validate_requirement_keys(self) -> Self:
        """The constituent list and requirement map must name the same glyphs."""
        missing = [glyph for glyph in self.characters if glyph not in self.requirements]
        extra = [glyph for glyph in self.requirements if glyph not in self.characters]
        problems: list[str] = []
        if missing:
            problems.append(f"characters missing from requirements: {', '.join(missing)}")
        if extra:
            problems.append(f"requirements not in characters: {', '.join(extra)}")
        if problems:
            raise ValueError("; ".join(problems))
        return self


__all__ = [
    "CharacterDefinition",
    "PhraseDefinition",
]
