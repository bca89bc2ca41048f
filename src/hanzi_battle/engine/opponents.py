"""Wild opponent generation.

Opponents are drawn from the active catalog entries the player does not
own (characters) or has not unlocked (phrases), weighted toward low stroke
counts, and leveled around the roster's current strength.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from hanzi_battle.core.constants import (
    EARLY_GAME_MAX_AVERAGE_LEVEL,
    MAX_LEVEL_SPREAD,
    MISSING_CONSTITUENT_STROKES,
    MYSTERY_CHARACTERS,
    MYSTERY_DIFFICULTY,
    MYSTERY_FREQUENCY,
    MYSTERY_STROKES,
    UNKNOWN_PHRASE_STROKES,
)
from hanzi_battle.core.logging import get_logger
from hanzi_battle.data.catalog import DataCatalog
from hanzi_battle.engine.dice import DiceRoller
from hanzi_battle.models.combat import BattleOpponent
from hanzi_battle.models.game_state import GameState, RosterLevelStats
from hanzi_battle.models.stats import calculate_opponent_stats


logger = get_logger(__name__)

MYSTERY_PINYIN = "mystery"


@dataclass(frozen=True)
class OpponentCandidate:
    """A catalog entry eligible to appear as a wild opponent."""

    name: str
    strokes: int
    difficulty: int
    frequency: float
    pinyin: str = ""
    meaning: str = ""
    is_phrase: bool = False
    constituents: tuple[str, ...] = ()
    requirements: dict[str, int] = field(default_factory=dict)
    is_mystery: bool = False


def selection_weight(strokes: int, average_level: int) -> int:
    """How many times a candidate goes into the draw pool.

    Early game (average roster level <= 3) uses 8/4/2/1 for strokes
    <=3/<=6/<=10/>10; later, 2 for <=6 strokes and 1 otherwise.
    """
    if average_level <= EARLY_GAME_MAX_AVERAGE_LEVEL:
        if strokes <= 3:
            return 8
        if strokes <= 6:
            return 4
        if strokes <= 10:
            return 2
        return 1
    return 2 if strokes <= 6 else 1


def stroke_modifier(strokes: int) -> int:
    """Level adjustment by visual complexity."""
    if strokes <= 3:
        return -2
    if strokes <= 6:
        return -1
    if strokes <= 10:
        return 0
    if strokes <= 15:
        return 1
    return 2


class OpponentGenerator:
    """Builds battle-ready wild opponents.

    Example:
        >>> generator = OpponentGenerator(DiceRoller(seed=7))
        >>> opponent = generator.generate(state, catalog)
    """

    def __init__(self, dice: DiceRoller) -> None:
        self._dice = dice

    # -------------------------------------------------------------------------
    # Candidate pool
    # -------------------------------------------------------------------------

    def candidates(self, state: GameState, catalog: DataCatalog) -> list[OpponentCandidate]:
        """Unowned characters and not-yet-unlocked phrases from the active catalog."""
        character_definitions = catalog.active_characters()
        pool: list[OpponentCandidate] = []

        for glyph, definition in character_definitions.items():
            if state.owns(glyph):
                continue
            pool.append(
                OpponentCandidate(
                    name=glyph,
                    strokes=definition.strokes,
                    difficulty=definition.difficulty,
                    frequency=definition.frequency,
                    pinyin=definition.pinyin,
                    meaning=definition.meaning,
                )
            )

        for text, definition in catalog.active_phrases().items():
            phrase = state.get_phrase(text)
            if phrase is not None and phrase.unlocked:
                continue
            if definition.characters:
                strokes = sum(
                    known.strokes if (known := character_definitions.get(glyph)) else MISSING_CONSTITUENT_STROKES
                    for glyph in definition.characters
                )
            else:
                strokes = UNKNOWN_PHRASE_STROKES
            pool.append(
                OpponentCandidate(
                    name=text,
                    strokes=strokes,
                    difficulty=definition.difficulty,
                    frequency=definition.frequency,
                    pinyin=definition.pinyin,
                    meaning=definition.meaning,
                    is_phrase=True,
                    constituents=tuple(definition.characters),
                    requirements=dict(definition.requirements),
                )
            )

        return pool

    def mystery_candidate(self) -> OpponentCandidate:
        """A strong fallback opponent for when every entry is owned."""
        return OpponentCandidate(
            name=self._dice.choice(MYSTERY_CHARACTERS),
            strokes=self._dice.randint(*MYSTERY_STROKES),
            difficulty=self._dice.randint(*MYSTERY_DIFFICULTY),
            frequency=self._dice.randint(*MYSTERY_FREQUENCY),
            pinyin=MYSTERY_PINYIN,
            is_mystery=True,
        )

    def select(self, pool: list[OpponentCandidate], average_level: int) -> OpponentCandidate:
        """Weighted draw: each candidate appears ``selection_weight`` times."""
        weighted: list[OpponentCandidate] = []
        for candidate in pool:
            weighted.extend([candidate] * selection_weight(candidate.strokes, average_level))
        return self._dice.choice(weighted)

    # -------------------------------------------------------------------------
    # Leveling
    # -------------------------------------------------------------------------

    def assign_level(self, candidate: OpponentCandidate, level_stats: RosterLevelStats) -> int:
        """Pick the opponent's level around the roster's levels.

        Early game jitters the average by one; later the target is drawn
        from a window whose half-width grows with the roster's level
        spread, capped at 3. Stroke complexity, being a phrase and a
        difficulty of 4 or more then push the level up or down.
        """
        average = level_stats.average
        if average <= EARLY_GAME_MAX_AVERAGE_LEVEL:
            target = average + self._dice.randint(-1, 1)
        else:
            spread = min(MAX_LEVEL_SPREAD, (level_stats.maximum - level_stats.minimum) // 2 + 1)
            target = self._dice.randint(max(1, average - spread), average + spread)

        modifier = stroke_modifier(candidate.strokes)
        if candidate.is_phrase:
            modifier += 1
        if candidate.difficulty >= 4:
            modifier += 1

        return max(1, target + modifier)

    # -------------------------------------------------------------------------
    # Assembly
    # -------------------------------------------------------------------------

    def build_opponent(self, candidate: OpponentCandidate, level: int) -> BattleOpponent:
        stats = calculate_opponent_stats(
            level=level,
            strokes=candidate.strokes,
            difficulty=candidate.difficulty,
            frequency=candidate.frequency,
            is_phrase=candidate.is_phrase,
        )
        return BattleOpponent(
            name=candidate.name,
            pinyin=candidate.pinyin,
            meaning=candidate.meaning,
            is_phrase=candidate.is_phrase,
            constituents=list(candidate.constituents),
            requirements=dict(candidate.requirements),
            strokes=candidate.strokes,
            difficulty=candidate.difficulty,
            frequency=candidate.frequency,
            level=level,
            is_mystery=candidate.is_mystery,
            max_hp=stats.hp,
            current_hp=stats.hp,
            attack=stats.attack,
            defense=stats.defense,
        )

    def generate(self, state: GameState, catalog: DataCatalog) -> BattleOpponent:
        """Generate a wild opponent balanced to the roster.

        Args:
            state: Current game state (roster levels and ownership).
            catalog: Active definitions to draw from.

        Returns:
            A full-HP BattleOpponent.
        """
        level_stats = state.level_stats()
        pool = self.candidates(state, catalog)
        if pool:
            candidate = self.select(pool, level_stats.average)
        else:
            candidate = self.mystery_candidate()

        level = self.assign_level(candidate, level_stats)
        opponent = self.build_opponent(candidate, level)

        logger.info(
            "Opponent generated",
            name=opponent.name,
            is_phrase=opponent.is_phrase,
            mystery=opponent.is_mystery,
            level=level,
            hp=opponent.max_hp,
            attack=opponent.attack,
            defense=opponent.defense,
            pool_size=len(pool),
        )
        return opponent


__all__ = [
    "OpponentCandidate",
    "selection_weight",
    "stroke_modifier",
    "OpponentGenerator",
]
