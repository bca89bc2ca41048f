"""Unlock evaluator.

Re-evaluates the phrase unlock predicate after level-ups, roster edits
and data-source switches, and relocks phrases whose constituents leave
the roster. The player's unlocked-phrase counter is kept in step with
every flip.
"""

from __future__ import annotations

from hanzi_battle.core.logging import get_logger
from hanzi_battle.models.game_state import GameState
from hanzi_battle.models.phrase import Phrase


logger = get_logger(__name__)


def refresh_unlocks(state: GameState) -> list[Phrase]:
    """Unlock every locked phrase whose requirements are now met.

    Args:
        state: Game state to update in place.

    Returns:
        Phrases unlocked by this call, in phrase-map order.
    """
    unlocked: list[Phrase] = []
    for phrase in state.phrases.values():
        if not phrase.unlocked and phrase.can_unlock(state.characters):
            phrase.unlocked = True
            state.player.total_phrases += 1
            unlocked.append(phrase)
            logger.info("Phrase unlocked", phrase=phrase.text)
    return unlocked


def relock_dependents(state: GameState, glyph: str) -> list[Phrase]:
    """Relock unlocked phrases that use ``glyph``.

    Called after ``glyph`` left the roster. Each relock decrements the
    unlocked-phrase counter by one, never below zero.

    Returns:
        Phrases relocked by this call.
    """
    relocked: list[Phrase] = []
    for phrase in state.phrases.values():
        if phrase.unlocked and glyph in phrase.characters:
            phrase.unlocked = False
            state.player.decrement_phrases()
            relocked.append(phrase)
            logger.info("Phrase relocked", phrase=phrase.text, removed=glyph)
    return relocked


def unlockable_phrases(state: GameState) -> list[Phrase]:
    """Locked phrases whose predicate already holds."""
    return [
        phrase
        for phrase in state.phrases.values()
        if not phrase.unlocked and phrase.can_unlock(state.characters)
    ]


__all__ = [
    "refresh_unlocks",
    "relock_dependents",
    "unlockable_phrases",
]
