"""Practice sessions and the phrase-sequence controller.

A practice session consumes the stroke events of one character (mistakes
and correct strokes, then completion) and turns them into an accuracy
score and an XP reward. The ``PracticeController`` runs single-character
sessions and, for phrases, chains them through each constituent in order:

    Idle --start_phrase--> InSequence(phrase, 0) --complete--> ...
    InSequence(phrase, last) --complete--> Idle  (phrase bonus awarded)

The first completion of a phrase mints a phrase-character; later
completions feed half the phrase bonus to that phrase-character.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from hanzi_battle.core.constants import MISSING_CONSTITUENT_STROKES
from hanzi_battle.core.exceptions import InvalidGameStateError
from hanzi_battle.core.logging import get_logger
from hanzi_battle.engine.events import EventQueue, GameEventType
from hanzi_battle.engine.roster import create_phrase_character
from hanzi_battle.engine.unlocks import refresh_unlocks
from hanzi_battle.models.character import CharacterBase, PhraseCharacter, PracticeOutcome
from hanzi_battle.models.game_state import GameState
from hanzi_battle.models.phrase import Phrase, PhraseCompletion, PhraseSource, SyntheticPhraseView
from hanzi_battle.models.progression import calculate_phrase_reward


logger = get_logger(__name__)


# =============================================================================
# Stroke Session
# =============================================================================


@dataclass(frozen=True)
class MistakeRecord:
    """A wrong stroke reported by the stroke-practice widget."""

    stroke_index: int
    backwards: bool = False
    elapsed_ms: int = 0


@dataclass(frozen=True)
class StrokeRecord:
    """A correct stroke and how many attempts it took."""

    stroke_index: int
    attempts_needed: int = 1
    elapsed_ms: int = 0


@dataclass(frozen=True)
class CompletionSummary:
    """Summary the widget attaches to its completion event."""

    total_mistakes: int = 0


@dataclass
class StrokeSession:
    """Stroke telemetry of one character practice.

    Attributes:
        glyph: Character being practiced.
        expected_strokes: Stroke count of the character, used when no
            per-stroke data arrives.
        started_at: Monotonic start time in seconds.
    """

    glyph: str
    expected_strokes: int
    started_at: float = field(default_factory=time.monotonic)
    mistakes: list[MistakeRecord] = field(default_factory=list)
    strokes: list[StrokeRecord] = field(default_factory=list)

    @property
    def mistake_count(self) -> int:
        return len(self.mistakes)

    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.started_at) * 1000)

    def record_mistake(self, stroke_index: int, *, backwards: bool = False) -> MistakeRecord:
        record = MistakeRecord(stroke_index=stroke_index, backwards=backwards, elapsed_ms=self.elapsed_ms())
        self.mistakes.append(record)
        return record

    def record_correct_stroke(self, stroke_index: int, *, attempts_needed: int = 1) -> StrokeRecord:
        if attempts_needed < 1:
            raise ValueError(f"attempts_needed must be at least 1, got {attempts_needed}")
        record = StrokeRecord(
            stroke_index=stroke_index,
            attempts_needed=attempts_needed,
            elapsed_ms=self.elapsed_ms(),
        )
        self.strokes.append(record)
        return record

    def accuracy(self, summary: CompletionSummary | None = None) -> int:
        """Session accuracy percentage.

        Uses correct strokes over total attempts when per-stroke data was
        recorded. Without it, a completion summary means every expected
        stroke was eventually drawn, so accuracy is expected strokes over
        expected strokes plus mistakes. With neither, each mistake costs
        ten points.
        """
        if self.strokes:
            attempts = sum(stroke.attempts_needed for stroke in self.strokes)
            return math.floor(len(self.strokes) / attempts * 100)

        if summary is not None:
            expected = self.expected_strokes or MISSING_CONSTITUENT_STROKES
            attempts = expected + self.mistake_count
            return math.floor(expected / attempts * 100)

        return max(0, min(100, 100 - self.mistake_count * 10))


# =============================================================================
# Results
# =============================================================================


class PracticeStartResult(BaseModel):
    """Outcome of starting a practice or a phrase sequence."""

    success: bool
    message: str
    glyph: str | None = None
    phrase: str | None = None
    index: int | None = None
    total: int | None = None


class PhraseProgress(BaseModel):
    """Where a running phrase sequence stands."""

    phrase: str
    index: int
    total: int
    current_glyph: str
    is_last: bool
    synthetic: bool = False


class PhraseSequenceResult(BaseModel):
    """Everything awarded when a phrase sequence finished.

    Attributes:
        phrase: Phrase text.
        bonus_xp: Phrase bonus, also granted to the player.
        first_completion: Whether this was the first completion ever.
        completion: Phrase ledger outcome; absent for a synthetic view.
        player_leveled_up: Whether the bonus leveled the player.
        phrase_character_created: Whether a phrase-character was minted.
        phrase_character_xp: XP granted to an existing phrase-character.
        phrase_character_leveled_up: Whether that XP leveled it.
    """

    phrase: str
    bonus_xp: int = 0
    first_completion: bool = False
    completion: PhraseCompletion | None = None
    player_leveled_up: bool = False
    phrase_character_created: bool = False
    phrase_character_xp: int = 0
    phrase_character_leveled_up: bool = False


class PracticeCompletion(BaseModel):
    """Outcome of completing one character practice."""

    outcome: PracticeOutcome
    completion_time_ms: int
    mistakes: int
    stroke_count: int
    player_xp: int
    player_leveled_up: bool
    new_unlocks: list[str] = Field(default_factory=list)
    phrase_progress: PhraseProgress | None = None
    next_glyph: str | None = None
    sequence_aborted: bool = False
    sequence_result: PhraseSequenceResult | None = None


# =============================================================================
# Controller
# =============================================================================


@dataclass(frozen=True)
class Idle:
    """No phrase sequence running."""


@dataclass(frozen=True)
class InSequence:
    """Practicing ``source.characters[index]`` as part of a phrase."""

    source: PhraseSource
    index: int

    @property
    def current_glyph(self) -> str:
        return self.source.characters[self.index]

    @property
    def is_last(self) -> bool:
        return self.index == len(self.source.characters) - 1


SequenceState = Idle | InSequence


class PracticeController:
    """Runs character practices and phrase sequences against a game state.

    Not thread-safe; callers serialize practice events.
    """

    def __init__(self, state: GameState, *, events: EventQueue | None = None) -> None:
        self._state = state
        self._events = events if events is not None else EventQueue()
        self._sequence: SequenceState = Idle()
        self._session: StrokeSession | None = None

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def sequence(self) -> SequenceState:
        return self._sequence

    @property
    def session(self) -> StrokeSession | None:
        return self._session

    @property
    def is_phrase_practice(self) -> bool:
        return isinstance(self._sequence, InSequence)

    def phrase_progress(self) -> PhraseProgress | None:
        sequence = self._sequence
        if not isinstance(sequence, InSequence):
            return None
        return PhraseProgress(
            phrase=sequence.source.text,
            index=sequence.index,
            total=len(sequence.source.characters),
            current_glyph=sequence.current_glyph,
            is_last=sequence.is_last,
            synthetic=isinstance(sequence.source, SyntheticPhraseView),
        )

    # -------------------------------------------------------------------------
    # Starting
    # -------------------------------------------------------------------------

    def start_practice(self, glyph: str) -> PracticeStartResult:
        """Begin a standalone practice, abandoning any running sequence."""
        character = self._state.get_character(glyph)
        if character is None:
            return PracticeStartResult(success=False, message=f"Character {glyph} not found", glyph=glyph)

        self._sequence = Idle()
        self._begin(character)
        return PracticeStartResult(success=True, message="Practice started", glyph=glyph)

    def start_phrase_practice(self, text: str) -> PracticeStartResult:
        """Begin a phrase sequence by phrase text.

        Uses the phrase map entry when there is one; otherwise, if a
        phrase-character with that text is owned, a synthetic view built
        from it.

        Raises:
            InvalidGameStateError: If the phrase has no constituents.
        """
        phrase = self._state.get_phrase(text)
        if phrase is not None:
            if not phrase.unlocked:
                return PracticeStartResult(success=False, message=f"Phrase {text} is locked", phrase=text)
            return self.start_sequence(phrase)

        character = self._state.get_character(text)
        if isinstance(character, PhraseCharacter):
            return self.start_sequence(SyntheticPhraseView.from_phrase_character(character))

        return PracticeStartResult(success=False, message=f"Phrase {text} not found", phrase=text)

    def start_sequence(self, source: PhraseSource) -> PracticeStartResult:
        """Begin practicing ``source`` from its first constituent.

        Raises:
            InvalidGameStateError: If ``source`` has no constituents.
        """
        if not source.characters:
            raise InvalidGameStateError(
                f"Phrase {source.text!r} has no characters",
                current_state="idle",
                expected_states=["non-empty phrase"],
            )

        missing = [glyph for glyph in source.characters if not self._state.owns(glyph)]
        if missing:
            return PracticeStartResult(
                success=False,
                message=f"Characters not owned: {', '.join(missing)}",
                phrase=source.text,
            )

        self._sequence = InSequence(source=source, index=0)
        first = self._state.characters[source.characters[0]]
        self._begin(first)

        logger.info(
            "Phrase sequence started",
            phrase=source.text,
            total=len(source.characters),
            synthetic=isinstance(source, SyntheticPhraseView),
        )
        return PracticeStartResult(
            success=True,
            message="Phrase practice started",
            glyph=first.glyph,
            phrase=source.text,
            index=0,
            total=len(source.characters),
        )

    def cancel(self) -> None:
        """Abandon the current practice and any running sequence."""
        self._session = None
        self._sequence = Idle()

    def _begin(self, character: CharacterBase) -> None:
        self._session = StrokeSession(glyph=character.glyph, expected_strokes=character.strokes)
        logger.debug("Practice session started", glyph=character.glyph)

    # -------------------------------------------------------------------------
    # Stroke events
    # -------------------------------------------------------------------------

    def _require_session(self) -> StrokeSession:
        if self._session is None:
            raise InvalidGameStateError(
                "No practice session in progress",
                current_state="idle",
                expected_states=["practicing"],
            )
        return self._session

    def record_mistake(self, stroke_index: int, *, backwards: bool = False) -> MistakeRecord:
        return self._require_session().record_mistake(stroke_index, backwards=backwards)

    def record_correct_stroke(self, stroke_index: int, *, attempts_needed: int = 1) -> StrokeRecord:
        return self._require_session().record_correct_stroke(stroke_index, attempts_needed=attempts_needed)

    # -------------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------------

    def complete_practice(
        self,
        summary: CompletionSummary | None = None,
        *,
        completion_time_ms: int | None = None,
    ) -> PracticeCompletion:
        """Finish the current character practice.

        Awards the character its reward, gives the player half of it,
        re-evaluates unlocks and then either advances the running phrase
        sequence or completes it.

        Args:
            summary: Completion summary from the stroke widget, if any.
            completion_time_ms: Measured duration; defaults to the time
                since the session started.

        Raises:
            InvalidGameStateError: If no practice is in progress.
        """
        session = self._require_session()
        character = self._state.get_character(session.glyph)
        if character is None:
            self.cancel()
            raise InvalidGameStateError(
                f"Character {session.glyph} left the roster during practice",
                current_state="practicing",
            )

        elapsed = completion_time_ms if completion_time_ms is not None else session.elapsed_ms()
        accuracy = session.accuracy(summary)
        outcome = character.record_practice(session.mistake_count, accuracy, elapsed)

        player = self._state.player
        player_xp = outcome.xp_gained // 2
        player_leveled_up = player.add_xp(player_xp)
        player.total_practice_time_ms += elapsed
        player.practice_count += 1
        self._session = None

        self._events.emit(
            GameEventType.PRACTICE_COMPLETED,
            character.glyph,
            accuracy=accuracy,
            xp=outcome.xp_gained,
        )
        if outcome.leveled_up:
            self._events.emit(GameEventType.LEVEL_UP, character.glyph, level=character.level)
            logger.info("Character leveled up", glyph=character.glyph, level=character.level)
        if player_leveled_up:
            self._events.emit(GameEventType.PLAYER_LEVEL_UP, level=player.level)

        new_unlocks = self._refresh_unlocks()

        logger.info(
            "Practice completed",
            glyph=character.glyph,
            accuracy=accuracy,
            mistakes=session.mistake_count,
            xp=outcome.xp_gained,
            level=character.level,
        )

        completion = PracticeCompletion(
            outcome=outcome,
            completion_time_ms=elapsed,
            mistakes=session.mistake_count,
            stroke_count=len(session.strokes),
            player_xp=player_xp,
            player_leveled_up=player_leveled_up,
            new_unlocks=new_unlocks,
            phrase_progress=self.phrase_progress(),
        )

        sequence = self._sequence
        if isinstance(sequence, InSequence):
            if sequence.is_last:
                completion.sequence_result = self._complete_sequence(sequence.source)
            else:
                self._advance(sequence, completion)
        return completion

    def _advance(self, sequence: InSequence, completion: PracticeCompletion) -> None:
        next_state = InSequence(source=sequence.source, index=sequence.index + 1)
        next_character = self._state.get_character(next_state.current_glyph)
        if next_character is None:
            logger.warning(
                "Phrase sequence aborted, constituent missing",
                phrase=sequence.source.text,
                glyph=next_state.current_glyph,
            )
            self._sequence = Idle()
            completion.sequence_aborted = True
            return

        self._sequence = next_state
        self._begin(next_character)
        completion.next_glyph = next_character.glyph

    def _complete_sequence(self, source: PhraseSource) -> PhraseSequenceResult:
        self._sequence = Idle()
        if isinstance(source, Phrase):
            result = self._complete_phrase(source)
        else:
            result = self._complete_synthetic(source)

        phrase_character = self._state.get_character(source.text)
        if isinstance(phrase_character, PhraseCharacter):
            self._update_phrase_character_stats(phrase_character, source)

        self._events.emit(
            GameEventType.PHRASE_COMPLETED,
            source.text,
            bonus_xp=result.bonus_xp,
            first_completion=result.first_completion,
        )
        self._refresh_unlocks()
        logger.info(
            "Phrase sequence completed",
            phrase=source.text,
            bonus_xp=result.bonus_xp,
            first_completion=result.first_completion,
        )
        return result

    def _complete_phrase(self, phrase: Phrase) -> PhraseSequenceResult:
        completion = phrase.record_completion()
        player_leveled_up = self._state.player.add_xp(completion.xp_gained)
        if player_leveled_up:
            self._events.emit(GameEventType.PLAYER_LEVEL_UP, level=self._state.player.level)

        result = PhraseSequenceResult(
            phrase=phrase.text,
            bonus_xp=completion.xp_gained,
            first_completion=completion.first_completion,
            completion=completion,
            player_leveled_up=player_leveled_up,
        )

        if completion.first_completion:
            if phrase.text not in self._state.characters:
                create_phrase_character(self._state, phrase)
                result.phrase_character_created = True
                self._events.emit(GameEventType.PHRASE_CHARACTER_CREATED, phrase.text)
        else:
            self._feed_phrase_character(phrase.text, completion.xp_gained // 2, result)
        return result

    def _complete_synthetic(self, view: SyntheticPhraseView) -> PhraseSequenceResult:
        bonus = calculate_phrase_reward(len(view.characters), first_completion=False)
        result = PhraseSequenceResult(phrase=view.text, bonus_xp=0)
        self._feed_phrase_character(view.text, bonus // 2, result)
        return result

    def _feed_phrase_character(self, text: str, xp: int, result: PhraseSequenceResult) -> None:
        phrase_character = self._state.get_character(text)
        if not isinstance(phrase_character, PhraseCharacter):
            return
        leveled_up = phrase_character.add_xp(xp)
        result.phrase_character_xp = xp
        result.phrase_character_leveled_up = leveled_up
        if leveled_up:
            self._events.emit(GameEventType.LEVEL_UP, text, level=phrase_character.level)

    def _update_phrase_character_stats(self, character: PhraseCharacter, source: PhraseSource) -> None:
        """Fold a sequence into the phrase-character's practice statistics.

        Mistakes are estimated from the constituents' average lifetime
        accuracy since the sequence itself has no single stroke record.
        """
        accuracies = [
            owned.lifetime_accuracy()
            for glyph in source.characters
            if (owned := self._state.get_character(glyph)) is not None
        ]
        average = sum(accuracies) / len(accuracies) if accuracies else 0

        character.total_practices += 1
        estimated_mistakes = math.floor((100 - average) * 0.1 * len(source.characters))
        character.total_mistakes += max(0, estimated_mistakes)
        if average > character.best_accuracy:
            character.best_accuracy = math.floor(average)

    def _refresh_unlocks(self) -> list[str]:
        unlocked = refresh_unlocks(self._state)
        for phrase in unlocked:
            self._events.emit(GameEventType.PHRASE_UNLOCKED, phrase.text)
        return [phrase.text for phrase in unlocked]


__all__ = [
    "MistakeRecord",
    "StrokeRecord",
    "CompletionSummary",
    "StrokeSession",
    "PracticeStartResult",
    "PhraseProgress",
    "PhraseSequenceResult",
    "PracticeCompletion",
    "Idle",
    "InSequence",
    "SequenceState",
    "PracticeController",
]
