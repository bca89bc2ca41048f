"""Game facade.

``HanziGame`` owns one ``GameState`` together with the catalog, random
source, event queue, practice controller and battle session that act on
it. It is the single entry point a presentation layer needs: every
operation returns a result model, and side effects worth showing to the
player (level-ups, unlocks, drops) are also queued as ``GameEvent``
records for ``drain_events()``.

Example:
    >>> game = HanziGame()
    >>> game.start_practice("你").success
    True
    >>> completion = game.complete_practice()
    >>> [str(event.type) for event in game.drain_events()]
    ['practice_completed']
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from hanzi_battle.core.config import Settings, get_settings
from hanzi_battle.core.exceptions import DataImportError, InvalidGameStateError, PersistenceError, ValidationError
from hanzi_battle.core.logging import get_logger, log_context
from hanzi_battle.data.catalog import DataCatalog
from hanzi_battle.data.importer import ImportMode, ImportViolation
from hanzi_battle.engine.battle import BattleSession
from hanzi_battle.engine.dice import DiceRoller
from hanzi_battle.engine.events import EventQueue, GameEvent, GameEventType
from hanzi_battle.engine.opponents import OpponentGenerator
from hanzi_battle.engine.practice import (
    CompletionSummary,
    MistakeRecord,
    PracticeCompletion,
    PracticeController,
    PracticeStartResult,
    StrokeRecord,
)
from hanzi_battle.engine.rewards import RewardRoller
from hanzi_battle.engine.roster import (
    RosterResult,
    add_character,
    add_starter_characters,
    available_characters,
    available_phrases,
    ensure_phrases,
    rebuild_phrases,
    remove_character,
)
from hanzi_battle.engine.unlocks import refresh_unlocks, unlockable_phrases
from hanzi_battle.models.character import CharacterBase
from hanzi_battle.models.combat import BattleCombatant, BattleOpponent, BattleState, BattleTurnResult
from hanzi_battle.models.enums import DataSource
from hanzi_battle.models.game_state import GameState
from hanzi_battle.models.items import Bag, BagResult, ItemUseResult
from hanzi_battle.models.phrase import Phrase
from hanzi_battle.storage.codec import decode_catalog, deserialize, export_state, serialize
from hanzi_battle.storage.database import SaveStore, get_save_store


logger = get_logger(__name__)


# =============================================================================
# Results
# =============================================================================


class ImportResult(BaseModel):
    """Outcome of a custom data import."""

    success: bool
    message: str
    characters_imported: int = 0
    phrases_imported: int = 0
    violations: list[ImportViolation] = Field(default_factory=list)


class DataSourceResult(BaseModel):
    """Outcome of switching the active data source."""

    success: bool
    message: str
    data_source: DataSource
    new_unlocks: list[str] = Field(default_factory=list)


class SaveResult(BaseModel):
    """Outcome of writing or reading a save slot."""

    success: bool
    message: str
    slot: str


class GameStats(BaseModel):
    """Summary figures for a stats screen.

    Attributes:
        player_level: Player level.
        player_xp: Player XP within the level.
        total_characters: Roster size.
        unlocked_phrases: Unlocked phrase count.
        total_practices: Practices summed over the roster.
        average_accuracy: Floored mean of the roster's lifetime accuracy.
        total_practice_time_s: Practice time in whole seconds.
        achievements: Earned achievement count.
    """

    player_level: int
    player_xp: int
    total_characters: int
    unlocked_phrases: int
    total_practices: int
    average_accuracy: int
    total_practice_time_s: int
    achievements: int


# =============================================================================
# Facade
# =============================================================================


class HanziGame:
    """One player's game.

    Not thread-safe; callers serialize operations.

    Attributes:
        settings: Settings the game was created with.
        catalog: Active character and phrase definitions.
        dice: Random source shared by every random decision.
        events: Pending presentation events.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        dice: DiceRoller | None = None,
        catalog: DataCatalog | None = None,
        state: GameState | None = None,
        store: SaveStore | None = None,
    ) -> None:
        """Create a game.

        Args:
            settings: Settings to use. Defaults to ``get_settings()``.
            dice: Random source. Defaults to one seeded from settings.
            catalog: Definitions. Defaults to the built-in set.
            state: Existing state to resume. Defaults to a new game.
            store: Save store. Defaults to the global store on first save/load.
        """
        self.settings = settings if settings is not None else get_settings()
        self.dice = dice if dice is not None else DiceRoller(seed=self.settings.game.seed)
        self.catalog = catalog if catalog is not None else DataCatalog()
        self.events = EventQueue()
        self._store = store
        self._attach(state if state is not None else self.new_game_state())

        logger.info(
            "Game initialized",
            characters=len(self._state.characters),
            phrases=len(self._state.phrases),
            data_source=str(self.catalog.data_source),
        )

    def _attach(self, state: GameState) -> None:
        """Bind a state and rebuild the components acting on it."""
        self._state = state
        self.practice = PracticeController(state, events=self.events)
        self.rewards = RewardRoller(self.dice, drop_chance=self.settings.game.item_drop_chance)
        self.generator = OpponentGenerator(self.dice)
        self.battle = BattleSession(
            state,
            self.catalog,
            self.dice,
            rewards=self.rewards,
            generator=self.generator,
            events=self.events,
        )

    @property
    def state(self) -> GameState:
        return self._state

    def new_game_state(self) -> GameState:
        """A fresh state: starter roster, starter items, phrases from the catalog."""
        game_settings = self.settings.game
        state = GameState(bag=Bag(max_slots=game_settings.bag_capacity))
        add_starter_characters(state, self.catalog, game_settings.starter_characters)
        for item_id, quantity in game_settings.starter_items.items():
            added = state.bag.add_item(item_id, quantity)
            if not added.success:
                logger.warning("Starter item not granted", item_id=item_id, reason=added.message)
        rebuild_phrases(state, self.catalog)
        return state

    def reset(self) -> None:
        """Discard all progress and start over. Custom data is kept."""
        self.events.drain()
        self._attach(self.new_game_state())
        logger.info("Game reset")

    def drain_events(self) -> list[GameEvent]:
        return self.events.drain()

    def _emit_unlocks(self, texts: list[str]) -> None:
        for text in texts:
            self.events.emit(GameEventType.PHRASE_UNLOCKED, text)

    # -------------------------------------------------------------------------
    # Roster
    # -------------------------------------------------------------------------

    def get_character(self, key: str) -> CharacterBase | None:
        return self._state.get_character(key)

    def get_phrase(self, text: str) -> Phrase | None:
        return self._state.get_phrase(text)

    def available_characters(self) -> list[CharacterBase]:
        return available_characters(self._state)

    def available_phrases(self) -> list[Phrase]:
        return available_phrases(self._state)

    def unlockable_phrases(self) -> list[Phrase]:
        return unlockable_phrases(self._state)

    def add_character(self, glyph: str, overrides: Mapping[str, Any] | None = None) -> RosterResult:
        """Add a glyph to the roster.

        Raises:
            ValidationError: If ``overrides`` produce an invalid character.
        """
        result = add_character(self._state, self.catalog, glyph, overrides)
        if result.success:
            self.events.emit(GameEventType.CHARACTER_ADDED, glyph)
            self._emit_unlocks(result.new_unlocks)
        return result

    def remove_character(self, glyph: str) -> RosterResult:
        result = remove_character(self._state, glyph)
        if result.success:
            self.events.emit(GameEventType.CHARACTER_REMOVED, glyph)
            for text in result.relocked:
                self.events.emit(GameEventType.PHRASE_RELOCKED, text)
        return result

    # -------------------------------------------------------------------------
    # Practice
    # -------------------------------------------------------------------------

    def start_practice(self, glyph: str) -> PracticeStartResult:
        return self.practice.start_practice(glyph)

    def start_phrase_practice(self, text: str) -> PracticeStartResult:
        return self.practice.start_phrase_practice(text)

    def record_mistake(self, stroke_index: int, *, backwards: bool = False) -> MistakeRecord:
        return self.practice.record_mistake(stroke_index, backwards=backwards)

    def record_correct_stroke(self, stroke_index: int, *, attempts_needed: int = 1) -> StrokeRecord:
        return self.practice.record_correct_stroke(stroke_index, attempts_needed=attempts_needed)

    def complete_practice(
        self,
        summary: CompletionSummary | None = None,
        *,
        completion_time_ms: int | None = None,
    ) -> PracticeCompletion:
        return self.practice.complete_practice(summary, completion_time_ms=completion_time_ms)

    def cancel_practice(self) -> None:
        self.practice.cancel()

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    def add_item(self, item_id: str, quantity: int = 1) -> BagResult:
        return self._state.bag.add_item(item_id, quantity)

    def remove_item(self, item_id: str, quantity: int = 1) -> BagResult:
        return self._state.bag.remove_item(item_id, quantity)

    def use_item(self, item_id: str, glyph: str) -> ItemUseResult:
        """Use one unit of an item on a roster entry, then re-check unlocks."""
        character = self._state.get_character(glyph)
        if character is None:
            return ItemUseResult(
                success=False,
                message=f"Character {glyph} not found",
                item_id=item_id,
                glyph=glyph,
            )

        result = self._state.bag.use_item(item_id, character)
        if not result.success:
            return result

        self.events.emit(GameEventType.ITEM_USED, item_id, glyph=glyph, xp=result.xp_gained)
        if result.leveled_up:
            self.events.emit(GameEventType.LEVEL_UP, glyph, level=character.level)
        self._emit_unlocks([phrase.text for phrase in refresh_unlocks(self._state)])
        return result

    # -------------------------------------------------------------------------
    # Battle
    # -------------------------------------------------------------------------

    def generate_opponent(self) -> BattleOpponent:
        return self.generator.generate(self._state, self.catalog)

    def start_battle(
        self,
        *,
        party: list[str] | None = None,
        opponent: BattleOpponent | None = None,
    ) -> BattleState:
        return self.battle.start(party=party, opponent=opponent)

    def attack(self) -> BattleTurnResult:
        return self.battle.attack()

    def switch_character(self, glyph: str) -> BattleCombatant:
        return self.battle.switch(glyph)

    def flee(self) -> BattleState:
        return self.battle.flee()

    # -------------------------------------------------------------------------
    # Custom data
    # -------------------------------------------------------------------------

    def import_data(
        self,
        payload: str | bytes | Mapping[str, Any],
        mode: ImportMode | str = ImportMode.COMBINED,
    ) -> ImportResult:
        """Import custom definitions; a rejected payload changes nothing.

        The phrase map is rebuilt from the active definitions afterwards,
        so phrase progress is discarded.
        """
        try:
            characters, phrases = self.catalog.import_data(payload, mode)
        except DataImportError as exc:
            return ImportResult(success=False, message=exc.message, violations=exc.violations)

        self._emit_unlocks([phrase.text for phrase in rebuild_phrases(self._state, self.catalog)])
        return ImportResult(
            success=True,
            message=f"Imported {characters} characters and {phrases} phrases",
            characters_imported=characters,
            phrases_imported=phrases,
        )

    def switch_data_source(self, source: DataSource | str) -> DataSourceResult:
        """Activate the built-in or custom definitions and rebuild phrases."""
        try:
            self.catalog.set_data_source(source)
        except (ValidationError, InvalidGameStateError) as exc:
            return DataSourceResult(success=False, message=exc.message, data_source=self.catalog.data_source)

        unlocked = [phrase.text for phrase in rebuild_phrases(self._state, self.catalog)]
        self.events.emit(GameEventType.DATA_SOURCE_CHANGED, str(self.catalog.data_source))
        self._emit_unlocks(unlocked)
        return DataSourceResult(
            success=True,
            message=f"Switched to {self.catalog.data_source} data",
            data_source=self.catalog.data_source,
            new_unlocks=unlocked,
        )

    def clear_custom_data(self) -> DataSourceResult:
        """Drop custom definitions and return to the built-in set."""
        was_custom = self.catalog.data_source == DataSource.CUSTOM
        self.catalog.clear_custom_data()
        unlocked: list[str] = []
        if was_custom:
            unlocked = [phrase.text for phrase in rebuild_phrases(self._state, self.catalog)]
            self.events.emit(GameEventType.DATA_SOURCE_CHANGED, str(self.catalog.data_source))
            self._emit_unlocks(unlocked)
        return DataSourceResult(
            success=True,
            message="Custom data cleared",
            data_source=self.catalog.data_source,
            new_unlocks=unlocked,
        )

    def export_custom_data(self) -> dict[str, Any]:
        return self.catalog.export_custom_data()

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def game_stats(self) -> GameStats:
        characters = list(self._state.characters.values())
        player = self._state.player
        accuracy = (
            math.floor(sum(character.lifetime_accuracy() for character in characters) / len(characters))
            if characters
            else 0
        )
        return GameStats(
            player_level=player.level,
            player_xp=player.xp,
            total_characters=len(characters),
            unlocked_phrases=len(self._state.unlocked_phrases()),
            total_practices=sum(character.total_practices for character in characters),
            average_accuracy=accuracy,
            total_practice_time_s=player.total_practice_time_ms // 1000,
            achievements=len(player.achievements),
        )

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return serialize(self._state, self.catalog)

    def export(self) -> dict[str, Any]:
        """The full save structure with an export timestamp, for backups."""
        return export_state(self._state, self.catalog)

    def load_dict(self, data: Mapping[str, Any]) -> None:
        """Replace the current game with a decoded save.

        The saved catalog is restored first, so missing sections come
        from a fresh game built on it. Phrases the catalog defines but
        the save lacks are added, and unlocks re-evaluated.
        """
        self.practice.cancel()
        self.catalog = decode_catalog(data)
        state, _ = deserialize(data, defaults=self.new_game_state(), catalog=self.catalog)
        ensure_phrases(state, self.catalog)
        refresh_unlocks(state)
        state.sync_counters()
        self._attach(state)

    def _get_store(self) -> SaveStore:
        if self._store is None:
            self._store = get_save_store()
        return self._store

    def save(self, slot: str | None = None) -> SaveResult:
        """Write the game to a save slot; failures are reported, not raised."""
        slot = slot or self.settings.storage.save_slot
        with log_context(save_slot=slot):
            try:
                self._get_store().save(slot, self.to_dict())
            except PersistenceError as exc:
                logger.warning("Save failed", error=str(exc))
                return SaveResult(success=False, message=f"Failed to save game: {exc.message}", slot=slot)
        return SaveResult(success=True, message="Game saved", slot=slot)

    def load(self, slot: str | None = None) -> SaveResult:
        """Load a save slot.

        An empty slot or a storage failure leaves a fresh game in place
        and reports ``success=False``.
        """
        slot = slot or self.settings.storage.save_slot
        with log_context(save_slot=slot):
            try:
                record = self._get_store().load(slot)
            except PersistenceError as exc:
                logger.warning("Load failed, starting fresh", error=str(exc))
                self.reset()
                return SaveResult(success=False, message=f"Failed to load game: {exc.message}", slot=slot)

            if record is None:
                logger.info("No save in slot, starting fresh")
                self.reset()
                return SaveResult(success=False, message="No saved game found", slot=slot)

            try:
                data = record.get_state_dict()
            except json.JSONDecodeError as exc:
                logger.warning("Save slot is corrupt, starting fresh", error=str(exc))
                self.reset()
                return SaveResult(success=False, message="Saved game is corrupt", slot=slot)
            if not isinstance(data, Mapping):
                logger.warning("Save slot is not a JSON object, starting fresh", type=type(data).__name__)
                self.reset()
                return SaveResult(success=False, message="Saved game is corrupt", slot=slot)

            self.load_dict(data)
            logger.info("Game loaded", characters=len(self._state.characters))
        return SaveResult(success=True, message="Game loaded", slot=slot)


__all__ = [
    "ImportResult",
    "DataSourceResult",
    "SaveResult",
    "GameStats",
    "HanziGame",
]
