"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Hanzi Battle test suite.
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

    from hanzi_battle.core.config import Settings
    from hanzi_battle.data.catalog import DataCatalog
    from hanzi_battle.engine.dice import DiceRoller
    from hanzi_battle.engine.game import HanziGame
    from hanzi_battle.models.game_state import GameState


# =============================================================================
# Scripted Random Source
# =============================================================================


class ScriptedRandom(random.Random):
    """A ``random.Random`` that replays scripted values.

    ``randint`` pops from ``ints`` and falls back to the midpoint of the
    requested range, so damage variance is 0 unless scripted. ``random``
    pops from ``floats`` and falls back to 0.99, so chance rolls fail
    unless scripted. ``randrange`` (used for choices) pops from
    ``indices`` and falls back to 0.
    """

    def __init__(
        self,
        *,
        ints: Iterable[int] = (),
        floats: Iterable[float] = (),
        indices: Iterable[int] = (),
    ) -> None:
        super().__init__(0)
        self.ints = list(ints)
        self.floats = list(floats)
        self.indices = list(indices)

    def randint(self, a: int, b: int) -> int:
        if self.ints:
            return self.ints.pop(0)
        return a + (b - a) // 2

    def random(self) -> float:
        if self.floats:
            return self.floats.pop(0)
        return 0.99

    def randrange(self, start: int, stop: Any = None, step: int = 1) -> int:  # type: ignore[override]
        if self.indices:
            return self.indices.pop(0)
        return 0 if stop is None else start


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache and save store before and after each test."""
    from hanzi_battle.core.config import clear_settings_cache
    from hanzi_battle.storage.database import reset_save_store

    clear_settings_cache()
    reset_save_store()
    yield
    clear_settings_cache()
    reset_save_store()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "HANZI_BATTLE_DEBUG": "true",
        "HANZI_BATTLE_LOG_LEVEL": "DEBUG",
        "HANZI_BATTLE_GAME_BAG_CAPACITY": "10",
        "HANZI_BATTLE_GAME_SEED": "7",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Default settings with the save database under a temporary directory."""
    from hanzi_battle.core.config import GameSettings, Settings, StorageSettings

    return Settings(
        game=GameSettings(),
        storage=StorageSettings(database_path=tmp_path / "saves.db"),
    )


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> DiceRoller:
    """Create a DiceRoller with a fixed seed for reproducible tests."""
    from hanzi_battle.engine.dice import DiceRoller

    return DiceRoller(seed=42)


@pytest.fixture
def scripted_rng() -> ScriptedRandom:
    """A scripted random source; tests push values onto its queues."""
    return ScriptedRandom()


@pytest.fixture
def scripted_dice(scripted_rng: ScriptedRandom) -> DiceRoller:
    """A DiceRoller drawing from ``scripted_rng``."""
    from hanzi_battle.engine.dice import DiceRoller

    return DiceRoller(rng=scripted_rng)


@pytest.fixture
def catalog() -> DataCatalog:
    """A catalog with only the built-in data."""
    from hanzi_battle.data.catalog import DataCatalog

    return DataCatalog()


@pytest.fixture
def game_state(catalog: DataCatalog) -> GameState:
    """A fresh state: starters 你/好/我 at level 1 and the built-in phrases."""
    from hanzi_battle.engine.roster import add_starter_characters, rebuild_phrases
    from hanzi_battle.models.game_state import GameState

    state = GameState()
    add_starter_characters(state, catalog, ["你", "好", "我"])
    rebuild_phrases(state, catalog)
    return state


@pytest.fixture
def game(settings: Settings, scripted_dice: DiceRoller) -> HanziGame:
    """A new game wired to the scripted random source and a temporary save store."""
    from hanzi_battle.engine.game import HanziGame
    from hanzi_battle.storage.database import SaveStore

    return HanziGame(
        settings=settings,
        dice=scripted_dice,
        store=SaveStore(settings.storage.database_path),
    )
