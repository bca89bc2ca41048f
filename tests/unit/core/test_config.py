"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from hanzi_battle.core.config import (
    GameSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from hanzi_battle.core.exceptions import ConfigurationError


class TestGameSettings:
    """Tests for GameSettings configuration."""

    def test_default_values(self) -> None:
        """Test default game settings."""
        settings = GameSettings()

        assert settings.bag_capacity == 50
        assert settings.item_drop_chance == 0.25
        assert settings.starter_characters == ["你", "好", "我"]
        assert settings.starter_items == {"xp_boost_small": 2}
        assert settings.seed is None

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test environment variables override defaults."""
        monkeypatch.setenv("HANZI_BATTLE_GAME_BAG_CAPACITY", "12")
        monkeypatch.setenv("HANZI_BATTLE_GAME_SEED", "99")

        settings = GameSettings()

        assert settings.bag_capacity == 12
        assert settings.seed == 99

    def test_duplicate_starters_rejected(self) -> None:
        """Test duplicate starter characters raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="duplicates"):
            GameSettings(starter_characters=["你", "你"])

    def test_non_positive_starter_item_rejected(self) -> None:
        """Test starter items need a positive quantity."""
        with pytest.raises(ConfigurationError) as exc_info:
            GameSettings(starter_items={"xp_boost_small": 0})

        assert exc_info.value.details["config_key"] == "starter_items"


class TestStorageSettings:
    """Tests for StorageSettings configuration."""

    def test_default_path(self) -> None:
        """Test default save database location."""
        settings = StorageSettings()

        assert settings.database_path == Path("data/hanzi_battle.db")
        assert settings.save_slot == "autosave"

    def test_custom_path(self, tmp_path: Path) -> None:
        """Test custom database path."""
        settings = StorageSettings(database_path=tmp_path / "custom.db")

        assert settings.database_path == tmp_path / "custom.db"


class TestSettings:
    """Tests for main Settings class."""

    def test_nested_defaults(self) -> None:
        """Test nested settings are created."""
        settings = Settings()

        assert settings.app_name == "Hanzi Battle"
        assert settings.log_level == "INFO"
        assert settings.game.bag_capacity == 50
        assert settings.is_production is True

    def test_env_override(self, mock_env_vars: dict[str, str]) -> None:
        """Test top-level environment overrides."""
        settings = Settings()

        assert settings.debug is True
        assert settings.log_level == "DEBUG"
        assert settings.is_production is False


class TestGetSettings:
    """Tests for the settings singleton."""

    def test_singleton(self) -> None:
        """Test get_settings returns a cached instance."""
        assert get_settings() is get_settings()

    def test_cache_clear(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test clearing the cache reloads settings."""
        first = get_settings()
        monkeypatch.setenv("HANZI_BATTLE_APP_NAME", "Reloaded")
        clear_settings_cache()

        second = get_settings()

        assert second is not first
        assert second.app_name == "Reloaded"
