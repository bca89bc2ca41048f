"""Configuration management for the Hanzi Battle engine.

This module provides centralized configuration management using
pydantic-settings, supporting environment variables, .env files, and
runtime configuration overrides.

Example:
    >>> from hanzi_battle.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.game.bag_capacity
    50

Environment Variables:
    HANZI_BATTLE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    HANZI_BATTLE_GAME_BAG_CAPACITY: Number of item units the bag can hold
    HANZI_BATTLE_GAME_ITEM_DROP_CHANCE: Probability of an item drop on victory
    HANZI_BATTLE_GAME_SEED: Seed for the default random source
    HANZI_BATTLE_DATABASE_PATH: Path to the SQLite save database
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hanzi_battle.core.constants import DEFAULT_BAG_CAPACITY, DEFAULT_ITEM_DROP_CHANCE
from hanzi_battle.core.exceptions import ConfigurationError


class GameSettings(BaseSettings):
    """Tunable game rules and the starting roster.

    Attributes:
        bag_capacity: Maximum number of item units the bag holds.
        item_drop_chance: Probability that a victory drops an item.
        starter_characters: Glyphs granted to a new game.
        starter_items: Item ids and quantities granted to a new game.
        seed: Optional seed for the default random source.
    """

    model_config = SettingsConfigDict(
        env_prefix="HANZI_BATTLE_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    bag_capacity: int = Field(
        default=DEFAULT_BAG_CAPACITY,
        ge=1,
        le=999,
        description="Maximum number of item units in the bag",
    )
    item_drop_chance: float = Field(
        default=DEFAULT_ITEM_DROP_CHANCE,
        ge=0.0,
        le=1.0,
        description="Probability of an item drop after a victory",
    )
    starter_characters: list[str] = Field(
        default_factory=lambda: ["你", "好", "我"],
        description="Glyphs in a freshly created roster",
    )
    starter_items: dict[str, int] = Field(
        default_factory=lambda: {"xp_boost_small": 2},
        description="Items placed in a fresh bag",
    )
    seed: int | None = Field(
        default=None,
        description="Seed for the default random source",
    )

    @model_validator(mode="after")
    def validate_starters(self) -> "GameSettings":
        """Ensure the starter set is coherent.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If starter characters repeat or an item quantity is not positive.
        """
        if len(set(self.starter_characters)) != len(self.starter_characters):
            raise ConfigurationError(
                "starter_characters must not contain duplicates",
                config_key="starter_characters",
            )
        for item_id, quantity in self.starter_items.items():
            if quantity < 1:
                raise ConfigurationError(
                    f"starter item {item_id!r} must have a positive quantity",
                    config_key="starter_items",
                )
        return self


class StorageSettings(BaseSettings):
    """Where and under which default slot games are saved.

    Attributes:
        database_path: Path to the SQLite save database.
        save_slot: Default slot name used for autosaves.
    """

    model_config = SettingsConfigDict(
        env_prefix="HANZI_BATTLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/hanzi_battle.db"),
        description="Path to SQLite save database",
    )
    save_slot: str = Field(
        default="autosave",
        min_length=1,
        description="Default save slot",
    )


class Settings(BaseSettings):
    """Top-level settings combining game rules, storage and logging.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        game: Game engine settings.
        storage: Save storage settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="HANZI_BATTLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Hanzi Battle",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    game: GameSettings = Field(default_factory=GameSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    @property
    def is_production(self) -> bool:
        """True unless debug mode is on."""
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process and reuse them.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "GameSettings",
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
