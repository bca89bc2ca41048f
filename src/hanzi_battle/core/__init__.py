"""Core module providing configuration, logging, constants and exceptions.

Exports:
    Exceptions:
        HanziBattleError: Base exception for all application errors.
        InvalidGameStateError: Caller-sequencing errors in the engine.
        CombatError: Out-of-sequence battle actions.
        DataImportError: Rejected custom data imports.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        log_context: Scoped log context for a block.
"""

from __future__ import annotations

from hanzi_battle.core.config import (
    GameSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from hanzi_battle.core.exceptions import (
    CombatError,
    ConfigurationError,
    DataImportError,
    GameEngineError,
    HanziBattleError,
    InvalidGameStateError,
    PersistenceError,
    ValidationError,
)
from hanzi_battle.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    log_context,
)


__all__ = [
    # Exceptions
    "HanziBattleError",
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "ConfigurationError",
    "ValidationError",
    "DataImportError",
    "PersistenceError",
    # Configuration
    "Settings",
    "GameSettings",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "log_context",
]
