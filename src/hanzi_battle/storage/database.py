"""SQLite persistence layer for Hanzi Battle.

Stores saved games in named slots. Each slot holds one serialized game
(see ``hanzi_battle.storage.codec``) and is overwritten on every save.

Storage location: ``StorageSettings.database_path`` (default
``data/hanzi_battle.db``).
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from hanzi_battle.core.config import get_settings
from hanzi_battle.core.exceptions import PersistenceError
from hanzi_battle.core.logging import get_logger


logger = get_logger(__name__)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class SaveRecord:
    """A saved game slot.

    Attributes:
        slot: Slot name.
        state_json: Serialized game.
        player_level: Player level at save time, for slot listings.
        character_count: Roster size at save time.
        created_at: When the slot was first written.
        updated_at: When the slot was last written.
    """

    slot: str
    state_json: str
    player_level: int
    character_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> SaveRecord:
        """Create from database row."""
        return cls(
            slot=row[0],
            state_json=row[1],
            player_level=row[2],
            character_count=row[3],
            created_at=datetime.fromisoformat(row[4]),
            updated_at=datetime.fromisoformat(row[5]),
        )

    def get_state_dict(self) -> dict[str, Any]:
        """Parse the saved game JSON."""
        return json.loads(self.state_json)


def _parse_created_at(row: tuple[Any, ...] | None, default: datetime, slot: str) -> datetime:
    if not row:
        return default
    try:
        return datetime.fromisoformat(row[0])
    except (TypeError, ValueError):
        logger.warning("Unreadable created_at replaced", slot=slot, value=row[0])
        return default


# =============================================================================
# Save Store
# =============================================================================


class SaveStore:
    """SQLite store of saved games keyed by slot name.

    Every failure to open, read or write the database is raised as a
    ``PersistenceError``.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path | None = None) -> None:
        """Initialize the store.

        Args:
            db_path: Path to database file. If None, uses the configured path.

        Raises:
            PersistenceError: If the database cannot be created.
        """
        self.db_path = Path(db_path) if db_path is not None else get_settings().storage.database_path
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(
                f"Cannot create database directory {self.db_path.parent}",
                details={"original_error": str(exc)},
            ) from exc

        self._init_schema()
        logger.info("Save store initialized", path=str(self.db_path))

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as exc:
            raise PersistenceError(
                f"Cannot open save database {self.db_path}",
                details={"original_error": str(exc)},
            ) from exc
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise PersistenceError(
                "Save database operation failed",
                details={"original_error": str(exc)},
            ) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS saves (
                    slot TEXT PRIMARY KEY,
                    state_json TEXT NOT NULL,
                    player_level INTEGER NOT NULL,
                    character_count INTEGER NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_saves_updated
                ON saves(updated_at DESC)
            """)
            cursor.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (self.SCHEMA_VERSION,),
            )

    # =========================================================================
    # Slot Operations
    # =========================================================================

    def save(self, slot: str, state_dict: dict[str, Any]) -> SaveRecord:
        """Write a serialized game into a slot, replacing what was there.

        Args:
            slot: Slot name.
            state_dict: Output of ``codec.serialize``.

        Returns:
            The stored record.

        Raises:
            PersistenceError: If the write fails.
        """
        now = datetime.now()
        state_json = json.dumps(state_dict, ensure_ascii=False)
        player_level = int(state_dict.get("player", {}).get("level", 1))
        character_count = len(state_dict.get("characters", {}))

        try:
            with self._get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT created_at FROM saves WHERE slot = ?", (slot,))
                row = cursor.fetchone()
                created_at = _parse_created_at(row, now, slot)
                cursor.execute(
                    """
                    INSERT OR REPLACE INTO saves
                    (slot, state_json, player_level, character_count, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (slot, state_json, player_level, character_count, created_at.isoformat(), now.isoformat()),
                )
        except PersistenceError as exc:
            exc.details["slot"] = slot
            raise

        logger.info("Game saved", slot=slot, player_level=player_level, characters=character_count)
        return SaveRecord(
            slot=slot,
            state_json=state_json,
            player_level=player_level,
            character_count=character_count,
            created_at=created_at,
            updated_at=now,
        )

    def load(self, slot: str) -> SaveRecord | None:
        """Get a slot's record, or None if the slot is empty.

        Raises:
            PersistenceError: If the read fails or the slot metadata is unreadable.
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT slot, state_json, player_level, character_count, created_at, updated_at
                FROM saves WHERE slot = ?
                """,
                (slot,),
            )
            row = cursor.fetchone()

        if row:
            return self._to_record(row)
        return None

    def _to_record(self, row: tuple[Any, ...]) -> SaveRecord:
        try:
            return SaveRecord.from_row(tuple(row))
        except (TypeError, ValueError) as exc:
            raise PersistenceError(
                "Save slot metadata is unreadable",
                slot=str(row[0]),
                details={"original_error": str(exc)},
            ) from exc

    def list_slots(self) -> list[SaveRecord]:
        """All saved slots, most recently updated first."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT slot, state_json, player_level, character_count, created_at, updated_at
                FROM saves ORDER BY updated_at DESC
            """)
            rows = cursor.fetchall()
        return [self._to_record(row) for row in rows]

    def delete(self, slot: str) -> bool:
        """Delete a slot.

        Returns:
            True if deleted, False if the slot was empty.
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM saves WHERE slot = ?", (slot,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("Save deleted", slot=slot)
        return deleted


# =============================================================================
# Singleton Instance
# =============================================================================


_store_instance: SaveStore | None = None


def get_save_store() -> SaveStore:
    """Get the global save store, created on first use at the configured path."""
    global _store_instance

    if _store_instance is None:
        _store_instance = SaveStore()

    return _store_instance


def reset_save_store() -> None:
    """Forget the global save store so the next call re-reads settings."""
    global _store_instance
    _store_instance = None


__all__ = [
    "SaveRecord",
    "SaveStore",
    "get_save_store",
    "reset_save_store",
]
