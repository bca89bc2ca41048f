"""Storage module for Hanzi Battle persistence.

Provides:
- A JSON codec turning a game state into a single serializable mapping
- SQLite-based save slots
"""

from hanzi_battle.storage.codec import (
    SAVE_FORMAT_VERSION,
    decode_catalog,
    deserialize,
    dumps,
    export_state,
    loads,
    serialize,
)
from hanzi_battle.storage.database import (
    SaveRecord,
    SaveStore,
    get_save_store,
    reset_save_store,
)

__all__ = [
    "SAVE_FORMAT_VERSION",
    "serialize",
    "decode_catalog",
    "deserialize",
    "dumps",
    "loads",
    "export_state",
    "SaveRecord",
    "SaveStore",
    "get_save_store",
    "reset_save_store",
]
