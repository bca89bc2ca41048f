"""Enumeration types shared across the Hanzi Battle data model."""

from __future__ import annotations

from enum import StrEnum


class CharacterKind(StrEnum):
    """Discriminator for the roster's character variants."""

    BASE = "base"
    """A single hanzi added manually, from the starter set, or by capture."""

    PHRASE_DERIVED = "phrase_derived"
    """A phrase minted into a standalone practiceable entity."""


class ItemType(StrEnum):
    """Item categories."""

    XP_BOOST = "xp_boost"
    MISC = "misc"


class ItemRarity(StrEnum):
    """Item rarity tiers."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class DataSource(StrEnum):
    """Which definition set drives the catalog."""

    BUILT_IN = "built-in"
    CUSTOM = "custom"


class BattlePhase(StrEnum):
    """Lifecycle of a battle session."""

    ACTIVE = "active"
    VICTORY = "victory"
    DEFEAT = "defeat"
    FLED = "fled"


class CaptureKind(StrEnum):
    """What a defeated opponent turned into."""

    CHARACTER = "character"
    PHRASE = "phrase"


__all__ = [
    "CharacterKind",
    "ItemType",
    "ItemRarity",
    "DataSource",
    "BattlePhase",
    "CaptureKind",
]
