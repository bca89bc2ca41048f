"""Consumable items and the capacity-bounded bag.

Items are defined once in ``ITEM_CATALOG``; the bag stores stacks that
carry a copy of the definition plus a quantity, so a saved bag is
self-describing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from hanzi_battle.core.constants import DEFAULT_BAG_CAPACITY
from hanzi_battle.core.logging import get_logger
from hanzi_battle.models.enums import ItemRarity, ItemType


if TYPE_CHECKING:
    from hanzi_battle.models.character import CharacterBase


logger = get_logger(__name__)


# =============================================================================
# Item Catalog
# =============================================================================


class ItemDefinition(BaseModel):
    """Static description of an item kind."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Unique item identifier")
    name: str = Field(description="Display name")
    description: str = Field(default="", description="Item description")
    type: ItemType = Field(description="Item category")
    value: int = Field(ge=0, description="Effect magnitude, e.g. XP granted")
    rarity: ItemRarity = Field(default=ItemRarity.COMMON)
    icon: str = Field(default="")


ITEM_CATALOG: dict[str, ItemDefinition] = {
    "xp_boost_small": ItemDefinition(
        id="xp_boost_small",
        name="Small XP Boost",
        description="Grants 50 XP to a character",
        type=ItemType.XP_BOOST,
        value=50,
        rarity=ItemRarity.COMMON,
        icon="⭐",
    ),
    "xp_boost_medium": ItemDefinition(
        id="xp_boost_medium",
        name="Medium XP Boost",
        description="Grants 150 XP to a character",
        type=ItemType.XP_BOOST,
        value=150,
        rarity=ItemRarity.UNCOMMON,
        icon="🌟",
    ),
    "xp_boost_large": ItemDefinition(
        id="xp_boost_large",
        name="Large XP Boost",
        description="Grants 300 XP to a character",
        type=ItemType.XP_BOOST,
        value=300,
        rarity=ItemRarity.RARE,
        icon="✨",
    ),
}


def get_item_definition(item_id: str) -> ItemDefinition | None:
    """Look up an item definition by id."""
    return ITEM_CATALOG.get(item_id)


# =============================================================================
# Bag
# =============================================================================


class ItemStack(BaseModel):
    """Some units of one item kind in the bag."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    type: ItemType
    value: int = Field(ge=0)
    rarity: ItemRarity = ItemRarity.COMMON
    icon: str = ""
    quantity: int = Field(default=1, ge=1)

    @classmethod
    def from_definition(cls, definition: ItemDefinition, quantity: int = 1) -> ItemStack:
        return cls(**definition.model_dump(), quantity=quantity)


class BagResult(BaseModel):
    """Outcome of adding or removing items."""

    success: bool
    message: str
    item: ItemStack | None = None
    quantity: int = 0


class ItemUseResult(BaseModel):
    """Outcome of using an item on a character."""

    success: bool
    message: str
    item_id: str
    glyph: str | None = None
    xp_gained: int = 0
    leveled_up: bool = False
    level: int | None = None


class Bag(BaseModel):
    """Capacity-bounded multiset of item stacks.

    Capacity counts units across all stacks, not distinct stacks.

    Attributes:
        max_slots: Maximum number of item units.
        items: Stacks keyed by item id.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    max_slots: int = Field(default=DEFAULT_BAG_CAPACITY, ge=1)
    items: dict[str, ItemStack] = Field(default_factory=dict)

    @property
    def total_count(self) -> int:
        return sum(stack.quantity for stack in self.items.values())

    @property
    def free_space(self) -> int:
        return max(0, self.max_slots - self.total_count)

    def has_space(self, quantity: int = 1) -> bool:
        return self.total_count + quantity <= self.max_slots

    def get_quantity(self, item_id: str) -> int:
        stack = self.items.get(item_id)
        return stack.quantity if stack else 0

    def get_all_items(self) -> list[ItemStack]:
        return list(self.items.values())

    def get_items_by_type(self, item_type: ItemType | str) -> list[ItemStack]:
        return [stack for stack in self.items.values() if stack.type == item_type]

    def add_item(self, item_id: str, quantity: int = 1) -> BagResult:
        """Add units of a catalog item, stacking onto an existing stack.

        Args:
            item_id: Catalog item id.
            quantity: Units to add.

        Returns:
            BagResult; unsuccessful for unknown items or when the bag
            cannot hold every unit.
        """
        if quantity < 1:
            return BagResult(success=False, message="Quantity must be positive")

        definition = get_item_definition(item_id)
        if definition is None:
            return BagResult(success=False, message=f"Unknown item: {item_id}")

        if not self.has_space(quantity):
            return BagResult(success=False, message="Bag is full")

        stack = self.items.get(item_id)
        if stack is None:
            stack = ItemStack.from_definition(definition, quantity)
            self.items[item_id] = stack
        else:
            stack.quantity += quantity

        logger.debug("Item added to bag", item_id=item_id, quantity=quantity, total=self.total_count)
        return BagResult(
            success=True,
            message=f"Added {quantity} x {definition.name}",
            item=stack,
            quantity=quantity,
        )

    def remove_item(self, item_id: str, quantity: int = 1) -> BagResult:
        """Remove units of an item, dropping the stack when it empties."""
        if quantity < 1:
            return BagResult(success=False, message="Quantity must be positive")

        stack = self.items.get(item_id)
        if stack is None:
            return BagResult(success=False, message=f"Item not in bag: {item_id}")
        if stack.quantity < quantity:
            return BagResult(success=False, message=f"Not enough {stack.name}")

        if stack.quantity == quantity:
            del self.items[item_id]
        else:
            stack.quantity -= quantity

        return BagResult(
            success=True,
            message=f"Removed {quantity} x {stack.name}",
            item=stack,
            quantity=quantity,
        )

    def use_item(self, item_id: str, character: CharacterBase) -> ItemUseResult:
        """Consume one unit of an item on a character.

        Args:
            item_id: Item to consume.
            character: Roster entry receiving the effect.

        Returns:
            ItemUseResult; unsuccessful if the item is absent or has no
            usable effect.
        """
        stack = self.items.get(item_id)
        if stack is None:
            return ItemUseResult(success=False, message=f"Item not in bag: {item_id}", item_id=item_id)

        if stack.type != ItemType.XP_BOOST:
            return ItemUseResult(
                success=False,
                message=f"{stack.name} cannot be used on a character",
                item_id=item_id,
            )

        leveled_up = character.add_xp(stack.value)
        self.remove_item(item_id, 1)

        logger.info(
            "Item used",
            item_id=item_id,
            glyph=character.glyph,
            xp=stack.value,
            level=character.level,
        )
        return ItemUseResult(
            success=True,
            message=f"{character.glyph} gained {stack.value} XP",
            item_id=item_id,
            glyph=character.glyph,
            xp_gained=stack.value,
            leveled_up=leveled_up,
            level=character.level,
        )


__all__ = [
    "ItemDefinition",
    "ITEM_CATALOG",
    "get_item_definition",
    "ItemStack",
    "BagResult",
    "ItemUseResult",
    "Bag",
]
