"""Tests for the item catalog and bag."""

from __future__ import annotations

import pytest

from hanzi_battle.models import ITEM_CATALOG, Bag, HanziCharacter, ItemRarity, ItemType, get_item_definition


class TestItemCatalog:
    """Tests for built-in item definitions."""

    @pytest.mark.parametrize(
        ("item_id", "value", "rarity"),
        [
            ("xp_boost_small", 50, ItemRarity.COMMON),
            ("xp_boost_medium", 150, ItemRarity.UNCOMMON),
            ("xp_boost_large", 300, ItemRarity.RARE),
        ],
    )
    def test_xp_boosts(self, item_id: str, value: int, rarity: ItemRarity) -> None:
        definition = get_item_definition(item_id)

        assert definition is not None
        assert definition.type == ItemType.XP_BOOST
        assert definition.value == value
        assert definition.rarity == rarity

    def test_unknown_item(self) -> None:
        assert get_item_definition("potion") is None
        assert len(ITEM_CATALOG) == 3


class TestBag:
    """Tests for bag capacity and stacking."""

    def test_add_stacks(self) -> None:
        bag = Bag()

        bag.add_item("xp_boost_small", 2)
        result = bag.add_item("xp_boost_small", 3)

        assert result.success is True
        assert bag.get_quantity("xp_boost_small") == 5
        assert len(bag.get_all_items()) == 1

    def test_capacity_counts_units(self) -> None:
        bag = Bag(max_slots=5)
        bag.add_item("xp_boost_small", 3)
        bag.add_item("xp_boost_large", 1)

        assert bag.total_count == 4
        assert bag.free_space == 1
        assert bag.has_space(2) is False

        result = bag.add_item("xp_boost_medium", 2)

        assert result.success is False
        assert result.message == "Bag is full"
        assert bag.get_quantity("xp_boost_medium") == 0

    def test_add_unknown_item(self) -> None:
        result = Bag().add_item("potion")

        assert result.success is False
        assert "Unknown item" in result.message

    def test_add_non_positive_quantity(self) -> None:
        assert Bag().add_item("xp_boost_small", 0).success is False

    def test_remove_drops_empty_stack(self) -> None:
        bag = Bag()
        bag.add_item("xp_boost_small", 2)

        bag.remove_item("xp_boost_small", 1)
        assert bag.get_quantity("xp_boost_small") == 1

        bag.remove_item("xp_boost_small", 1)
        assert "xp_boost_small" not in bag.items

    def test_remove_more_than_held(self) -> None:
        bag = Bag()
        bag.add_item("xp_boost_small", 1)

        result = bag.remove_item("xp_boost_small", 2)

        assert result.success is False
        assert bag.get_quantity("xp_boost_small") == 1

    @pytest.mark.parametrize("quantity", [0, -10])
    def test_remove_non_positive_quantity(self, quantity: int) -> None:
        bag = Bag(max_slots=3)
        bag.add_item("xp_boost_small", 3)

        result = bag.remove_item("xp_boost_small", quantity)

        assert result.success is False
        assert bag.get_quantity("xp_boost_small") == 3
        assert bag.total_count <= bag.max_slots

    def test_items_by_type(self) -> None:
        bag = Bag()
        bag.add_item("xp_boost_small")
        bag.add_item("xp_boost_large")

        assert len(bag.get_items_by_type(ItemType.XP_BOOST)) == 2
        assert bag.get_items_by_type(ItemType.MISC) == []


class TestUseItem:
    """Tests for using items on characters."""

    def test_xp_boost_levels_character(self) -> None:
        bag = Bag()
        bag.add_item("xp_boost_medium")
        character = HanziCharacter(glyph="你")

        result = bag.use_item("xp_boost_medium", character)

        assert result.success is True
        assert result.xp_gained == 150
        assert result.leveled_up is True
        assert character.level == 2
        assert character.xp == 50
        assert bag.get_quantity("xp_boost_medium") == 0

    def test_item_not_in_bag(self) -> None:
        result = Bag().use_item("xp_boost_small", HanziCharacter(glyph="你"))

        assert result.success is False
        assert "not in bag" in result.message
