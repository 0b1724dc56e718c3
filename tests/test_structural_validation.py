"""Structural validator rule-chain tests for the basic and mandatory policies."""

from __future__ import annotations

import pytest
from conftest import make_item

from logic.structural_validation import check_for_policy, check_outfit, is_mandatory_valid, is_valid


@pytest.fixture()
def wardrobe():
    return [
        make_item(1, "tops", "White Tee", colors=["white"]),
        make_item(2, "bottoms", "Blue Jeans", colors=["blue"]),
        make_item(3, "shoes", "Loafers", colors=["brown"]),
        make_item(4, "dresses", "Black Dress", colors=["black"]),
        make_item(5, "outerwear", "Denim Jacket", colors=["blue"]),
        make_item(6, "tops", "Grey Sweater", colors=["grey"]),
        make_item(7, "accessories", "Watch"),
        make_item(8, "accessories", "Belt"),
        make_item(9, "accessories", "Bracelet"),
        make_item(10, "accessories", "Necklace"),
    ]


def test_basic_accepts_top_and_bottom(wardrobe) -> None:
    assert is_valid([1, 2], wardrobe)


def test_basic_accepts_dress_with_shoes(wardrobe) -> None:
    assert is_valid([4, 3], wardrobe)


def test_basic_accepts_layered_three_piece(wardrobe) -> None:
    assert is_valid([1, 5, 3], wardrobe)


def test_unknown_or_duplicate_ids_are_rejected(wardrobe) -> None:
    assert check_outfit([1, 99], wardrobe).rule == "resolve"
    assert check_outfit([1, 1, 2], wardrobe).rule == "resolve"


def test_single_item_fails_minimum_size(wardrobe) -> None:
    assert check_outfit([4], wardrobe).rule == "size"


def test_category_caps(wardrobe) -> None:
    assert check_outfit([1, 6, 2], wardrobe).rule == "category_cap"
    assert is_valid([1, 2, 7, 8, 9], wardrobe)
    assert check_outfit([1, 2, 7, 8, 9, 10], wardrobe).rule == "category_cap"


def test_top_with_shoes_only_is_incomplete(wardrobe) -> None:
    assert check_outfit([1, 3], wardrobe).rule == "composition"


def test_mandatory_requires_top_bottom_and_shoes(wardrobe) -> None:
    assert is_mandatory_valid([1, 2, 3], wardrobe)
    assert not is_mandatory_valid([1, 2], wardrobe)
    result = check_outfit([4, 3, 7], wardrobe, mandatory=True)
    assert result.rule == "composition"


def test_cold_layering_rule_requires_outerwear_when_owned(wardrobe) -> None:
    assert check_outfit([1, 2, 3], wardrobe, temperature_c=3, mandatory=True).rule == "layering"
    assert is_mandatory_valid([1, 2, 3, 5], wardrobe, temperature_c=3)


def test_layering_not_enforced_without_outerwear_in_wardrobe() -> None:
    wardrobe = [make_item(1, "tops"), make_item(2, "bottoms"), make_item(3, "shoes")]

    assert is_mandatory_valid([1, 2, 3], wardrobe, temperature_c=2)
    assert is_valid([1, 2], wardrobe, temperature_c=2)


def test_cold_accessory_required_when_owned() -> None:
    wardrobe = [
        make_item(1, "tops"),
        make_item(2, "bottoms"),
        make_item(3, "accessories", "Wool Scarf", subcategory="scarf"),
    ]

    assert check_outfit([1, 2], wardrobe, temperature_c=8).rule == "cold_accessory"
    assert is_valid([1, 2, 3], wardrobe, temperature_c=8)
    assert is_valid([1, 2], wardrobe, temperature_c=12)


def test_extreme_color_clash_rejected() -> None:
    wardrobe = [
        make_item(1, "tops", colors=["orange"]),
        make_item(2, "bottoms", colors=["hot pink"]),
    ]

    assert check_outfit([1, 2], wardrobe).rule == "color_clash"


def test_more_than_eight_colors_rejected() -> None:
    wardrobe = [
        make_item(1, "tops", colors=["red", "blue", "green", "yellow", "purple"]),
        make_item(2, "bottoms", colors=["white", "black", "brown", "beige"]),
    ]

    assert check_outfit([1, 2], wardrobe).rule == "color_count"


def test_swimwear_with_winter_coat_rejected() -> None:
    wardrobe = [
        make_item(1, "tops", "Bikini Top"),
        make_item(2, "bottoms", "Swim Shorts"),
        make_item(3, "outerwear", "Puffer Jacket"),
    ]

    assert check_outfit([1, 2, 3], wardrobe).rule == "category_conflict"


def test_policy_dispatch(wardrobe) -> None:
    assert check_for_policy("basic", [1, 2], wardrobe).valid
    assert not check_for_policy("mandatory", [1, 2], wardrobe).valid
    with pytest.raises(ValueError):
        check_for_policy("lenient", [1, 2], wardrobe)


def test_mixed_gender_formal_pieces_rejected() -> None:
    wardrobe = [
        make_item(1, "dresses", "Floral Dress"),
        make_item(2, "outerwear", "Men's Suit Jacket"),
        make_item(3, "tops", "Men's Shirt"),
        make_item(4, "bottoms", "Pleated Skirt"),
        make_item(5, "tops", "Men's Dress Shirt"),
        make_item(6, "bottoms", "Grey Trousers"),
    ]

    result = check_outfit([1, 2], wardrobe)

    assert result.rule == "gender_conflict"
    assert not check_for_policy("mandatory", [1, 2], wardrobe).valid
    assert is_valid([3, 4], wardrobe)
    assert is_valid([5, 6], wardrobe)
    assert is_valid([3, 6, 2], wardrobe)
