"""Combinatorial fallback generator tests."""

from __future__ import annotations

from conftest import make_item

from logic.outfit_builder import generate_basic


def _two_by_two():
    return [
        make_item(1, "tops", "Tee", colors=["white"]),
        make_item(2, "tops", "Shirt", colors=["blue"]),
        make_item(3, "bottoms", "Jeans", colors=["navy"]),
        make_item(4, "bottoms", "Chinos", colors=["khaki"]),
    ]


def test_all_four_pairings_in_iteration_order(history) -> None:
    outfits = generate_basic(_two_by_two(), history, max_outfits=4)

    assert [outfit.item_ids for outfit in outfits] == [[1, 3], [1, 4], [2, 3], [2, 4]]
    assert {outfit.confidence for outfit in outfits} == {75}
    assert all(outfit.occasion == "casual" for outfit in outfits)


def test_default_cap_is_three_and_history_records_emitted_only(history) -> None:
    outfits = generate_basic(_two_by_two(), history)

    assert len(outfits) == 3
    assert history.keys() == ["1,3", "1,4", "2,3"]


def test_second_call_skips_previous_pairings(history) -> None:
    wardrobe = _two_by_two()
    first = generate_basic(wardrobe, history)
    second = generate_basic(wardrobe, history)
    third = generate_basic(wardrobe, history)

    assert [outfit.item_ids for outfit in second] == [[2, 4]]
    assert third == []
    assert not {outfit.key for outfit in first} & {outfit.key for outfit in second}


def test_pair_naming_and_narrative(history) -> None:
    wardrobe = [
        make_item(1, "tops", "White Tee", colors=["white"]),
        make_item(2, "bottoms", "Blue Jeans", colors=["blue"]),
    ]

    (outfit,) = generate_basic(wardrobe, history, occasion="Business")

    assert outfit.name == "white White Tee with blue Blue Jeans"
    assert outfit.item_ids == [1, 2]
    assert outfit.occasion == "business"
    assert outfit.description == "Classic combination of White Tee and Blue Jeans"
    assert outfit.styling_tips == "Keep accessories simple for a clean look"
    assert outfit.weather_note == "Suitable for most conditions"


def test_dresses_are_single_item_formal_outfits(history) -> None:
    wardrobe = [
        make_item(1, "dresses", "Slip Dress", colors=["black"]),
        make_item(2, "dresses", "Wrap Dress", colors=["red"]),
        make_item(3, "dresses", "Maxi Dress", colors=["green"]),
    ]

    outfits = generate_basic(wardrobe, history)

    assert [outfit.item_ids for outfit in outfits] == [[1], [2]]
    assert [outfit.name for outfit in outfits] == ["Elegant black Dress", "Elegant red Dress"]
    assert {outfit.confidence for outfit in outfits} == {80}
    assert {outfit.occasion for outfit in outfits} == {"formal"}


def test_dresses_fill_remaining_slots_after_pairs(history) -> None:
    wardrobe = [
        make_item(1, "tops", colors=["white"]),
        make_item(2, "bottoms", colors=["blue"]),
        make_item(3, "dresses", colors=["black"]),
    ]

    outfits = generate_basic(wardrobe, history)

    assert [outfit.item_ids for outfit in outfits] == [[1, 2], [3]]


def test_insufficient_wardrobe_returns_empty(history) -> None:
    assert generate_basic([make_item(1, "tops")], history) == []
    assert generate_basic([make_item(1, "tops"), make_item(2, "other")], history) == []
    assert history.keys() == []


def test_single_top_and_bottom_gives_one_outfit(history) -> None:
    wardrobe = [make_item(1, "tops", colors=["white"]), make_item(2, "bottoms", colors=["blue"])]

    outfits = generate_basic(wardrobe, history)

    assert len(outfits) == 1
    assert outfits[0].item_ids == [1, 2]
    assert outfits[0].confidence == 75
