"""Outfit composer tests: stylist acceptance, rejection and fallback."""

from __future__ import annotations

import asyncio
import random

import pytest
from conftest import FakeStylist, make_item, stylist_returning

from agents.outfit_stylist_agent import SOURCE_FALLBACK, SOURCE_STYLIST, OutfitStylistAgent
from logic.duplicate_suppression import DuplicateSuppressor
from models.weather import WeatherSnapshot
from tools.gemini_stylist import StylistOutcome


@pytest.fixture()
def wardrobe():
    return [
        make_item(1, "tops", "White Tee", colors=["white"]),
        make_item(2, "bottoms", "Blue Jeans", colors=["blue"]),
        make_item(3, "shoes", "Sneakers", colors=["white"]),
        make_item(4, "tops", "Striped Shirt", colors=["navy"]),
        make_item(5, "dresses", "Ball Gown", occasion_suitability=["very_formal"]),
    ]


def _compose(agent, wardrobe, history, occasion=None, weather=None):
    return asyncio.run(agent.compose(wardrobe, None, weather, occasion, history))


def test_valid_stylist_outfit_is_accepted(wardrobe, history) -> None:
    stylist = stylist_returning({"name": "Easy Saturday", "item_ids": [1, 2, 3], "confidence": 90})
    agent = OutfitStylistAgent(stylist, DuplicateSuppressor(random.Random(0)))

    result = _compose(agent, wardrobe, history)

    assert result.source == SOURCE_STYLIST
    assert [candidate.item_ids for candidate in result.candidates] == [[1, 2, 3]]
    assert result.candidates[0].name == "Easy Saturday"
    assert result.candidates[0].occasion is None
    assert history.keys() == ["1,2,3"]


def test_stylist_sees_filtered_wardrobe_and_history(wardrobe, history) -> None:
    history.add("1,2")
    stylist = FakeStylist()
    agent = OutfitStylistAgent(stylist)

    _compose(agent, wardrobe, history)

    (context,) = stylist.contexts
    assert [entry["id"] for entry in context.wardrobe] == [1, 2, 3, 4]
    assert context.avoid_combos == ["1,2"]
    assert context.occasion == "casual"


def test_mandatory_policy_rejects_two_piece_outfit_and_falls_back(wardrobe, history) -> None:
    stylist = stylist_returning({"name": "Half", "item_ids": [1, 2]})
    agent = OutfitStylistAgent(stylist)

    result = _compose(agent, wardrobe, history)

    assert result.source == SOURCE_FALLBACK
    assert result.debug["rejections"] == {"size": 1}
    assert [candidate.item_ids for candidate in result.candidates] == [[1, 2], [4, 2]]
    assert {candidate.confidence for candidate in result.candidates} == {75}


def test_basic_policy_accepts_top_and_bottom(wardrobe, history) -> None:
    stylist = stylist_returning({"name": "Half", "item_ids": [1, 2]})
    agent = OutfitStylistAgent(stylist, validation_policy="basic")

    result = _compose(agent, wardrobe, history)

    assert result.source == SOURCE_STYLIST


def test_outfit_using_filtered_out_item_is_rejected(wardrobe, history) -> None:
    stylist = stylist_returning({"name": "Gala", "item_ids": [5, 3, 1]})
    agent = OutfitStylistAgent(stylist)

    result = _compose(agent, wardrobe, history, occasion="casual")

    assert result.source == SOURCE_FALLBACK
    assert result.debug["rejections"] == {"filtered_item": 1}
    assert result.debug["removed"] == {5: "too formal for casual"}


def test_unavailable_stylist_falls_back_with_reason(wardrobe, history) -> None:
    agent = OutfitStylistAgent(FakeStylist(StylistOutcome.unavailable("quota_exceeded")))

    result = _compose(agent, wardrobe, history)

    assert result.source == SOURCE_FALLBACK
    assert result.debug["stylist_status"] == "unavailable"
    assert result.debug["stylist_reason"] == "quota_exceeded"
    assert len(result.candidates) == 2


def test_previously_suggested_combination_is_rejected(wardrobe, history) -> None:
    history.add("1,2,3")
    stylist = stylist_returning({"name": "Again", "item_ids": [3, 2, 1]})
    agent = OutfitStylistAgent(stylist)

    result = _compose(agent, wardrobe, history)

    assert result.source == SOURCE_FALLBACK
    assert result.debug["rejections"] == {"duplicate": 1}


def test_cold_weather_requires_outerwear_when_owned(history) -> None:
    wardrobe = [
        make_item(1, "tops", colors=["white"]),
        make_item(2, "bottoms", colors=["blue"]),
        make_item(3, "shoes", colors=["black"]),
        make_item(4, "outerwear", "Wool Coat", colors=["grey"]),
    ]
    stylist = stylist_returning(
        {"name": "No Coat", "item_ids": [1, 2, 3]},
        {"name": "With Coat", "item_ids": [1, 2, 3, 4]},
    )
    agent = OutfitStylistAgent(stylist)

    result = _compose(agent, wardrobe, history, weather=WeatherSnapshot(temperature=4.0))

    assert [candidate.name for candidate in result.candidates] == ["With Coat"]
    assert result.debug["rejections"] == {"layering": 1}


def test_stylist_skipped_when_filtered_pool_is_too_small(history) -> None:
    wardrobe = [make_item(1, "tops"), make_item(2, "bottoms", occasion_suitability=["very_formal"])]
    stylist = FakeStylist()
    agent = OutfitStylistAgent(stylist)

    result = _compose(agent, wardrobe, history)

    assert stylist.contexts == []
    assert result.source == SOURCE_FALLBACK
    assert result.candidates == []
    assert result.debug["stylist_reason"] == "insufficient_wardrobe"


def test_missing_stylist_uses_fallback(wardrobe, history) -> None:
    result = _compose(OutfitStylistAgent(None), wardrobe, history)

    assert result.source == SOURCE_FALLBACK
    assert result.debug["stylist_reason"] == "stylist_not_configured"
