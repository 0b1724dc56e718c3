"""End-to-end suggestion pipeline tests with a fake stylist and mock weather."""

from __future__ import annotations

import asyncio

import pytest
from conftest import OWNER, FakeStylist, make_item, stylist_returning

from agents.orchestrator import OrchestratorAgent
from agents.outfit_stylist_agent import OutfitStylistAgent
from logic.shopping_gaps import ShoppingGapAnalyzer
from memory.suggestion_history import SuggestionHistoryRegistry
from memory.user_profile import UserProfileService
from models.weather import WeatherSnapshot
from tools.weather_provider import MockWeatherProvider


@pytest.fixture()
def profiles(tmp_path):
    return UserProfileService(tmp_path / "profiles")


def _orchestrator(store, profiles, stylist=None, weather_provider=None):
    return OrchestratorAgent(
        store=store,
        profile_service=profiles,
        stylist_agent=OutfitStylistAgent(stylist or FakeStylist()),
        history_registry=SuggestionHistoryRegistry(),
        weather_provider=weather_provider,
        gap_analyzer=ShoppingGapAnalyzer(store),
    )


def _add(store, category, name, **fields):
    return store.create_item(make_item(0, category, name, **fields))


def _suggest(orchestrator, occasion=None):
    return asyncio.run(orchestrator.get_outfit_suggestions(OWNER, occasion))


def test_undersized_wardrobe_returns_no_outfits(store, profiles) -> None:
    _add(store, "tops", "White Tee")
    _add(store, "other", "Mystery Upload", is_verified=False)

    response = _suggest(_orchestrator(store, profiles))

    assert response.outfits == []
    assert response.source == "none"
    assert response.debug_summary["reason"] == "insufficient_wardrobe"


def test_unavailable_stylist_yields_basic_pairing(store, profiles) -> None:
    tee = _add(store, "tops", "White Tee", colors=["white"])
    jeans = _add(store, "bottoms", "Blue Jeans", colors=["blue"])

    response = _suggest(_orchestrator(store, profiles))

    assert response.source == "fallback"
    assert [outfit.item_ids for outfit in response.outfits] == [[tee.id, jeans.id]]
    assert response.outfits[0].confidence == 75
    assert store.list_recommendations(OWNER) == []


def test_repeated_requests_never_repeat_a_combination(store, profiles) -> None:
    for name in ("Tee", "Shirt"):
        _add(store, "tops", name)
    for name in ("Jeans", "Chinos"):
        _add(store, "bottoms", name)
    orchestrator = _orchestrator(store, profiles)

    first = _suggest(orchestrator)
    second = _suggest(orchestrator)
    third = _suggest(orchestrator)

    first_keys = {outfit.key for outfit in first.outfits}
    second_keys = {outfit.key for outfit in second.outfits}
    assert len(first_keys) == 3
    assert len(second_keys) == 1
    assert not first_keys & second_keys
    assert third.outfits == []
    assert third.source == "none"


def test_history_is_kept_per_owner(store, profiles) -> None:
    for owner in (OWNER, "owner-2"):
        store.create_item(make_item(0, "tops", "Tee", owner_id=owner))
        store.create_item(make_item(0, "bottoms", "Jeans", owner_id=owner))
    orchestrator = _orchestrator(store, profiles)

    mine = _suggest(orchestrator)
    theirs = asyncio.run(orchestrator.get_outfit_suggestions("owner-2"))

    assert len(mine.outfits) == 1
    assert len(theirs.outfits) == 1


def test_stylist_outfits_are_scored_and_weak_results_stored_as_gaps(store, profiles) -> None:
    tee = _add(store, "tops", "White Tee", colors=["white"])
    jeans = _add(store, "bottoms", "Blue Jeans", colors=["blue"])
    shoes = _add(store, "shoes", "Sneakers", colors=["white"])
    profiles.update_profile(OWNER, {"location": "Oslo"})
    weather = MockWeatherProvider(WeatherSnapshot(temperature=3.0, condition="cloudy"))
    stylist = stylist_returning({"name": "Frosty", "item_ids": [tee.id, jeans.id, shoes.id], "confidence": 80})

    response = _suggest(_orchestrator(store, profiles, stylist, weather))

    assert response.source == "stylist"
    assert response.weather == WeatherSnapshot(temperature=3.0, condition="cloudy")
    assert [outfit.confidence for outfit in response.outfits] == [55]
    assert weather.calls == 1

    (record,) = store.list_recommendations(OWNER)
    assert record.confidence == 55
    assert record.missing_categories == ["dresses", "outerwear", "accessories"]
    assert "A versatile blazer or cardigan for layering" in record.recommendations
    assert response.debug_summary["shopping_recommendation"] is True


def test_response_serialises_for_the_api(store, profiles) -> None:
    _add(store, "tops", "White Tee", colors=["white"])
    _add(store, "bottoms", "Blue Jeans", colors=["blue"])

    payload = _suggest(_orchestrator(store, profiles), occasion="Casual").to_dict()

    assert payload["status"] == "ok"
    assert payload["source"] == "fallback"
    assert payload["weather"] is None
    assert payload["outfits"][0]["name"] == "white White Tee with blue Blue Jeans"
    assert payload["debug_summary"]["occasion"] == "casual"
