"""Deterministic confidence scoring for candidate outfits."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from models.color_theory import distinct_colors, is_approved_palette
from models.garment_item import GarmentItem
from models.outfit import OutfitCandidate
from models.taxonomy import (
    BUSINESS_KEYWORDS,
    COLD_ACCESSORY_TEMPERATURE_C,
    COLD_TEMPERATURE_C,
    DEFAULT_OCCASION,
    HOT_TEMPERATURE_C,
    LAYERING_TOP_KEYWORDS,
    RAIN_WEATHER_TAGS,
    contains_keyword,
)
from models.user_profile import UserProfile
from models.weather import WeatherSnapshot

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 80
DEFAULT_SUGGESTION_LIMIT = 5

# (amount, bound) pairs; penalties never push below the bound, rewards never above it.
LAYERING_REWARD = (10, 100)
LAYERING_PENALTY = (25, 40)
WEATHER_FIT_REWARD = (5, 100)
WEATHER_MISMATCH_PENALTY = (20, 50)
APPROVED_PALETTE_REWARD = (10, 100)
BUSY_PALETTE_PENALTY = (15, 60)
FAVORITE_COLOR_REWARD = (5, 100)
AVOID_COLOR_PENALTY = (10, 60)

MAX_CALM_COLORS = 3
COLD_MIN_WARMTH = 2
HOT_MAX_WARMTH = 2


def _clamp(value: int) -> int:
    return max(0, min(100, int(value)))


def _reward(confidence: int, amount: int, ceiling: int) -> int:
    return max(confidence, min(ceiling, confidence + amount))


def _penalize(confidence: int, amount: int, floor: int) -> int:
    return min(confidence, max(floor, confidence - amount))


def _selected_items(candidate: OutfitCandidate, items: Iterable[GarmentItem]) -> List[GarmentItem]:
    by_id = {item.id: item for item in items}
    return [by_id[item_id] for item_id in candidate.item_ids if item_id in by_id]


def _provides_layering(item: GarmentItem) -> bool:
    if item.category == "outerwear":
        return True
    if item.category != "tops":
        return False
    text = item.descriptor_text()
    return contains_keyword(text, LAYERING_TOP_KEYWORDS) or contains_keyword(text, BUSINESS_KEYWORDS)


def _item_weather_mismatch(item: GarmentItem, weather: WeatherSnapshot) -> Optional[str]:
    if item.warmth_level is not None:
        if weather.temperature < COLD_TEMPERATURE_C and item.warmth_level < COLD_MIN_WARMTH:
            return "too light for the cold"
        if weather.temperature > HOT_TEMPERATURE_C and item.warmth_level > HOT_MAX_WARMTH:
            return "too warm for the heat"
    if weather.is_rainy and item.weather_suitability:
        if not set(item.weather_suitability) & RAIN_WEATHER_TAGS:
            return "not rain ready"
    return None


def _color_matches(color: str, preference: str) -> bool:
    color = color.lower()
    preference = preference.strip().lower()
    return bool(preference) and (preference in color or color in preference)


def weather_adjustment(
    confidence: int, selected: List[GarmentItem], weather: Optional[WeatherSnapshot]
) -> Tuple[int, Dict[str, object]]:
    """Apply the layering and per-item weather fit rules."""

    notes: Dict[str, object] = {}
    if weather is None:
        return confidence, notes

    if weather.temperature < COLD_ACCESSORY_TEMPERATURE_C:
        if any(_provides_layering(item) for item in selected):
            confidence = _reward(confidence, *LAYERING_REWARD)
            notes["layering"] = "present"
        else:
            confidence = _penalize(confidence, *LAYERING_PENALTY)
            notes["layering"] = "missing"

    has_weather_data = any(item.warmth_level is not None or item.weather_suitability for item in selected)
    mismatches = {
        item.id: reason
        for item in selected
        if (reason := _item_weather_mismatch(item, weather)) is not None
    }
    if mismatches:
        confidence = _penalize(confidence, *WEATHER_MISMATCH_PENALTY)
        notes["weather_mismatches"] = mismatches
    elif has_weather_data:
        confidence = _reward(confidence, *WEATHER_FIT_REWARD)
        notes["weather_fit"] = True
    return confidence, notes


def color_harmony_adjustment(confidence: int, selected: List[GarmentItem]) -> Tuple[int, Dict[str, object]]:
    """Reward classic or all-neutral palettes; penalise busy ones."""

    colors = [color for item in selected for color in item.colors]
    if not colors:
        return confidence, {}
    if is_approved_palette(colors):
        return _reward(confidence, *APPROVED_PALETTE_REWARD), {"palette": "approved"}
    if len(distinct_colors(colors)) > MAX_CALM_COLORS:
        return _penalize(confidence, *BUSY_PALETTE_PENALTY), {"palette": "busy"}
    return confidence, {}


def preference_adjustment(
    confidence: int, selected: List[GarmentItem], profile: Optional[UserProfile]
) -> Tuple[int, Dict[str, object]]:
    """Favorite colors add a little, avoided colors cost more."""

    if profile is None:
        return confidence, {}
    colors = [color for item in selected for color in item.colors]
    preferences = profile.preferences
    notes: Dict[str, object] = {}
    if any(_color_matches(color, fav) for color in colors for fav in preferences.favorite_colors):
        confidence = _reward(confidence, *FAVORITE_COLOR_REWARD)
        notes["favorite_color"] = True
    if any(_color_matches(color, avoid) for color in colors for avoid in preferences.avoid_colors):
        confidence = _penalize(confidence, *AVOID_COLOR_PENALTY)
        notes["avoid_color"] = True
    return confidence, notes


def score_candidate(
    candidate: OutfitCandidate,
    items: Iterable[GarmentItem],
    weather: Optional[WeatherSnapshot] = None,
    profile: Optional[UserProfile] = None,
) -> OutfitCandidate:
    """Return a copy of ``candidate`` with an adjusted confidence in [0, 100]."""

    selected = _selected_items(candidate, items)
    base = candidate.confidence if candidate.confidence is not None else DEFAULT_CONFIDENCE
    confidence = _clamp(base)

    confidence, weather_notes = weather_adjustment(confidence, selected, weather)
    confidence, color_notes = color_harmony_adjustment(confidence, selected)
    confidence, preference_notes = preference_adjustment(confidence, selected, profile)
    confidence = _clamp(confidence)

    logger.debug(
        "scored %s: %s -> %s %s",
        candidate.key,
        base,
        confidence,
        {**weather_notes, **color_notes, **preference_notes},
    )
    return replace(candidate, confidence=confidence, occasion=candidate.occasion or DEFAULT_OCCASION)


def rank_candidates(candidates: Iterable[OutfitCandidate], limit: int = DEFAULT_SUGGESTION_LIMIT) -> List[OutfitCandidate]:
    """Sort by confidence, highest first (stable), and keep the top ``limit``."""

    ranked = sorted(candidates, key=lambda candidate: candidate.confidence, reverse=True)
    return ranked[: max(0, limit)]


def score_and_rank(
    candidates: Iterable[OutfitCandidate],
    items: Iterable[GarmentItem],
    weather: Optional[WeatherSnapshot] = None,
    profile: Optional[UserProfile] = None,
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> List[OutfitCandidate]:
    items = list(items)
    scored = [score_candidate(candidate, items, weather, profile) for candidate in candidates]
    return rank_candidates(scored, limit)


__all__ = [
    "DEFAULT_CONFIDENCE",
    "DEFAULT_SUGGESTION_LIMIT",
    "score_candidate",
    "rank_candidates",
    "score_and_rank",
    "weather_adjustment",
    "color_harmony_adjustment",
    "preference_adjustment",
]
