"""Deterministic filtering functions for occasion and weather."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Set

from models.garment_item import GarmentItem
from models.taxonomy import (
    ATHLETIC_KEYWORDS,
    BUSINESS_KEYWORDS,
    COLD_TEMPERATURE_C,
    COLD_WEATHER_TAGS,
    FORMAL_KEYWORDS,
    HOT_TEMPERATURE_C,
    HOT_WEATHER_TAGS,
    RAIN_WEATHER_TAGS,
    SNEAKER_KEYWORDS,
    TAILORED_BOTTOM_KEYWORDS,
    VERSATILE_ACCESSORY_KEYWORDS,
    VERY_CASUAL_KEYWORDS,
    VERY_FORMAL_KEYWORDS,
    contains_keyword,
    normalise_tags,
    normalize_occasion,
)
from models.weather import WeatherSnapshot


@dataclass(frozen=True)
class FilteringResult:
    """Captures the outcome of a single filtering step."""

    items: List[GarmentItem]
    removed: Dict[int, str]
    debug: Dict[str, object]


def _tag_set(item: GarmentItem) -> Set[str]:
    """Normalised descriptive tags, excluding the free-text name."""

    tags = normalise_tags(
        [value for value in (item.style, item.formality, item.subcategory) if value]
    )
    return set(tags) | set(item.occasion_suitability)


def _tagged(item: GarmentItem, keywords: FrozenSet[str]) -> bool:
    if _tag_set(item) & keywords:
        return True
    return contains_keyword(item.subcategory or "", keywords)


def _is_business_versatile(item: GarmentItem) -> bool:
    text = item.descriptor_text()
    if item.category == "tops":
        return not _tagged(item, ATHLETIC_KEYWORDS)
    if item.category == "bottoms":
        return contains_keyword(text, TAILORED_BOTTOM_KEYWORDS)
    if item.category == "shoes":
        return not contains_keyword(text, SNEAKER_KEYWORDS) and not _tagged(item, ATHLETIC_KEYWORDS)
    if item.category == "accessories":
        return contains_keyword(text, VERSATILE_ACCESSORY_KEYWORDS)
    return False


def _occasion_reason(item: GarmentItem, occasion: Optional[str]) -> Optional[str]:
    if occasion in (None, "casual"):
        if _tagged(item, VERY_FORMAL_KEYWORDS):
            return "too formal for casual"
        return None
    if occasion in ("business", "business_casual"):
        if _tagged(item, ATHLETIC_KEYWORDS):
            return "not business appropriate"
        if _tagged(item, BUSINESS_KEYWORDS) or _is_business_versatile(item):
            return None
        return "not business appropriate"
    if occasion == "formal":
        if _tagged(item, FORMAL_KEYWORDS) or (item.formality or "").lower() == "formal":
            return None
        return "not formal"
    if occasion in ("sporty", "athletic"):
        if _tagged(item, ATHLETIC_KEYWORDS):
            return None
        return "not athletic"
    if occasion == "date_night":
        if _tagged(item, ATHLETIC_KEYWORDS) or _tagged(item, VERY_CASUAL_KEYWORDS):
            return "too casual for date night"
        return None
    return None


def filter_by_occasion(items: List[GarmentItem], occasion: Optional[str]) -> FilteringResult:
    """Narrow the wardrobe to items plausible for ``occasion``.

    Unknown occasions keep everything; ``None`` behaves like ``casual``.
    """

    normalized = normalize_occasion(occasion)
    removed: Dict[int, str] = {}
    kept: List[GarmentItem] = []
    for item in items:
        reason = _occasion_reason(item, normalized)
        if reason:
            removed[item.id] = reason
        else:
            kept.append(item)

    debug = {
        "input_count": len(items),
        "kept_count": len(kept),
        "removed_count": len(removed),
        "occasion": normalized or "casual",
    }
    return FilteringResult(items=kept, removed=removed, debug=debug)


def filter_by_weather(items: List[GarmentItem], weather: Optional[WeatherSnapshot]) -> FilteringResult:
    """Filter wardrobe items using temperature and condition rules.

    Items without any weather tags are always retained.
    """

    if weather is None:
        return FilteringResult(
            items=list(items),
            removed={},
            debug={"input_count": len(items), "kept_count": len(items), "removed_count": 0, "weather": None},
        )

    cold = weather.temperature < COLD_TEMPERATURE_C
    hot = weather.temperature > HOT_TEMPERATURE_C
    rainy = weather.is_rainy

    removed: Dict[int, str] = {}
    kept: List[GarmentItem] = []
    for item in items:
        tags = set(item.weather_suitability)
        reason = None
        if tags:
            if cold and not tags & COLD_WEATHER_TAGS:
                reason = "not suitable for cold weather"
            elif hot and not tags & HOT_WEATHER_TAGS:
                reason = "not suitable for hot weather"
            elif rainy and not tags & RAIN_WEATHER_TAGS:
                reason = "not suitable for rain"
        if reason:
            removed[item.id] = reason
        else:
            kept.append(item)

    debug = {
        "input_count": len(items),
        "kept_count": len(kept),
        "removed_count": len(removed),
        "temperature": weather.temperature,
        "condition": weather.condition,
        "cold": cold,
        "hot": hot,
        "rainy": rainy,
    }
    return FilteringResult(items=kept, removed=removed, debug=debug)


__all__ = ["FilteringResult", "filter_by_occasion", "filter_by_weather"]
