"""Restocking suggestions derived from weak outfit suggestions."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol

from models.garment_item import GarmentItem
from models.outfit import OutfitCandidate, ShoppingRecommendation
from models.taxonomy import CATEGORIES, COLD_ACCESSORY_TEMPERATURE_C, HOT_TEMPERATURE_C
from models.weather import WeatherSnapshot

logger = logging.getLogger(__name__)

LOW_CONFIDENCE_THRESHOLD = 70
MAX_RECOMMENDATIONS = 5
ESSENTIAL_COLORS = ("black", "white", "navy", "grey")

CATEGORY_SUGGESTIONS = {
    "outerwear": "A versatile blazer or cardigan for layering",
    "tops": "A few basic tops in neutral colors",
    "bottoms": "Well-fitting jeans or tailored trousers",
    "shoes": "Comfortable everyday shoes that go with everything",
    "dresses": "A simple dress for effortless one-piece outfits",
    "accessories": "A belt or watch to finish outfits",
}
COLD_SUGGESTION = "A warm coat, a knit sweater, thermal layers and boots"
HOT_SUGGESTION = "A light breathable shirt, shorts, sandals and a sun hat"
RAIN_SUGGESTION = "A waterproof jacket, rain boots and an umbrella"


class RecommendationSink(Protocol):
    def save_recommendation(self, record: ShoppingRecommendation) -> ShoppingRecommendation:
        ...


def build_recommendation(
    owner_id: str,
    ranked_outfits: Iterable[OutfitCandidate],
    wardrobe: Iterable[GarmentItem],
    weather: Optional[WeatherSnapshot] = None,
) -> Optional[ShoppingRecommendation]:
    """Return a recommendation when any outfit scores below the threshold, else ``None``."""

    low = [outfit.confidence for outfit in ranked_outfits if outfit.confidence < LOW_CONFIDENCE_THRESHOLD]
    if not low:
        return None

    wardrobe = list(wardrobe)
    present_categories = {item.category for item in wardrobe}
    present_colors = {color for item in wardrobe for color in item.colors}
    missing_categories = [category for category in CATEGORIES if category not in present_categories]
    missing_colors = [color for color in ESSENTIAL_COLORS if color not in present_colors]

    recommendations: List[str] = [CATEGORY_SUGGESTIONS[category] for category in missing_categories]
    if missing_colors:
        recommendations.append(f"Essential pieces in {', '.join(missing_colors)}")
    if weather is not None:
        if weather.temperature < COLD_ACCESSORY_TEMPERATURE_C:
            recommendations.append(COLD_SUGGESTION)
        elif weather.temperature > HOT_TEMPERATURE_C:
            recommendations.append(HOT_SUGGESTION)
        if weather.is_rainy:
            recommendations.append(RAIN_SUGGESTION)

    if not recommendations:
        return None
    return ShoppingRecommendation(
        owner_id=owner_id,
        recommendations=recommendations[:MAX_RECOMMENDATIONS],
        missing_categories=missing_categories,
        missing_colors=missing_colors,
        confidence=round(sum(low) / len(low)),
    )


class ShoppingGapAnalyzer:
    """Persists a recommendation record whenever ranked outfits look weak."""

    def __init__(self, store: RecommendationSink) -> None:
        self.store = store

    def analyze(
        self,
        owner_id: str,
        ranked_outfits: Iterable[OutfitCandidate],
        wardrobe: Iterable[GarmentItem],
        weather: Optional[WeatherSnapshot] = None,
    ) -> Optional[ShoppingRecommendation]:
        record = build_recommendation(owner_id, ranked_outfits, wardrobe, weather)
        if record is None:
            return None
        saved = self.store.save_recommendation(record)
        logger.info("stored %d shopping recommendations", len(saved.recommendations))
        return saved


__all__ = ["ShoppingGapAnalyzer", "build_recommendation", "LOW_CONFIDENCE_THRESHOLD"]
