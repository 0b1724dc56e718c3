"""Mappings between occasions and outfit naming templates."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

from models.taxonomy import DEFAULT_OCCASION, normalize_occasion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OccasionStyleProfile:
    """Naming templates for one occasion family."""

    name: str
    name_templates: List[str]


_OCCASION_STYLES: Dict[str, OccasionStyleProfile] = {
    "casual": OccasionStyleProfile(
        name="casual",
        name_templates=[
            "Weekend Comfort",
            "Laid-Back Style",
            "Casual Chic",
            "Effortless Look",
            "Relaxed Elegance",
            "Everyday Style",
            "Comfortable Cool",
            "Easy Going",
        ],
    ),
    "business": OccasionStyleProfile(
        name="business",
        name_templates=[
            "Professional Edge",
            "Corporate Style",
            "Business Sharp",
            "Office Ready",
            "Executive Look",
            "Workplace Chic",
            "Business Sophisticated",
            "Professional Polish",
        ],
    ),
    "formal": OccasionStyleProfile(
        name="formal",
        name_templates=[
            "Evening Elegance",
            "Formal Finesse",
            "Sophisticated Style",
            "Refined Look",
            "Dress-up Ready",
            "Special Occasion",
            "Polished Perfection",
            "Formal Grace",
        ],
    ),
    "date_night": OccasionStyleProfile(
        name="date_night",
        name_templates=[
            "Romantic Charm",
            "Date Night Allure",
            "Evening Romance",
            "Captivating Style",
            "Dinner Date Ready",
            "Night Out Chic",
            "Romantic Elegance",
            "Date Perfect",
        ],
    ),
    "sporty": OccasionStyleProfile(
        name="sporty",
        name_templates=[
            "Athletic Edge",
            "Sporty Chic",
            "Active Style",
            "Fitness Ready",
            "Athleisure Look",
            "Workout Vibes",
            "Sport Luxe",
            "Active Comfort",
        ],
    ),
}

_OCCASION_FAMILIES = {
    "business_casual": "business",
    "athletic": "sporty",
}


def occasion_family(occasion: str | None) -> str:
    """Collapse an occasion tag onto one of the five template families."""

    normalized = normalize_occasion(occasion) or DEFAULT_OCCASION
    normalized = _OCCASION_FAMILIES.get(normalized, normalized)
    if normalized not in _OCCASION_STYLES:
        logger.info("Unknown occasion '%s', defaulting to casual templates", occasion)
        return DEFAULT_OCCASION
    return normalized


def get_occasion_style(occasion: str | None) -> OccasionStyleProfile:
    """Return the :class:`OccasionStyleProfile` for an occasion (casual if unknown)."""

    profile = _OCCASION_STYLES[occasion_family(occasion)]
    return OccasionStyleProfile(
        name=profile.name,
        name_templates=list(profile.name_templates),
    )


__all__ = ["OccasionStyleProfile", "get_occasion_style", "occasion_family"]
