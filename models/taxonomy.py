"""Canonical taxonomy definitions for garments, occasions and weather tags.

This module centralises the closed category set and the keyword tables that
drive the heuristic business rules (occasion matching, cold accessories,
swimwear/winter-coat conflicts). Keeping them tabulated here lets filters,
validators and scorers share one definition and lets tests tune them.
"""

import re
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower().replace(" ", "_").replace("-", "_")


class Category(str, Enum):
    TOPS = "tops"
    BOTTOMS = "bottoms"
    DRESSES = "dresses"
    OUTERWEAR = "outerwear"
    ACCESSORIES = "accessories"
    SHOES = "shoes"


CATEGORIES: List[str] = [category.value for category in Category]
UNPROCESSED_CATEGORY = "other"

_CATEGORY_ALIASES: Dict[str, str] = {
    "top": "tops",
    "shirt": "tops",
    "bottom": "bottoms",
    "pants": "bottoms",
    "trousers": "bottoms",
    "dress": "dresses",
    "jacket": "outerwear",
    "coat": "outerwear",
    "accessory": "accessories",
    "shoe": "shoes",
    "footwear": "shoes",
}

# Per-category occurrence caps inside one outfit; anything unlisted is capped at 1.
CATEGORY_CAPS: Dict[str, int] = {
    "accessories": 3,
    "shoes": 2,
}
DEFAULT_CATEGORY_CAP = 1


class Occasion(str, Enum):
    CASUAL = "casual"
    BUSINESS = "business"
    BUSINESS_CASUAL = "business_casual"
    FORMAL = "formal"
    DATE_NIGHT = "date_night"
    SPORTY = "sporty"
    ATHLETIC = "athletic"


DEFAULT_OCCASION = Occasion.CASUAL.value

BUSINESS_KEYWORDS: FrozenSet[str] = frozenset(
    {"business", "business_casual", "smart_casual", "office", "professional", "work", "blazer", "tailored", "oxford"}
)
FORMAL_KEYWORDS: FrozenSet[str] = frozenset(
    {"formal", "very_formal", "evening", "gown", "tuxedo", "suit", "cocktail", "black_tie"}
)
ATHLETIC_KEYWORDS: FrozenSet[str] = frozenset(
    {"athletic", "sporty", "sports", "gym", "workout", "running", "training", "yoga", "activewear", "athleisure"}
)
VERY_CASUAL_KEYWORDS: FrozenSet[str] = frozenset({"very_casual", "gym", "lounge", "loungewear", "pajama"})
VERY_FORMAL_KEYWORDS: FrozenSet[str] = frozenset({"very_formal", "black_tie", "gown", "tuxedo"})

# Pieces that stay acceptable for business occasions even without business tags.
TAILORED_BOTTOM_KEYWORDS: FrozenSet[str] = frozenset({"trousers", "chinos", "slacks", "pencil_skirt", "tailored", "dress_pants"})
SNEAKER_KEYWORDS: FrozenSet[str] = frozenset({"sneaker", "sneakers", "trainers", "running_shoes"})
VERSATILE_ACCESSORY_KEYWORDS: FrozenSet[str] = frozenset({"belt", "watch"})
LAYERING_TOP_KEYWORDS: FrozenSet[str] = frozenset({"blazer", "cardigan", "sweater", "jumper", "pullover"})

COLD_ACCESSORY_KEYWORDS: FrozenSet[str] = frozenset({"glove", "scarf", "scarves", "hat", "beanie"})
SWIMWEAR_KEYWORDS: FrozenSet[str] = frozenset({"swim", "swimwear", "bikini", "swimsuit", "trunks", "boardshort"})
WINTER_COAT_KEYWORDS: FrozenSet[str] = frozenset({"parka", "puffer", "winter coat", "down jacket", "overcoat", "peacoat"})

# Wardrobe orientation markers, matched against whole words of name and category.
FEMININE_KEYWORDS: FrozenSet[str] = frozenset(
    {"women", "womens", "feminine", "dress", "dresses", "skirt", "blouse", "heels", "pumps"}
)
MASCULINE_KEYWORDS: FrozenSet[str] = frozenset({"men", "mens", "masculine", "suit", "tie", "tuxedo"})
# Formal pieces that make a feminine/masculine mix read as a clash.
GENDERED_FORMAL_KEYWORDS: FrozenSet[str] = frozenset({"suit", "dress"})

COLD_WEATHER_TAGS: FrozenSet[str] = frozenset({"cold", "winter", "snow", "freezing", "all_season", "all_weather"})
HOT_WEATHER_TAGS: FrozenSet[str] = frozenset({"sun", "sunny", "hot", "warm", "summer", "light", "all_season", "all_weather"})
RAIN_WEATHER_TAGS: FrozenSet[str] = frozenset({"rain", "rainy", "waterproof", "water_resistant", "all_weather"})
RAINY_CONDITIONS: FrozenSet[str] = frozenset({"rain", "rainy", "drizzle", "thunderstorm", "storm"})

COLD_TEMPERATURE_C = 5.0
HOT_TEMPERATURE_C = 25.0
LAYERING_TEMPERATURE_C = 14.0
COLD_ACCESSORY_TEMPERATURE_C = 10.0

COLOR_MAP = {
    "navy blue": "navy",
    "light blue": "light blue",
    "sky blue": "light blue",
    "gray": "grey",
    "off white": "white",
    "off-white": "white",
    "ivory": "cream",
}


def validate_category(value: Optional[str]) -> str:
    """Normalise a category, coercing anything outside the closed set to ``other``."""

    if not value:
        return UNPROCESSED_CATEGORY
    key = _normalize_key(str(value))
    key = _CATEGORY_ALIASES.get(key, key)
    if key not in CATEGORIES:
        return UNPROCESSED_CATEGORY
    return key


def is_known_category(value: str) -> bool:
    return value in CATEGORIES


def normalize_occasion(value: Optional[str]) -> Optional[str]:
    """Map loose occasion strings (``"Date Night"``, ``"date-night"``) to tags."""

    if value is None:
        return None
    key = _normalize_key(str(value))
    return key or None


def normalize_color_name(raw_string: str) -> str:
    """Map a raw color string to a canonical lower-case color name."""

    key = " ".join(str(raw_string).strip().lower().replace("_", " ").split())
    return COLOR_MAP.get(key, key)


def normalise_tags(values: Iterable[str]) -> List[str]:
    """Normalise and deduplicate free-form tags, preserving order."""

    normalised = []
    seen = set()
    for value in values:
        key = _normalize_key(str(value))
        if key and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


_WORD_PATTERN = re.compile(r"[a-z]+")


def text_words(text: str) -> List[str]:
    """Lower-cased alphabetic words of ``text``; ``Men's`` yields ``men`` and ``s``."""

    return _WORD_PATTERN.findall(text.lower())


def _word_matches(word: str, keyword: str) -> bool:
    return word in (keyword, keyword + "s", keyword + "es")


def contains_keyword(text: str, keywords: Iterable[str]) -> bool:
    """Whole-word match of any keyword against a text blob.

    Multi-word keywords (``business_casual``, ``winter coat``) must appear as
    consecutive words. A plain ``s``/``es`` plural is accepted on the last word,
    so ``gloves`` matches ``glove`` while ``workout`` never matches ``work``.
    """

    words = text_words(text)
    for keyword in keywords:
        parts = text_words(keyword)
        if not parts:
            continue
        span = len(parts)
        for start in range(len(words) - span + 1):
            window = words[start:start + span]
            if window[:-1] == parts[:-1] and _word_matches(window[-1], parts[-1]):
                return True
    return False


__all__ = [
    "Category",
    "CATEGORIES",
    "UNPROCESSED_CATEGORY",
    "CATEGORY_CAPS",
    "DEFAULT_CATEGORY_CAP",
    "Occasion",
    "DEFAULT_OCCASION",
    "BUSINESS_KEYWORDS",
    "FORMAL_KEYWORDS",
    "ATHLETIC_KEYWORDS",
    "VERY_CASUAL_KEYWORDS",
    "VERY_FORMAL_KEYWORDS",
    "TAILORED_BOTTOM_KEYWORDS",
    "SNEAKER_KEYWORDS",
    "VERSATILE_ACCESSORY_KEYWORDS",
    "LAYERING_TOP_KEYWORDS",
    "COLD_ACCESSORY_KEYWORDS",
    "SWIMWEAR_KEYWORDS",
    "WINTER_COAT_KEYWORDS",
    "FEMININE_KEYWORDS",
    "MASCULINE_KEYWORDS",
    "GENDERED_FORMAL_KEYWORDS",
    "COLD_WEATHER_TAGS",
    "HOT_WEATHER_TAGS",
    "RAIN_WEATHER_TAGS",
    "RAINY_CONDITIONS",
    "COLD_TEMPERATURE_C",
    "HOT_TEMPERATURE_C",
    "LAYERING_TEMPERATURE_C",
    "COLD_ACCESSORY_TEMPERATURE_C",
    "validate_category",
    "is_known_category",
    "normalize_occasion",
    "normalize_color_name",
    "normalise_tags",
    "text_words",
    "contains_keyword",
]
