"""Lightweight color harmony tables and checks for outfit validation and scoring."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence, Tuple

from models.taxonomy import normalize_color_name

logger = logging.getLogger(__name__)

# Colors that pair well with each base color; fed to the stylist prompt.
COLOR_HARMONY: Dict[str, List[str]] = {
    "white": ["black", "navy", "grey", "blue", "red", "green", "brown"],
    "black": ["white", "grey", "red", "pink", "yellow", "silver"],
    "navy": ["white", "cream", "light blue", "grey", "khaki", "beige"],
    "grey": ["white", "black", "navy", "pink", "yellow", "blue"],
    "brown": ["cream", "beige", "white", "navy", "khaki", "orange"],
    "blue": ["white", "navy", "grey", "khaki", "brown", "cream"],
    "red": ["white", "black", "navy", "grey", "cream"],
    "green": ["white", "khaki", "brown", "navy", "cream"],
    "khaki": ["white", "navy", "brown", "blue", "green"],
    "beige": ["brown", "navy", "white", "khaki", "blue"],
}
_DEFAULT_PARTNERS = ["white", "black", "grey"]

# Pairs that are rejected outright when both appear (substring match).
EXTREME_CLASH_PAIRS: List[Tuple[str, str]] = [
    ("orange", "hot pink"),
    ("bright green", "bright red"),
]
MAX_DISTINCT_COLORS = 8

NEUTRAL_COLORS = frozenset({"white", "black", "grey", "navy", "beige", "khaki"})
APPROVED_PAIRS: List[Tuple[str, str]] = [
    ("navy", "white"),
    ("black", "white"),
    ("burgundy", "cream"),
]


def _normalise_colors(colors: Iterable[str]) -> List[str]:
    return [normalize_color_name(color) for color in colors if color]


def distinct_colors(colors: Iterable[str]) -> List[str]:
    """Return lower-cased distinct colors preserving first-seen order."""

    seen: List[str] = []
    for color in _normalise_colors(colors):
        if color not in seen:
            seen.append(color)
    return seen


def harmonious_partners(colors: Sequence[str]) -> List[str]:
    """Colors that harmonise with any of the given colors."""

    partners: List[str] = []
    for color in _normalise_colors(colors):
        for partner in COLOR_HARMONY.get(color, _DEFAULT_PARTNERS):
            if partner not in partners:
                partners.append(partner)
    return partners


def find_extreme_clash(colors: Iterable[str]) -> Tuple[str, str] | None:
    """Return the first configured clash pair present in the colors, if any."""

    unique = distinct_colors(colors)
    for first, second in EXTREME_CLASH_PAIRS:
        has_first = any(first in color for color in unique)
        has_second = any(second in color for color in unique)
        if has_first and has_second:
            logger.debug("extreme clash %s + %s in %s", first, second, unique)
            return first, second
    return None


def is_approved_palette(colors: Iterable[str]) -> bool:
    """True for classic pairings or an all-neutral palette."""

    unique = set(distinct_colors(colors))
    if not unique:
        return False
    if any(first in unique and second in unique for first, second in APPROVED_PAIRS):
        return True
    return unique.issubset(NEUTRAL_COLORS)


__all__ = [
    "COLOR_HARMONY",
    "EXTREME_CLASH_PAIRS",
    "MAX_DISTINCT_COLORS",
    "NEUTRAL_COLORS",
    "APPROVED_PAIRS",
    "distinct_colors",
    "harmonious_partners",
    "find_extreme_clash",
    "is_approved_palette",
]
