"""Rule-based structural validation of outfit item-id sets.

Two policies share one rule chain. ``basic`` accepts any wearable combination
(a dress, a top with a bottom, or a layered three-piece look); ``mandatory``
additionally insists on a top, a bottom and shoes. Rules short-circuit on the
first failure and rejection is a normal outcome, never an exception.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set

from models.color_theory import MAX_DISTINCT_COLORS, distinct_colors, find_extreme_clash
from models.garment_item import GarmentItem
from models.taxonomy import (
    CATEGORY_CAPS,
    COLD_ACCESSORY_KEYWORDS,
    COLD_ACCESSORY_TEMPERATURE_C,
    DEFAULT_CATEGORY_CAP,
    FEMININE_KEYWORDS,
    GENDERED_FORMAL_KEYWORDS,
    LAYERING_TEMPERATURE_C,
    MASCULINE_KEYWORDS,
    SWIMWEAR_KEYWORDS,
    WINTER_COAT_KEYWORDS,
    contains_keyword,
    text_words,
)

logger = logging.getLogger(__name__)

BASIC_POLICY = "basic"
MANDATORY_POLICY = "mandatory"

BASIC_MIN_ITEMS = 2
MANDATORY_MIN_ITEMS = 3
MANDATORY_CATEGORIES = ("tops", "bottoms", "shoes")


@dataclass(frozen=True)
class ValidationCheck:
    """Outcome of the rule chain; ``rule`` names the first failed rule."""

    valid: bool
    rule: Optional[str] = None
    reason: str = ""

    def __bool__(self) -> bool:
        return self.valid


_PASSED = ValidationCheck(valid=True)


def _reject(rule: str, reason: str) -> ValidationCheck:
    return ValidationCheck(valid=False, rule=rule, reason=reason)


def _resolve(item_ids: Sequence[int], all_items: Iterable[GarmentItem]) -> Optional[List[GarmentItem]]:
    by_id: Dict[int, GarmentItem] = {item.id: item for item in all_items}
    resolved: List[GarmentItem] = []
    for item_id in item_ids:
        item = by_id.get(item_id)
        if item is None:
            return None
        resolved.append(item)
    return resolved


def _is_cold_accessory(item: GarmentItem) -> bool:
    return contains_keyword(item.subcategory or "", COLD_ACCESSORY_KEYWORDS)


def _gender_markers(item: GarmentItem) -> Set[str]:
    words = set(text_words(f"{item.name} {item.category}"))
    markers: Set[str] = set()
    if item.category == "dresses" or words & FEMININE_KEYWORDS:
        markers.add("feminine")
    if words & MASCULINE_KEYWORDS:
        markers.add("masculine")
    return markers


def _has_gender_conflict(items: List[GarmentItem]) -> bool:
    """Feminine and masculine pieces mixed around a suit or a dress.

    The two markers must come from different items, so a single
    "Men's Dress Shirt" never conflicts with itself.
    """

    feminine = [item.id for item in items if "feminine" in _gender_markers(item)]
    masculine = [item.id for item in items if "masculine" in _gender_markers(item)]
    if not any(f_id != m_id for f_id in feminine for m_id in masculine):
        return False
    return any(contains_keyword(item.name, GENDERED_FORMAL_KEYWORDS) for item in items)


def _check_composition(counts: Counter, mandatory: bool, size: int) -> Optional[ValidationCheck]:
    if mandatory:
        missing = [category for category in MANDATORY_CATEGORIES if not counts.get(category)]
        if missing:
            return _reject("composition", f"missing required categories: {', '.join(missing)}")
        return None

    if counts.get("dresses"):
        return None
    if counts.get("tops") and counts.get("bottoms"):
        return None
    layered = counts.get("outerwear") and (counts.get("tops") or counts.get("bottoms"))
    if size >= 3 and layered:
        return None
    return _reject("composition", "needs a dress, a top and bottom, or a layered combination")


def check_outfit(
    item_ids: Sequence[int],
    all_items: Iterable[GarmentItem],
    temperature_c: Optional[float] = None,
    mandatory: bool = False,
) -> ValidationCheck:
    """Run the structural rule chain and report the first failure.

    ``all_items`` is the owner's full wardrobe: ids resolve against it and the
    layering rules look at what the owner could have worn.
    """

    wardrobe = list(all_items)
    try:
        ids = [int(item_id) for item_id in item_ids]
    except (TypeError, ValueError):
        return _reject("resolve", "malformed item id")
    if len(set(ids)) != len(ids):
        return _reject("resolve", "duplicate item id")
    items = _resolve(ids, wardrobe)
    if items is None:
        return _reject("resolve", "unknown item id")

    minimum = MANDATORY_MIN_ITEMS if mandatory else BASIC_MIN_ITEMS
    if len(items) < minimum:
        return _reject("size", f"needs at least {minimum} items")

    counts = Counter(item.category for item in items)
    for category, count in counts.items():
        cap = CATEGORY_CAPS.get(category, DEFAULT_CATEGORY_CAP)
        if count > cap:
            return _reject("category_cap", f"{count} {category} exceeds cap of {cap}")

    composition = _check_composition(counts, mandatory, len(items))
    if composition is not None:
        return composition

    if temperature_c is not None:
        if temperature_c < LAYERING_TEMPERATURE_C:
            owns_outerwear = any(item.category == "outerwear" for item in wardrobe)
            if owns_outerwear and not counts.get("outerwear"):
                return _reject("layering", "outerwear required below layering temperature")
        if temperature_c < COLD_ACCESSORY_TEMPERATURE_C:
            owns_cold_accessory = any(_is_cold_accessory(item) for item in wardrobe)
            if owns_cold_accessory and not any(_is_cold_accessory(item) for item in items):
                return _reject("cold_accessory", "cold-weather accessory required")

    colors = [color for item in items for color in item.colors]
    clash = find_extreme_clash(colors)
    if clash:
        return _reject("color_clash", f"{clash[0]} clashes with {clash[1]}")
    if len(distinct_colors(colors)) > MAX_DISTINCT_COLORS:
        return _reject("color_count", "too many distinct colors")

    names = [item.name for item in items]
    has_swimwear = any(contains_keyword(name, SWIMWEAR_KEYWORDS) for name in names)
    has_winter_coat = any(contains_keyword(name, WINTER_COAT_KEYWORDS) for name in names)
    if has_swimwear and has_winter_coat:
        return _reject("category_conflict", "swimwear paired with a winter coat")
    if _has_gender_conflict(items):
        return _reject("gender_conflict", "feminine and masculine formal pieces mixed")

    return _PASSED


def is_valid(
    item_ids: Sequence[int],
    all_items: Iterable[GarmentItem],
    temperature_c: Optional[float] = None,
) -> bool:
    """Basic-policy check: at least two items forming a wearable outfit."""

    return check_outfit(item_ids, all_items, temperature_c, mandatory=False).valid


def is_mandatory_valid(
    item_ids: Sequence[int],
    all_items: Iterable[GarmentItem],
    temperature_c: Optional[float] = None,
) -> bool:
    """Mandatory-policy check: top, bottom and shoes, at least three items."""

    return check_outfit(item_ids, all_items, temperature_c, mandatory=True).valid


def check_for_policy(
    policy: str,
    item_ids: Sequence[int],
    all_items: Iterable[GarmentItem],
    temperature_c: Optional[float] = None,
) -> ValidationCheck:
    """Dispatch to the rule chain for a named policy (``basic`` or ``mandatory``)."""

    if policy not in (BASIC_POLICY, MANDATORY_POLICY):
        raise ValueError(f"Unknown validation policy: {policy}")
    result = check_outfit(item_ids, all_items, temperature_c, mandatory=policy == MANDATORY_POLICY)
    if not result.valid:
        logger.debug("outfit %s rejected by %s: %s", list(item_ids), result.rule, result.reason)
    return result


__all__ = [
    "BASIC_POLICY",
    "MANDATORY_POLICY",
    "ValidationCheck",
    "check_outfit",
    "check_for_policy",
    "is_valid",
    "is_mandatory_valid",
]
