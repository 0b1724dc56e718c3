"""Deterministic combinatorial outfit assembly used when the stylist is unavailable."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Set

from logic.duplicate_suppression import generate_unique_style_name
from memory.suggestion_history import SuggestionHistory
from models.garment_item import GarmentItem
from models.outfit import OutfitCandidate, combo_key
from models.taxonomy import DEFAULT_OCCASION, normalize_occasion

logger = logging.getLogger(__name__)

DEFAULT_MAX_OUTFITS = 3
PAIR_CONFIDENCE = 75
DRESS_CONFIDENCE = 80
MAX_TOPS = 2
MAX_BOTTOMS = 2
MAX_DRESSES = 2
MIN_USABLE_ITEMS = 2


def _label(item: GarmentItem) -> str:
    return " ".join(part for part in (item.dominant_color, item.name) if part)


def _unique_name(name: str, occasion: str, items: List[GarmentItem], used_names: Set[str]) -> str:
    if name in used_names:
        name = generate_unique_style_name(occasion, items, used_names)
    used_names.add(name)
    return name


def _pair_candidate(top: GarmentItem, bottom: GarmentItem, occasion: str, used_names: Set[str]) -> OutfitCandidate:
    name = _unique_name(f"{_label(top)} with {_label(bottom)}", occasion, [top, bottom], used_names)
    return OutfitCandidate(
        name=name,
        item_ids=[top.id, bottom.id],
        occasion=occasion,
        confidence=PAIR_CONFIDENCE,
        description=f"Classic combination of {top.name} and {bottom.name}",
        styling_tips="Keep accessories simple for a clean look",
        weather_note="Suitable for most conditions",
    )


def _dress_candidate(dress: GarmentItem, used_names: Set[str]) -> OutfitCandidate:
    base_name = " ".join(part for part in ("Elegant", dress.dominant_color, "Dress") if part)
    return OutfitCandidate(
        name=_unique_name(base_name, "formal", [dress], used_names),
        item_ids=[dress.id],
        occasion="formal",
        confidence=DRESS_CONFIDENCE,
        description=f"Simple and elegant look featuring {dress.name}",
        styling_tips="Add accessories to personalize the look",
        weather_note="Perfect for mild weather",
    )


def generate_basic(
    wardrobe: Iterable[GarmentItem],
    history: SuggestionHistory,
    occasion: Optional[str] = None,
    max_outfits: int = DEFAULT_MAX_OUTFITS,
) -> List[OutfitCandidate]:
    """Pair the first tops with the first bottoms, then add single-dress looks.

    Combinations already in ``history`` are skipped and every emitted
    combination is recorded there. Output order follows iteration order and
    is capped at ``max_outfits``.
    """

    usable = [item for item in wardrobe if item.is_usable]
    if len(usable) < MIN_USABLE_ITEMS or max_outfits <= 0:
        logger.info("fallback skipped: %d usable items", len(usable))
        return []

    occasion = normalize_occasion(occasion) or DEFAULT_OCCASION
    tops = [item for item in usable if item.category == "tops"][:MAX_TOPS]
    bottoms = [item for item in usable if item.category == "bottoms"][:MAX_BOTTOMS]
    dresses = [item for item in usable if item.category == "dresses"]

    outfits: List[OutfitCandidate] = []
    used_names: Set[str] = set()

    for top in tops:
        for bottom in bottoms:
            if len(outfits) >= max_outfits:
                break
            if not history.add_if_absent(combo_key([top.id, bottom.id])):
                continue
            outfits.append(_pair_candidate(top, bottom, occasion, used_names))

    dress_count = 0
    for dress in dresses:
        if len(outfits) >= max_outfits or dress_count >= MAX_DRESSES:
            break
        if not history.add_if_absent(combo_key([dress.id])):
            continue
        outfits.append(_dress_candidate(dress, used_names))
        dress_count += 1

    logger.info("fallback generated %d outfits", len(outfits))
    return outfits


__all__ = ["generate_basic", "DEFAULT_MAX_OUTFITS", "PAIR_CONFIDENCE", "DRESS_CONFIDENCE"]
