"""Per-owner duplicate suppression and batch-unique outfit naming."""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Iterable, List, Optional, Set

from memory.suggestion_history import SuggestionHistory
from models.garment_item import GarmentItem
from models.occasion_styles import get_occasion_style, occasion_family
from models.outfit import OutfitCandidate

logger = logging.getLogger(__name__)

_PLACEHOLDER_ATTEMPTS = 100


def _display_occasion(occasion: Optional[str]) -> str:
    return occasion_family(occasion).replace("_", " ").title()


def _first_color(items: Iterable[GarmentItem], *categories: str) -> Optional[str]:
    for item in items:
        if item.category in categories and item.dominant_color:
            return item.dominant_color
    return None


def generate_unique_style_name(
    occasion: Optional[str],
    items: Iterable[GarmentItem],
    used_names: Set[str],
    rng: Optional[random.Random] = None,
) -> str:
    """Pick a name not in ``used_names`` for an outfit.

    Tries the occasion's templates in order, then "<top or dress> & <bottom> <Occasion>"
    built from dominant colors, then "Stylish <Occasion> <n>" with a random n.
    """

    for template in get_occasion_style(occasion).name_templates:
        if template not in used_names:
            return template

    items = list(items)
    label = _display_occasion(occasion)
    top_color = _first_color(items, "tops", "dresses")
    bottom_color = _first_color(items, "bottoms")
    if top_color and bottom_color:
        composite = f"{top_color.title()} & {bottom_color.title()} {label}"
        if composite not in used_names:
            return composite

    rng = rng or random.Random()
    for _ in range(_PLACEHOLDER_ATTEMPTS):
        placeholder = f"Stylish {label} {rng.randrange(100)}"
        if placeholder not in used_names:
            return placeholder

    counter = 100
    while f"Stylish {label} {counter}" in used_names:
        counter += 1
    return f"Stylish {label} {counter}"


class DuplicateSuppressor:
    """Rejects previously suggested combinations and renames colliding labels."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def accept(
        self,
        candidate: OutfitCandidate,
        history: SuggestionHistory,
        used_names: Set[str],
        items: Iterable[GarmentItem] = (),
    ) -> Optional[OutfitCandidate]:
        """Return the candidate (possibly renamed) or ``None`` if its combo was seen.

        A rejected candidate leaves ``history`` and ``used_names`` untouched.
        """

        key = candidate.key
        if not history.add_if_absent(key):
            logger.debug("combo %s already suggested", key)
            return None

        name = candidate.name
        if not name or name in used_names:
            selected = [item for item in items if item.id in set(candidate.item_ids)]
            name = generate_unique_style_name(candidate.occasion, selected, used_names, self.rng)
            logger.debug("renamed '%s' to '%s'", candidate.name, name)
        used_names.add(name)
        if name == candidate.name:
            return candidate
        return replace(candidate, name=name)

    def accept_all(
        self,
        candidates: Iterable[OutfitCandidate],
        history: SuggestionHistory,
        items: Iterable[GarmentItem] = (),
        used_names: Optional[Set[str]] = None,
    ) -> List[OutfitCandidate]:
        """Apply :meth:`accept` to a batch, sharing one set of used names."""

        items = list(items)
        used_names = used_names if used_names is not None else set()
        accepted: List[OutfitCandidate] = []
        for candidate in candidates:
            result = self.accept(candidate, history, used_names, items)
            if result is not None:
                accepted.append(result)
        return accepted


__all__ = ["DuplicateSuppressor", "generate_unique_style_name"]
