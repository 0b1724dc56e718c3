"""Garment item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from models.taxonomy import (
    UNPROCESSED_CATEGORY,
    is_known_category,
    normalize_color_name,
    normalise_tags,
    validate_category,
)


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    if isinstance(value, str):
        return [part for part in (piece.strip() for piece in value.split(",")) if part]
    return [value]


def _normalise_colors(values: Iterable[str]) -> List[str]:
    """Normalise color names, keeping the dominant color first."""

    normalised = []
    seen = set()
    for value in values:
        key = normalize_color_name(str(value))
        if key and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_warmth(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        warmth = int(float(value))
    except (TypeError, ValueError):
        return None
    return max(1, min(5, warmth))


@dataclass
class GarmentItem:
    """One uploaded clothing piece in an owner's wardrobe."""

    id: int
    owner_id: str
    name: str
    category: str = UNPROCESSED_CATEGORY
    subcategory: Optional[str] = None
    style: Optional[str] = None
    formality: Optional[str] = None
    fabric_type: Optional[str] = None
    pattern: Optional[str] = None
    colors: List[str] = field(default_factory=list)
    warmth_level: Optional[int] = None
    weather_suitability: List[str] = field(default_factory=list)
    occasion_suitability: List[str] = field(default_factory=list)
    is_verified: bool = False
    image_ref: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        self.id = int(self.id)
        self.owner_id = str(self.owner_id)
        self.name = str(self.name).strip()
        self.category = validate_category(self.category)
        self.subcategory = _optional_text(self.subcategory)
        self.style = _optional_text(self.style)
        self.formality = _optional_text(self.formality)
        self.fabric_type = _optional_text(self.fabric_type)
        self.pattern = _optional_text(self.pattern)
        self.colors = _normalise_colors(_ensure_list(self.colors))
        self.warmth_level = _coerce_warmth(self.warmth_level)
        self.weather_suitability = normalise_tags(_ensure_list(self.weather_suitability))
        self.occasion_suitability = normalise_tags(_ensure_list(self.occasion_suitability))
        self.is_verified = bool(self.is_verified)

    @property
    def dominant_color(self) -> str:
        return self.colors[0] if self.colors else ""

    @property
    def is_usable(self) -> bool:
        """Whether the item has a category the outfit rules understand."""

        return is_known_category(self.category)

    def descriptor_text(self) -> str:
        """Lower-cased blob of every descriptive tag, used by keyword heuristics."""

        parts = [
            self.name,
            self.subcategory or "",
            self.style or "",
            self.formality or "",
            " ".join(self.occasion_suitability),
        ]
        return " ".join(part for part in parts if part).lower()


def from_raw_metadata(metadata: Dict[str, Any]) -> GarmentItem:
    """Factory to build a :class:`GarmentItem` from loose store or API metadata."""

    required_fields = ["id", "owner_id", "name"]
    missing = [key for key in required_fields if metadata.get(key) in (None, "")]
    if missing:
        raise ValueError(f"Missing required fields for GarmentItem: {missing}")

    return GarmentItem(
        id=int(metadata["id"]),
        owner_id=str(metadata["owner_id"]),
        name=str(metadata["name"]),
        category=metadata.get("category") or UNPROCESSED_CATEGORY,
        subcategory=metadata.get("subcategory"),
        style=metadata.get("style"),
        formality=metadata.get("formality"),
        fabric_type=metadata.get("fabric_type"),
        pattern=metadata.get("pattern"),
        colors=_ensure_list(metadata.get("colors")),
        warmth_level=metadata.get("warmth_level"),
        weather_suitability=_ensure_list(metadata.get("weather_suitability")),
        occasion_suitability=_ensure_list(metadata.get("occasion_suitability")),
        is_verified=bool(metadata.get("is_verified", False)),
        image_ref=metadata.get("image_ref"),
        description=metadata.get("description"),
    )


__all__ = ["GarmentItem", "from_raw_metadata"]
