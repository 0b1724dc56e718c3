"""Outfit candidate and saved outfit schemas."""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional


def combo_key(item_ids: Iterable[int]) -> str:
    """Sorted, comma-joined item ids identifying one combination."""

    return ",".join(str(item_id) for item_id in sorted(int(i) for i in item_ids))


@dataclass
class OutfitCandidate:
    """A generated combination of garment ids with narrative metadata."""

    name: str
    item_ids: List[int]
    occasion: Optional[str] = None
    confidence: int = 80
    description: str = ""
    styling_tips: str = ""
    weather_note: str = ""

    @property
    def key(self) -> str:
        return combo_key(self.item_ids)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "item_ids": list(self.item_ids),
            "occasion": self.occasion,
            "confidence": self.confidence,
            "description": self.description,
            "styling_tips": self.styling_tips,
            "weather_note": self.weather_note,
        }


@dataclass
class SavedOutfit:
    """An outfit the owner explicitly kept."""

    id: int
    owner_id: str
    name: str
    item_ids: List[int] = field(default_factory=list)
    occasion: Optional[str] = None
    confidence: Optional[int] = None
    is_saved: bool = True


@dataclass
class ShoppingRecommendation:
    """Restocking suggestions derived from weak outfit suggestions."""

    owner_id: str
    recommendations: List[str]
    missing_categories: List[str]
    missing_colors: List[str]
    confidence: int
    id: Optional[int] = None
    created_at: Optional[float] = None
