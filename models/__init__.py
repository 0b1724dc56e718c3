"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.garment_item import GarmentItem, from_raw_metadata
from models.outfit import OutfitCandidate, SavedOutfit, ShoppingRecommendation, combo_key
from models.user_profile import StylePreferences, UserProfile

__all__ = [
    "GarmentItem",
    "from_raw_metadata",
    "OutfitCandidate",
    "SavedOutfit",
    "ShoppingRecommendation",
    "combo_key",
    "StylePreferences",
    "UserProfile",
]
