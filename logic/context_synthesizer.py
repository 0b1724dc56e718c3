"""Deterministic stylist context synthesizer combining wardrobe, profile and weather."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Optional

from logic.safety import system_instruction
from models.color_theory import EXTREME_CLASH_PAIRS, harmonious_partners
from models.garment_item import GarmentItem
from models.taxonomy import DEFAULT_OCCASION, FEMININE_KEYWORDS, MASCULINE_KEYWORDS, text_words
from models.user_profile import UserProfile
from models.weather import WeatherSnapshot


@dataclass
class StylistContext:
    """Everything the stylist is told about one suggestion request."""

    wardrobe: List[Dict[str, object]]
    occasion: str
    profile: Dict[str, object] = field(default_factory=dict)
    weather: Optional[Dict[str, object]] = None
    avoid_combos: List[str] = field(default_factory=list)
    harmony_hints: Dict[str, List[str]] = field(default_factory=dict)
    style_orientation: str = "unisex"
    debug_summary: Dict[str, object] = field(default_factory=dict)


def item_orientation(item: GarmentItem) -> str:
    words = set(text_words(f"{item.name} {item.category} {item.subcategory or ''}"))
    if item.category == "dresses" or words & FEMININE_KEYWORDS:
        return "feminine"
    if words & MASCULINE_KEYWORDS:
        return "masculine"
    return "unisex"


def wardrobe_orientation(items: Iterable[GarmentItem]) -> str:
    """Summarise the wardrobe as feminine, masculine, mixed or unisex."""

    detected = {item_orientation(item) for item in items} - {"unisex"}
    if len(detected) > 1:
        return "mixed"
    return detected.pop() if detected else "unisex"


def _describe_item(item: GarmentItem) -> Dict[str, object]:
    return {
        "id": item.id,
        "name": item.name,
        "category": item.category,
        "subcategory": item.subcategory,
        "style": item.style,
        "formality": item.formality,
        "colors": item.colors,
        "fabric_type": item.fabric_type,
        "pattern": item.pattern,
        "warmth_level": item.warmth_level,
        "weather_suitability": item.weather_suitability,
        "occasion_suitability": item.occasion_suitability,
        "orientation": item_orientation(item),
    }


def _describe_profile(profile: Optional[UserProfile]) -> Dict[str, object]:
    if profile is None:
        return {}
    data = {
        "body_type": profile.body_type,
        "skin_tone": profile.skin_tone,
        "age": profile.age,
        "gender": profile.gender,
        "preferences": asdict(profile.preferences),
    }
    return {key: value for key, value in data.items() if value not in (None, "", [], {})}


def synthesize_stylist_context(
    items: List[GarmentItem],
    profile: Optional[UserProfile],
    weather: Optional[WeatherSnapshot],
    occasion: Optional[str],
    avoid_combos: Iterable[str] = (),
) -> StylistContext:
    """Combine the filtered wardrobe with profile, weather and history signals."""

    harmony_hints = {
        item.dominant_color: harmonious_partners([item.dominant_color])
        for item in items
        if item.dominant_color
    }
    orientation = wardrobe_orientation(items)
    weather_payload = asdict(weather) if weather else None
    avoid = list(avoid_combos)
    debug_summary = {
        "wardrobe_size": len(items),
        "orientation": orientation,
        "avoid_combo_count": len(avoid),
        "weather_key_signals": (
            [f"temperature={weather.temperature}", f"condition={weather.condition}"] if weather else []
        ),
    }
    return StylistContext(
        wardrobe=[_describe_item(item) for item in items],
        occasion=occasion or DEFAULT_OCCASION,
        profile=_describe_profile(profile),
        weather=weather_payload,
        avoid_combos=avoid,
        harmony_hints=harmony_hints,
        style_orientation=orientation,
        debug_summary=debug_summary,
    )


def build_stylist_prompt(context: StylistContext) -> str:
    """Render the stylist prompt; the reply is expected as an ``outfits`` JSON object."""

    clashes = ", ".join(f"{first} + {second}" for first, second in EXTREME_CLASH_PAIRS)
    weather_text = json.dumps(context.weather) if context.weather else "unknown"
    avoid_text = ", ".join(context.avoid_combos) if context.avoid_combos else "none"
    return f"""{system_instruction("outfit stylist")}

AVAILABLE WARDROBE ITEMS: {json.dumps(context.wardrobe)}

COLOR HARMONY HINTS: {json.dumps(context.harmony_hints)}

WARDROBE STYLE ORIENTATION: {context.style_orientation}. Keep each outfit consistent with it.

USER PROFILE: {json.dumps(context.profile)}

CURRENT WEATHER: {weather_text}

OCCASION: {context.occasion}

PREVIOUS COMBINATIONS TO AVOID (sorted item ids): {avoid_text}

OUTFIT REQUIREMENTS:
- Use only the item ids listed above.
- Each outfit needs a top, a bottom and shoes; add outerwear when it is cold.
- At most one item per category, except up to 3 accessories and 2 shoes.
- Avoid clashing colors ({clashes}).
- Never repeat a combination listed above.

Generate 3-5 outfit combinations in this JSON format:
{{
  "outfits": [
    {{
      "name": "unique descriptive name",
      "occasion": "{context.occasion}",
      "item_ids": [1, 2, 3],
      "confidence": 85,
      "description": "why the colors and pieces work together",
      "styling_tips": "practical advice for wearing this outfit",
      "weather": "appropriate weather conditions"
    }}
  ]
}}

RETURN ONLY VALID JSON - NO ADDITIONAL TEXT."""


__all__ = [
    "StylistContext",
    "synthesize_stylist_context",
    "build_stylist_prompt",
    "wardrobe_orientation",
    "item_orientation",
]
