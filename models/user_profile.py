"""Wardrobe owner profile schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _clean_list(values: Any) -> List[str]:
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    cleaned: List[str] = []
    for value in values:
        text = str(value).strip()
        if text and text not in cleaned:
            cleaned.append(text)
    return cleaned


@dataclass
class StylePreferences:
    favorite_colors: List[str] = field(default_factory=list)
    preferred_styles: List[str] = field(default_factory=list)
    avoid_colors: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.favorite_colors = _clean_list(self.favorite_colors)
        self.preferred_styles = _clean_list(self.preferred_styles)
        self.avoid_colors = _clean_list(self.avoid_colors)

    @classmethod
    def from_dict(cls, payload: Optional[Dict[str, Any]]) -> "StylePreferences":
        payload = payload or {}
        return cls(
            favorite_colors=payload.get("favorite_colors") or payload.get("favoriteColors") or [],
            preferred_styles=payload.get("preferred_styles") or payload.get("preferredStyles") or [],
            avoid_colors=payload.get("avoid_colors") or payload.get("avoidColors") or [],
        )


@dataclass
class UserProfile:
    """Personalisation attributes for one wardrobe owner."""

    owner_id: str
    body_type: Optional[str] = None
    skin_tone: Optional[str] = None
    age: Optional[int] = None
    height: Optional[str] = None
    gender: Optional[str] = None
    location: Optional[str] = None
    preferences: StylePreferences = field(default_factory=StylePreferences)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "UserProfile":
        age = payload.get("age")
        return cls(
            owner_id=str(payload["owner_id"]),
            body_type=payload.get("body_type"),
            skin_tone=payload.get("skin_tone"),
            age=int(age) if age not in (None, "") else None,
            height=payload.get("height"),
            gender=payload.get("gender"),
            location=payload.get("location"),
            preferences=StylePreferences.from_dict(payload.get("preferences")),
        )


__all__ = ["StylePreferences", "UserProfile"]
