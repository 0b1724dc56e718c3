"""Tolerant decoding of free-text model replies into fixed-shape records.

Model replies may wrap the JSON payload in prose or markdown fences, use
camelCase or snake_case keys, and return scalars where lists are expected.
Everything variant is normalised here so later stages only ever see
:class:`RawOutfit` and :class:`GarmentDescriptor` instances.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from models.taxonomy import normalize_color_name, normalise_tags, validate_category

logger = logging.getLogger(__name__)

_FENCE_PATTERN = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)
_DEFAULT_CONFIDENCE = 80


def _strip_fences(text: str) -> str:
    match = _FENCE_PATTERN.search(text)
    return match.group(1) if match else text


def extract_json_block(text: Optional[str]) -> Optional[Any]:
    """Return the first well-formed JSON object or array embedded in ``text``."""

    if not text:
        return None
    decoder = json.JSONDecoder()
    for source in (_strip_fences(text), text):
        for index, char in enumerate(source):
            if char not in "{[":
                continue
            try:
                payload, _ = decoder.raw_decode(source, index)
            except json.JSONDecodeError:
                continue
            if isinstance(payload, (dict, list)):
                return payload
    return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(part).strip() for part in value if str(part).strip())
    return str(value).strip()


def _as_list(value: Any) -> List[Any]:
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [value]


class RawOutfit(BaseModel):
    """One stylist suggestion after normalisation."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = ""
    item_ids: List[int] = Field(validation_alias=AliasChoices("item_ids", "itemIds", "items", "ids"))
    confidence: int = _DEFAULT_CONFIDENCE
    description: str = ""
    styling_tips: str = Field(default="", validation_alias=AliasChoices("styling_tips", "stylingTips", "tips"))
    weather_note: str = Field(
        default="", validation_alias=AliasChoices("weather_note", "weatherNote", "weather")
    )
    occasion: Optional[str] = None

    @field_validator("item_ids", mode="before")
    @classmethod
    def _coerce_item_ids(cls, value: Any) -> List[int]:
        ids: List[int] = []
        for raw in _as_list(value):
            if isinstance(raw, dict):
                raw = raw.get("id")
            try:
                item_id = int(float(raw)) if not isinstance(raw, bool) else None
            except (TypeError, ValueError):
                continue
            if item_id is not None and item_id not in ids:
                ids.append(item_id)
        if not ids:
            raise ValueError("outfit has no usable item ids")
        return ids

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: Any) -> int:
        if isinstance(value, str):
            value = value.strip().rstrip("%")
        try:
            confidence = int(round(float(value)))
        except (TypeError, ValueError):
            return _DEFAULT_CONFIDENCE
        return max(0, min(100, confidence))

    @field_validator("name", "description", "styling_tips", "weather_note", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("occasion", mode="before")
    @classmethod
    def _coerce_occasion(cls, value: Any) -> Optional[str]:
        text = _as_text(value)
        return text or None


class GarmentDescriptor(BaseModel):
    """Structured labels the classifier returns for one garment image."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    category: str = "other"
    subcategory: Optional[str] = None
    style: Optional[str] = None
    colors: List[str] = Field(default_factory=list)
    fabric_type: Optional[str] = Field(default=None, validation_alias=AliasChoices("fabric_type", "fabricType", "fabric"))
    pattern: Optional[str] = None
    formality: Optional[str] = None
    season: Optional[str] = None
    fit: Optional[str] = None
    warmth_level: Optional[int] = Field(default=None, validation_alias=AliasChoices("warmth_level", "warmthLevel"))
    weather_suitability: List[str] = Field(
        default_factory=list, validation_alias=AliasChoices("weather_suitability", "weatherSuitability")
    )
    occasion_suitability: List[str] = Field(
        default_factory=list, validation_alias=AliasChoices("occasion_suitability", "occasionSuitability")
    )
    description: Optional[str] = None
    styling_tips: Optional[str] = Field(default=None, validation_alias=AliasChoices("styling_tips", "stylingTips"))

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> str:
        return validate_category(_as_text(value) or None)

    @field_validator("colors", mode="before")
    @classmethod
    def _coerce_colors(cls, value: Any) -> List[str]:
        return [normalize_color_name(str(color)) for color in _as_list(value) if str(color).strip()]

    @field_validator("weather_suitability", "occasion_suitability", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> List[str]:
        return normalise_tags(str(tag) for tag in _as_list(value))

    @field_validator("warmth_level", mode="before")
    @classmethod
    def _coerce_warmth(cls, value: Any) -> Optional[int]:
        try:
            warmth = int(float(value))
        except (TypeError, ValueError):
            return None
        return max(1, min(5, warmth))

    @field_validator(
        "subcategory", "style", "fabric_type", "pattern", "formality", "season", "fit", "description", "styling_tips",
        mode="before",
    )
    @classmethod
    def _coerce_optional_text(cls, value: Any) -> Optional[str]:
        text = _as_text(value)
        return text or None

    def to_item_fields(self) -> dict:
        """Fields to apply to a stored item once classification succeeded."""

        fields = self.model_dump(exclude={"season", "fit", "styling_tips"})
        fields["is_verified"] = True
        return fields


def parse_stylist_response(text: Optional[str]) -> Optional[List[RawOutfit]]:
    """Decode a stylist reply; ``None`` means no structured payload was found."""

    payload = extract_json_block(text)
    if payload is None:
        logger.info("stylist reply had no decodable JSON block")
        return None

    if isinstance(payload, dict):
        entries = payload.get("outfits", payload.get("suggestions"))
        if entries is None:
            entries = [payload]
    else:
        entries = payload
    if not isinstance(entries, list):
        entries = [entries]

    outfits: List[RawOutfit] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        try:
            outfits.append(RawOutfit.model_validate(entry))
        except ValidationError as exc:
            logger.info("skipping malformed outfit entry: %s", exc.errors()[0].get("msg"))
    return outfits


def parse_garment_descriptor(text: Optional[str]) -> Optional[GarmentDescriptor]:
    """Decode a classifier reply into a :class:`GarmentDescriptor`, or ``None``."""

    payload = extract_json_block(text)
    if isinstance(payload, list):
        payload = payload[0] if payload and isinstance(payload[0], dict) else None
    if not isinstance(payload, dict):
        logger.info("classifier reply had no decodable JSON object")
        return None
    try:
        return GarmentDescriptor.model_validate(payload)
    except ValidationError as exc:
        logger.info("classifier reply failed validation: %s", exc.errors()[0].get("msg"))
        return None


__all__ = [
    "RawOutfit",
    "GarmentDescriptor",
    "extract_json_block",
    "parse_stylist_response",
    "parse_garment_descriptor",
]
