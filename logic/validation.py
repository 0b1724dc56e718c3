"""Pydantic schemas and helpers for validating HTTP payloads and agent responses."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from models.taxonomy import normalize_occasion


class ClothingUploadRequest(BaseModel):
    """Input contract for a garment upload."""

    name: str = Field(min_length=1, max_length=120)
    image_base64: str = Field(min_length=1)
    mime_type: str = "image/jpeg"

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name cannot be blank")
        return value

    @field_validator("mime_type")
    @classmethod
    def _validate_mime(cls, value: str) -> str:
        if not value.startswith("image/"):
            raise ValueError("mime_type must be an image type")
        return value


class SaveOutfitRequest(BaseModel):
    """Input contract for persisting a suggested outfit."""

    name: str = Field(min_length=1)
    item_ids: List[int] = Field(min_length=1)
    occasion: Optional[str] = None
    confidence: int = Field(default=80, ge=0, le=100)

    @field_validator("item_ids")
    @classmethod
    def _unique_ids(cls, value: List[int]) -> List[int]:
        if len(set(value)) != len(value):
            raise ValueError("item_ids must not contain duplicates")
        return value

    @field_validator("occasion")
    @classmethod
    def _normalise_occasion(cls, value: Optional[str]) -> Optional[str]:
        return normalize_occasion(value)


class PreferencesUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    favorite_colors: Optional[List[str]] = Field(default=None, alias="favoriteColors")
    preferred_styles: Optional[List[str]] = Field(default=None, alias="preferredStyles")
    avoid_colors: Optional[List[str]] = Field(default=None, alias="avoidColors")


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; absent fields are left unchanged."""

    model_config = ConfigDict(populate_by_name=True)

    body_type: Optional[str] = Field(default=None, alias="bodyType")
    skin_tone: Optional[str] = Field(default=None, alias="skinTone")
    age: Optional[int] = Field(default=None, ge=0, le=130)
    height: Optional[str] = None
    gender: Optional[str] = None
    location: Optional[str] = None
    preferences: Optional[PreferencesUpdate] = None

    def to_updates(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True, by_alias=False)


class ValidationResult(BaseModel):
    """Wrapper returned when validation fails."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent review payload."""

    return ValidationResult(message=message, details=json.loads(exc.json(include_url=False))).model_dump()


__all__ = [
    "ClothingUploadRequest",
    "SaveOutfitRequest",
    "PreferencesUpdate",
    "ProfileUpdateRequest",
    "ValidationResult",
    "validation_failure",
]
