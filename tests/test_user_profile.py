"""Profile persistence and request-schema tests."""

from __future__ import annotations

import pytest
from conftest import OWNER
from pydantic import ValidationError

from logic.validation import ProfileUpdateRequest, validation_failure
from memory.user_profile import UserProfileService


def test_profile_created_with_defaults_on_first_access(tmp_path) -> None:
    service = UserProfileService(tmp_path)

    profile = service.get_profile(OWNER)

    assert profile.owner_id == OWNER
    assert profile.location is None
    assert profile.preferences.favorite_colors == []
    assert (tmp_path / f"{OWNER}.json").exists()


def test_update_merges_fields_and_camel_case_preferences(tmp_path) -> None:
    service = UserProfileService(tmp_path)
    service.update_profile(OWNER, {"location": "Lisbon", "preferences": {"favoriteColors": ["navy"]}})

    updated = service.update_profile(
        OWNER, {"age": "34", "preferences": {"avoid_colors": ["orange"]}, "unknown": "ignored"}
    )

    assert updated.location == "Lisbon"
    assert updated.age == 34
    assert updated.preferences.favorite_colors == ["navy"]
    assert updated.preferences.avoid_colors == ["orange"]
    assert UserProfileService(tmp_path).get_profile(OWNER) == updated


def test_owner_ids_are_sanitised_into_file_names(tmp_path) -> None:
    service = UserProfileService(tmp_path)

    service.get_profile("../escape")

    assert [path.name for path in tmp_path.iterdir()] == ["___escape.json"]


def test_profile_request_accepts_camel_case() -> None:
    request = ProfileUpdateRequest.model_validate(
        {"bodyType": "athletic", "skinTone": "warm", "preferences": {"favoriteColors": ["green"]}}
    )

    updates = request.to_updates()

    assert updates["body_type"] == "athletic"
    assert updates["skin_tone"] == "warm"
    assert updates["preferences"]["favorite_colors"] == ["green"]


def test_profile_request_rejects_bad_age() -> None:
    with pytest.raises(ValidationError) as excinfo:
        ProfileUpdateRequest.model_validate({"age": -3})

    payload = validation_failure("Invalid profile update", excinfo.value)

    assert payload["status"] == "needs_review"
    assert payload["details"][0]["loc"] == ["age"]
