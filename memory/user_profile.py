"""User profile persistence helpers."""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict

from models.user_profile import StylePreferences, UserProfile

_PROFILE_FIELDS = {"body_type", "skin_tone", "age", "height", "gender", "location"}
_PREFERENCE_ALIASES = {
    "favoriteColors": "favorite_colors",
    "preferredStyles": "preferred_styles",
    "avoidColors": "avoid_colors",
}


class UserProfileService:
    """Simple JSON-backed profile store, one file per owner."""

    def __init__(self, base_dir: str | Path = "data/profiles") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _profile_path(self, owner_id: str) -> Path:
        safe_name = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in owner_id)
        return self.base_dir / f"{safe_name}.json"

    def _write(self, profile: UserProfile) -> None:
        self._profile_path(profile.owner_id).write_text(json.dumps(asdict(profile), indent=2))

    def get_profile(self, owner_id: str) -> UserProfile:
        """Return the stored profile, creating one with defaults on first access."""

        path = self._profile_path(owner_id)
        if not path.exists():
            profile = UserProfile(owner_id=owner_id)
            self._write(profile)
            return profile

        data = json.loads(path.read_text())
        data["owner_id"] = owner_id
        return UserProfile.from_dict(data)

    def update_profile(self, owner_id: str, updates: Dict[str, Any]) -> UserProfile:
        """Merge top-level attributes and nested preferences into the stored profile."""

        profile = self.get_profile(owner_id)
        for key, value in updates.items():
            if key in _PROFILE_FIELDS:
                setattr(profile, key, value)

        preference_updates = updates.get("preferences") or {}
        merged = asdict(profile.preferences)
        for key, value in preference_updates.items():
            key = _PREFERENCE_ALIASES.get(key, key)
            if key in merged:
                merged[key] = value
        profile.preferences = StylePreferences(**merged)

        profile = UserProfile.from_dict(asdict(profile))
        self._write(profile)
        return profile
