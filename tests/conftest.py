"""Shared fixtures and fakes for the wardrobe stylist test-suite."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.context_synthesizer import StylistContext
from logic.response_parsing import GarmentDescriptor, RawOutfit
from memory.suggestion_history import OwnerSuggestionHistory
from models.garment_item import GarmentItem
from tools.gemini_stylist import StylistOutcome
from tools.wardrobe_store import SQLiteWardrobeStore

OWNER = "owner-1"


def make_item(item_id: int, category: str, name: str | None = None, **fields) -> GarmentItem:
    return GarmentItem(
        id=item_id,
        owner_id=fields.pop("owner_id", OWNER),
        name=name or f"{category} {item_id}",
        category=category,
        is_verified=fields.pop("is_verified", True),
        **fields,
    )


class FakeStylist:
    """Returns a scripted outcome and records the contexts it was asked about."""

    def __init__(self, outcome: StylistOutcome | None = None) -> None:
        self.outcome = outcome or StylistOutcome.unavailable("quota_exceeded")
        self.contexts: List[StylistContext] = []

    async def suggest(self, context: StylistContext) -> StylistOutcome:
        self.contexts.append(context)
        return self.outcome


def stylist_returning(*outfits: dict) -> FakeStylist:
    return FakeStylist(StylistOutcome.ok([RawOutfit.model_validate(outfit) for outfit in outfits]))


class FakeClassifier:
    def __init__(self, descriptor: Optional[GarmentDescriptor] = None) -> None:
        self.descriptor = descriptor
        self.calls = 0

    async def classify(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> Optional[GarmentDescriptor]:
        self.calls += 1
        return self.descriptor


@pytest.fixture()
def store(tmp_path: Path) -> SQLiteWardrobeStore:
    return SQLiteWardrobeStore(tmp_path / "wardrobe.db")


@pytest.fixture()
def history() -> OwnerSuggestionHistory:
    return OwnerSuggestionHistory(OWNER)
