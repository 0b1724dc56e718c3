"""Upload, classification retry and deletion tests for the ingestion agent."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from conftest import OWNER, FakeClassifier

from agents.wardrobe_ingestion import WardrobeIngestionAgent
from logic.response_parsing import GarmentDescriptor
from tools.wardrobe_store import DuplicateItemNameError, ItemNotFoundError

IMAGE = b"\xff\xd8\xff\xe0fake-jpeg"


def _descriptor() -> GarmentDescriptor:
    return GarmentDescriptor.model_validate(
        {
            "category": "tops",
            "subcategory": "t-shirt",
            "colors": ["white"],
            "warmthLevel": 2,
            "weatherSuitability": ["mild", "hot"],
            "season": "summer",
        }
    )


@pytest.fixture()
def uploads(tmp_path) -> Path:
    return tmp_path / "uploads"


def test_upload_stores_image_and_classifies(store, uploads) -> None:
    classifier = FakeClassifier(_descriptor())
    agent = WardrobeIngestionAgent(store, classifier, uploads)

    item = asyncio.run(agent.upload_item(OWNER, "White Tee", IMAGE))

    assert item.is_verified
    assert item.category == "tops"
    assert item.subcategory == "t-shirt"
    assert item.warmth_level == 2
    assert Path(item.image_ref).read_bytes() == IMAGE
    assert Path(item.image_ref).parent == uploads
    assert store.get_item(OWNER, item.id) == item
    assert classifier.calls == 1


def test_duplicate_name_is_rejected(store, uploads) -> None:
    agent = WardrobeIngestionAgent(store, FakeClassifier(_descriptor()), uploads)
    first = asyncio.run(agent.upload_item(OWNER, "White Tee", IMAGE))

    with pytest.raises(DuplicateItemNameError) as excinfo:
        asyncio.run(agent.upload_item(OWNER, "white tee", IMAGE))

    assert excinfo.value.existing.id == first.id
    assert len(store.list_items(OWNER)) == 1


def test_failed_classification_stays_pending_until_retried(store, uploads) -> None:
    classifier = FakeClassifier(None)
    agent = WardrobeIngestionAgent(store, classifier, uploads)

    pending = asyncio.run(agent.upload_item(OWNER, "Mystery Jacket", IMAGE))

    assert not pending.is_verified
    assert pending.category == "other"
    assert [item.id for item in store.list_unverified(OWNER)] == [pending.id]

    classifier.descriptor = _descriptor()
    results = asyncio.run(agent.retry_pending(OWNER))

    assert [item.id for item in results] == [pending.id]
    assert results[0].is_verified
    assert store.list_unverified(OWNER) == []
    assert classifier.calls == 2


def test_retry_unknown_item_raises(store, uploads) -> None:
    agent = WardrobeIngestionAgent(store, FakeClassifier(), uploads)

    with pytest.raises(ItemNotFoundError):
        asyncio.run(agent.retry_classification(OWNER, 404))


def test_retry_without_image_returns_item_unchanged(store, uploads) -> None:
    agent = WardrobeIngestionAgent(store, FakeClassifier(None), uploads)
    item = asyncio.run(agent.upload_item(OWNER, "Scarf", IMAGE))
    Path(item.image_ref).unlink()
    agent.classifier = FakeClassifier(_descriptor())

    result = asyncio.run(agent.retry_classification(OWNER, item.id))

    assert result == item
    assert agent.classifier.calls == 0


def test_upload_without_classifier_keeps_item_pending(store, uploads) -> None:
    agent = WardrobeIngestionAgent(store, None, uploads)

    item = asyncio.run(agent.upload_item(OWNER, "Boots", IMAGE, mime_type="image/png"))

    assert not item.is_verified
    assert item.image_ref.endswith(".png")


def test_delete_removes_record_and_image(store, uploads) -> None:
    agent = WardrobeIngestionAgent(store, FakeClassifier(_descriptor()), uploads)
    item = asyncio.run(agent.upload_item(OWNER, "White Tee", IMAGE))

    agent.delete_item(OWNER, item.id)

    assert store.get_item(OWNER, item.id) is None
    assert not Path(item.image_ref).exists()
    with pytest.raises(ItemNotFoundError):
        agent.delete_item(OWNER, item.id)
