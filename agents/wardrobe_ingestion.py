"""Wardrobe ingestion agent: store uploads, classify them, retry pending items."""

from __future__ import annotations

import logging
import mimetypes
import uuid
from pathlib import Path
from typing import List, Optional

from models.garment_item import GarmentItem
from models.taxonomy import UNPROCESSED_CATEGORY
from tools.garment_classifier import GarmentClassifier
from tools.wardrobe_store import DuplicateItemNameError, ItemNotFoundError, WardrobeStore
from wardrobe_app.logging_config import get_logger, log_event, operation_context

logger = get_logger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"


class WardrobeIngestionAgent:
    """Turns uploaded garment photos into classified wardrobe items.

    Items are stored unverified first; a failed classification leaves them
    pending so :meth:`retry_classification` or :meth:`retry_pending` can pick
    them up later.
    """

    def __init__(
        self,
        store: WardrobeStore,
        classifier: Optional[GarmentClassifier],
        upload_dir: str | Path = "data/uploads",
    ) -> None:
        self.store = store
        self.classifier = classifier
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def _write_image(self, image_bytes: bytes, mime_type: str) -> Path:
        extension = mimetypes.guess_extension(mime_type) or ".img"
        path = self.upload_dir / f"{uuid.uuid4().hex}{extension}"
        path.write_bytes(image_bytes)
        return path

    def _read_image(self, item: GarmentItem) -> tuple[bytes, str] | None:
        if not item.image_ref:
            return None
        path = Path(item.image_ref)
        if not path.exists():
            return None
        mime_type = mimetypes.guess_type(path.name)[0] or DEFAULT_MIME_TYPE
        return path.read_bytes(), mime_type

    async def _classify(self, item: GarmentItem, image_bytes: bytes, mime_type: str) -> GarmentItem:
        if self.classifier is None:
            return item
        descriptor = await self.classifier.classify(image_bytes, mime_type)
        if descriptor is None:
            log_event(logger, level=logging.WARNING, event="classification_pending", item_id=item.id)
            return item
        updated = self.store.update_item(item.owner_id, item.id, descriptor.to_item_fields())
        log_event(
            logger,
            level=logging.INFO,
            event="classification_completed",
            item_id=item.id,
            category=descriptor.category,
        )
        return updated or item

    async def upload_item(
        self, owner_id: str, name: str, image_bytes: bytes, mime_type: str = DEFAULT_MIME_TYPE
    ) -> GarmentItem:
        """Store a new garment and try to classify it straight away."""

        with operation_context("agent:wardrobe_ingestion.upload_item"):
            existing = self.store.find_item_by_name(owner_id, name)
            if existing is not None:
                raise DuplicateItemNameError(existing)

            image_path = self._write_image(image_bytes, mime_type)
            item = self.store.create_item(
                GarmentItem(
                    id=0,
                    owner_id=owner_id,
                    name=name,
                    category=UNPROCESSED_CATEGORY,
                    is_verified=False,
                    image_ref=str(image_path),
                )
            )
            log_event(logger, level=logging.INFO, event="item_uploaded", item_id=item.id, bytes=len(image_bytes))
            return await self._classify(item, image_bytes, mime_type)

    async def retry_classification(self, owner_id: str, item_id: int) -> GarmentItem:
        """Re-run classification for one item; raises ``ItemNotFoundError`` if unknown."""

        item = self.store.get_item(owner_id, item_id)
        if item is None:
            raise ItemNotFoundError(f"Item {item_id} not found")
        image = self._read_image(item)
        if image is None:
            log_event(logger, level=logging.WARNING, event="classification_skipped", item_id=item_id, reason="no_image")
            return item
        return await self._classify(item, *image)

    async def retry_pending(self, owner_id: str) -> List[GarmentItem]:
        """Retry every unverified item for the owner, sequentially."""

        results: List[GarmentItem] = []
        for item in self.store.list_unverified(owner_id):
            results.append(await self.retry_classification(owner_id, item.id))
        verified = sum(1 for item in results if item.is_verified)
        log_event(logger, level=logging.INFO, event="retry_pending_completed", attempted=len(results), verified=verified)
        return results

    def delete_item(self, owner_id: str, item_id: int) -> None:
        """Delete the record and its stored image; raises ``ItemNotFoundError`` if unknown."""

        item = self.store.get_item(owner_id, item_id)
        if item is None or not self.store.delete_item(owner_id, item_id):
            raise ItemNotFoundError(f"Item {item_id} not found")
        if item.image_ref:
            Path(item.image_ref).unlink(missing_ok=True)


__all__ = ["WardrobeIngestionAgent"]
