"""Wardrobe storage abstractions and SQLite implementation."""
from __future__ import annotations

import contextlib
import json
import sqlite3
import time
from dataclasses import asdict
from datetime import timedelta
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from models.garment_item import GarmentItem
from models.outfit import OutfitCandidate, SavedOutfit, ShoppingRecommendation
from models.weather import WeatherSnapshot


class ItemNotFoundError(LookupError):
    """Raised when an item id does not resolve to one of the owner's items."""


class DuplicateItemNameError(ValueError):
    """Raised when an owner already has an item with the same name."""

    def __init__(self, existing: GarmentItem) -> None:
        super().__init__(f"An item named '{existing.name}' already exists in this wardrobe")
        self.existing = existing


class WardrobeStore:
    """Persistence interface for items, saved outfits, weather cache and recommendations."""

    def create_item(self, item: GarmentItem) -> GarmentItem:
        raise NotImplementedError

    def get_item(self, owner_id: str, item_id: int) -> Optional[GarmentItem]:
        raise NotImplementedError

    def list_items(self, owner_id: str) -> List[GarmentItem]:
        raise NotImplementedError

    def list_unverified(self, owner_id: str) -> List[GarmentItem]:
        raise NotImplementedError

    def find_item_by_name(self, owner_id: str, name: str) -> Optional[GarmentItem]:
        raise NotImplementedError

    def update_item(self, owner_id: str, item_id: int, updated_fields: Dict[str, object]) -> Optional[GarmentItem]:
        raise NotImplementedError

    def delete_item(self, owner_id: str, item_id: int) -> bool:
        raise NotImplementedError

    def save_outfit(self, owner_id: str, candidate: OutfitCandidate) -> SavedOutfit:
        raise NotImplementedError

    def list_outfits(self, owner_id: str) -> List[SavedOutfit]:
        raise NotImplementedError

    def delete_outfit(self, owner_id: str, outfit_id: int) -> bool:
        raise NotImplementedError

    def get_cached_weather(self, location: str, max_age: timedelta) -> Optional[WeatherSnapshot]:
        raise NotImplementedError

    def cache_weather(self, location: str, snapshot: WeatherSnapshot) -> None:
        raise NotImplementedError

    def save_recommendation(self, record: ShoppingRecommendation) -> ShoppingRecommendation:
        raise NotImplementedError

    def list_recommendations(self, owner_id: str) -> List[ShoppingRecommendation]:
        raise NotImplementedError


_ITEM_LIST_FIELDS = ("colors", "weather_suitability", "occasion_suitability")


class SQLiteWardrobeStore(WardrobeStore):
    """Local SQLite-backed wardrobe store."""

    def __init__(self, database_path: str | Path = "data/wardrobe.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    @contextlib.contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit or roll back on exit, then close it."""

        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS garment_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    category TEXT NOT NULL,
                    subcategory TEXT,
                    style TEXT,
                    formality TEXT,
                    fabric_type TEXT,
                    pattern TEXT,
                    colors TEXT,
                    warmth_level INTEGER,
                    weather_suitability TEXT,
                    occasion_suitability TEXT,
                    is_verified INTEGER NOT NULL DEFAULT 0,
                    image_ref TEXT,
                    description TEXT
                );
                CREATE INDEX IF NOT EXISTS idx_garment_items_owner ON garment_items (owner_id);
                CREATE TABLE IF NOT EXISTS outfits (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    item_ids TEXT NOT NULL,
                    occasion TEXT,
                    confidence INTEGER,
                    is_saved INTEGER NOT NULL DEFAULT 1
                );
                CREATE TABLE IF NOT EXISTS weather_cache (
                    location TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    fetched_at REAL NOT NULL
                );
                CREATE TABLE IF NOT EXISTS shopping_recommendations (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id TEXT NOT NULL,
                    recommendations TEXT NOT NULL,
                    missing_categories TEXT,
                    missing_colors TEXT,
                    confidence INTEGER,
                    created_at REAL
                );
                """
            )

    @staticmethod
    def _serialise_list(values: Optional[Sequence[object]]) -> str:
        return json.dumps(list(values or []))

    @staticmethod
    def _deserialise_list(raw: Optional[str]) -> List[object]:
        return json.loads(raw) if raw else []

    def _row_to_item(self, row: sqlite3.Row) -> GarmentItem:
        return GarmentItem(
            id=row["id"],
            owner_id=row["owner_id"],
            name=row["name"],
            category=row["category"],
            subcategory=row["subcategory"],
            style=row["style"],
            formality=row["formality"],
            fabric_type=row["fabric_type"],
            pattern=row["pattern"],
            colors=self._deserialise_list(row["colors"]),
            warmth_level=row["warmth_level"],
            weather_suitability=self._deserialise_list(row["weather_suitability"]),
            occasion_suitability=self._deserialise_list(row["occasion_suitability"]),
            is_verified=bool(row["is_verified"]),
            image_ref=row["image_ref"],
            description=row["description"],
        )

    def _item_values(self, item: GarmentItem) -> tuple:
        return (
            item.owner_id,
            item.name,
            item.category,
            item.subcategory,
            item.style,
            item.formality,
            item.fabric_type,
            item.pattern,
            self._serialise_list(item.colors),
            item.warmth_level,
            self._serialise_list(item.weather_suitability),
            self._serialise_list(item.occasion_suitability),
            int(item.is_verified),
            item.image_ref,
            item.description,
        )

    def create_item(self, item: GarmentItem) -> GarmentItem:
        """Insert an item and return it with its assigned id (``item.id`` is ignored)."""

        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO garment_items (
                    owner_id, name, category, subcategory, style, formality, fabric_type, pattern,
                    colors, warmth_level, weather_suitability, occasion_suitability, is_verified,
                    image_ref, description
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                self._item_values(item),
            )
            new_id = cursor.lastrowid
        return GarmentItem(**{**asdict(item), "id": new_id})

    def get_item(self, owner_id: str, item_id: int) -> Optional[GarmentItem]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM garment_items WHERE owner_id = ? AND id = ?",
                (owner_id, int(item_id)),
            ).fetchone()
            return self._row_to_item(row) if row else None

    def list_items(self, owner_id: str) -> List[GarmentItem]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM garment_items WHERE owner_id = ? ORDER BY id",
                (owner_id,),
            )
            return [self._row_to_item(row) for row in cursor.fetchall()]

    def list_unverified(self, owner_id: str) -> List[GarmentItem]:
        return [item for item in self.list_items(owner_id) if not item.is_verified]

    def find_item_by_name(self, owner_id: str, name: str) -> Optional[GarmentItem]:
        wanted = name.strip().lower()
        for item in self.list_items(owner_id):
            if item.name.strip().lower() == wanted:
                return item
        return None

    def update_item(self, owner_id: str, item_id: int, updated_fields: Dict[str, object]) -> Optional[GarmentItem]:
        current = self.get_item(owner_id, item_id)
        if not current:
            return None

        for key, value in updated_fields.items():
            if key in {"owner_id", "id"}:
                continue
            if hasattr(current, key):
                setattr(current, key, value)

        validated = GarmentItem(**asdict(current))
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE garment_items SET
                    owner_id = ?, name = ?, category = ?, subcategory = ?, style = ?, formality = ?,
                    fabric_type = ?, pattern = ?, colors = ?, warmth_level = ?, weather_suitability = ?,
                    occasion_suitability = ?, is_verified = ?, image_ref = ?, description = ?
                WHERE owner_id = ? AND id = ?
                """,
                (*self._item_values(validated), owner_id, int(item_id)),
            )
        return validated

    def delete_item(self, owner_id: str, item_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM garment_items WHERE owner_id = ? AND id = ?",
                (owner_id, int(item_id)),
            )
            return cursor.rowcount > 0

    def _row_to_outfit(self, row: sqlite3.Row) -> SavedOutfit:
        return SavedOutfit(
            id=row["id"],
            owner_id=row["owner_id"],
            name=row["name"],
            item_ids=[int(i) for i in self._deserialise_list(row["item_ids"])],
            occasion=row["occasion"],
            confidence=row["confidence"],
            is_saved=bool(row["is_saved"]),
        )

    def save_outfit(self, owner_id: str, candidate: OutfitCandidate) -> SavedOutfit:
        """Persist an outfit after checking every id belongs to the owner."""

        owned_ids = {item.id for item in self.list_items(owner_id)}
        missing = [item_id for item_id in candidate.item_ids if int(item_id) not in owned_ids]
        if missing or not candidate.item_ids:
            raise ItemNotFoundError(f"Unknown item ids for this wardrobe: {missing}")

        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO outfits (owner_id, name, item_ids, occasion, confidence, is_saved) VALUES (?, ?, ?, ?, ?, 1)",
                (
                    owner_id,
                    candidate.name,
                    self._serialise_list([int(i) for i in candidate.item_ids]),
                    candidate.occasion,
                    candidate.confidence,
                ),
            )
            outfit_id = cursor.lastrowid
        return SavedOutfit(
            id=outfit_id,
            owner_id=owner_id,
            name=candidate.name,
            item_ids=[int(i) for i in candidate.item_ids],
            occasion=candidate.occasion,
            confidence=candidate.confidence,
        )

    def list_outfits(self, owner_id: str) -> List[SavedOutfit]:
        with self._connect() as conn:
            cursor = conn.execute("SELECT * FROM outfits WHERE owner_id = ? ORDER BY id", (owner_id,))
            return [self._row_to_outfit(row) for row in cursor.fetchall()]

    def delete_outfit(self, owner_id: str, outfit_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM outfits WHERE owner_id = ? AND id = ?",
                (owner_id, int(outfit_id)),
            )
            return cursor.rowcount > 0

    def get_cached_weather(self, location: str, max_age: timedelta) -> Optional[WeatherSnapshot]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload, fetched_at FROM weather_cache WHERE location = ?",
                (location.strip().lower(),),
            ).fetchone()
        if not row:
            return None
        if time.time() - row["fetched_at"] > max_age.total_seconds():
            return None
        return WeatherSnapshot(**json.loads(row["payload"]))

    def cache_weather(self, location: str, snapshot: WeatherSnapshot) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO weather_cache (location, payload, fetched_at) VALUES (?, ?, ?)",
                (location.strip().lower(), json.dumps(asdict(snapshot)), time.time()),
            )

    def save_recommendation(self, record: ShoppingRecommendation) -> ShoppingRecommendation:
        created_at = record.created_at or time.time()
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO shopping_recommendations (
                    owner_id, recommendations, missing_categories, missing_colors, confidence, created_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    record.owner_id,
                    self._serialise_list(record.recommendations),
                    self._serialise_list(record.missing_categories),
                    self._serialise_list(record.missing_colors),
                    record.confidence,
                    created_at,
                ),
            )
            record_id = cursor.lastrowid
        return ShoppingRecommendation(**{**asdict(record), "id": record_id, "created_at": created_at})

    def list_recommendations(self, owner_id: str) -> List[ShoppingRecommendation]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM shopping_recommendations WHERE owner_id = ? ORDER BY id",
                (owner_id,),
            )
            rows = cursor.fetchall()
        return [
            ShoppingRecommendation(
                id=row["id"],
                owner_id=row["owner_id"],
                recommendations=[str(r) for r in self._deserialise_list(row["recommendations"])],
                missing_categories=[str(c) for c in self._deserialise_list(row["missing_categories"])],
                missing_colors=[str(c) for c in self._deserialise_list(row["missing_colors"])],
                confidence=row["confidence"],
                created_at=row["created_at"],
            )
            for row in rows
        ]


__all__ = [
    "WardrobeStore",
    "SQLiteWardrobeStore",
    "ItemNotFoundError",
    "DuplicateItemNameError",
]
