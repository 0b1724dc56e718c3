"""Process-wide, per-owner memory of previously suggested item combinations.

Nothing here is persisted: the history lives as long as the registry object
the application creates, which is normally the lifetime of the process.
"""
from __future__ import annotations

import threading
from typing import Dict, List, Protocol


class SuggestionHistory(Protocol):
    """Interface the pipeline needs from a history of combo keys."""

    def has(self, key: str) -> bool:
        ...

    def add(self, key: str) -> None:
        ...

    def add_if_absent(self, key: str) -> bool:
        ...

    def keys(self) -> List[str]:
        ...


class OwnerSuggestionHistory:
    """Combo keys emitted for one owner; inserts are serialised by a lock."""

    def __init__(self, owner_id: str) -> None:
        self.owner_id = owner_id
        self._keys: set[str] = set()
        self._order: List[str] = []
        self._lock = threading.Lock()

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._keys

    def add(self, key: str) -> None:
        self.add_if_absent(key)

    def add_if_absent(self, key: str) -> bool:
        """Insert ``key`` and return True, or return False if it was already present."""

        with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            self._order.append(key)
            return True

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._order)

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)


class SuggestionHistoryRegistry:
    """Hands out one :class:`OwnerSuggestionHistory` per owner id."""

    def __init__(self) -> None:
        self._histories: Dict[str, OwnerSuggestionHistory] = {}
        self._lock = threading.Lock()

    def for_owner(self, owner_id: str) -> OwnerSuggestionHistory:
        with self._lock:
            history = self._histories.get(owner_id)
            if history is None:
                history = OwnerSuggestionHistory(owner_id)
                self._histories[owner_id] = history
            return history

    def owners(self) -> List[str]:
        with self._lock:
            return sorted(self._histories)


__all__ = ["SuggestionHistory", "OwnerSuggestionHistory", "SuggestionHistoryRegistry"]
