# -*- coding: utf-8 -*-
"""
Persisted history of completed generation tasks.

One HistoryStore per task category. The newest item is always the head of the
list. Every mutation persists the whole list as a JSON array under the
category's storage key; storage failures are logged and never reach the
caller, and they never roll back the in-memory list.

Stored record format (one element of the JSON array):

    {"id": "1718...", "title": "example.com", "url": "https://example.com/a",
     "images": ["<base64>", ...], "citations": [{"uri": "...", "title": "..."}],
     "date": "2024-06-12T10:15:30.123456"}
"""

import json
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from link2ink.categories import TaskCategory, get_profile
from link2ink.errors import StorageError
from link2ink.logger_config import logger
from link2ink.storage import StorageBackend


@dataclass(frozen=True)
class Citation:
    """A grounding source returned with a generation result."""

    uri: str
    title: Optional[str] = None

    @property
    def hostname(self) -> str:
        return urlparse(self.uri).hostname or self.uri

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"uri": self.uri}
        if self.title is not None:
            data["title"] = self.title
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Citation":
        return cls(uri=data["uri"], title=data.get("title"))


@dataclass(frozen=True)
class HistoryItem:
    """
    One completed generation task.

    Attributes:
        id: Unique, time-derived identity token
        title: Display title (hostname or owner/repo)
        source: The URL or repository locator the task was run against
        images: Base64-encoded artifacts in generation order
        citations: Grounding sources in the order the service returned them
        created_at: When the task completed
    """

    id: str
    title: str
    source: str
    images: Tuple[str, ...] = field(default_factory=tuple)
    citations: Tuple[Citation, ...] = field(default_factory=tuple)
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.source,
            "images": list(self.images),
            "citations": [c.to_dict() for c in self.citations],
            "date": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryItem":
        """Rebuild an item, reviving the ISO timestamp into a datetime."""
        created_at = data["date"]
        if not isinstance(created_at, datetime):
            created_at = datetime.fromisoformat(str(created_at).replace("Z", "+00:00"))
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or data["url"]),
            source=str(data["url"]),
            images=tuple(data.get("images") or ()),
            citations=tuple(Citation.from_dict(c) for c in data.get("citations") or ()),
            created_at=created_at,
        )


class _IdClock:
    """Nanosecond timestamps, bumped so consecutive ids never collide."""

    def __init__(self) -> None:
        self._last = 0

    def next_id(self) -> str:
        now = time.time_ns()
        if now <= self._last:
            now = self._last + 1
        self._last = now
        return str(now)


_id_clock = _IdClock()


def new_item_id() -> str:
    return _id_clock.next_id()


def derive_title(category: TaskCategory, source: str) -> str:
    """Display title for a source: hostname for articles, owner/repo for repos."""
    source = source.strip()
    parsed = urlparse(source)
    if category is TaskCategory.ARTICLE:
        return parsed.hostname or source

    path = parsed.path if parsed.scheme else source
    parts = [p for p in path.strip("/").split("/") if p]
    if parsed.scheme and len(parts) >= 2:
        return f"{parts[0]}/{parts[1].removesuffix('.git')}"
    if not parsed.scheme and len(parts) == 2:
        return f"{parts[0]}/{parts[1].removesuffix('.git')}"
    return source


class HistoryStore:
    """Ordered, persisted history for one task category.

    Args:
        category: Task category; selects the storage key.
        storage: Key/string backend.
        max_items: Optional cap. When set, appending beyond it evicts the
            oldest items. ``None`` keeps every item.
    """

    def __init__(self, category: TaskCategory, storage: StorageBackend, max_items: Optional[int] = None):
        if max_items is not None and max_items < 1:
            raise ValueError("max_items must be positive or None")
        self.category = category
        self.storage = storage
        self.max_items = max_items
        self.key = get_profile(category).storage_key
        self._items: List[HistoryItem] = []

    @property
    def items(self) -> List[HistoryItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[HistoryItem]:
        return iter(list(self._items))

    def get(self, item_id: str) -> Optional[HistoryItem]:
        return next((item for item in self._items if item.id == item_id), None)

    def new_item(
        self,
        source: str,
        images: Sequence[str],
        citations: Sequence[Citation] = (),
        created_at: Optional[datetime] = None,
    ) -> HistoryItem:
        """Build a HistoryItem for this category with a fresh id and title."""
        return HistoryItem(
            id=new_item_id(),
            title=derive_title(self.category, source),
            source=source,
            images=tuple(images),
            citations=tuple(citations),
            created_at=created_at or datetime.now(),
        )

    def append(self, item: HistoryItem) -> None:
        """Prepend ``item`` as the new head, then persist the whole list."""
        self._items.insert(0, item)
        if self.max_items is not None and len(self._items) > self.max_items:
            evicted = len(self._items) - self.max_items
            del self._items[self.max_items :]
            logger.debug("[History:{}] Evicted {} oldest item(s) over limit {}", self.category.value, evicted, self.max_items)
        self.persist()

    def remove(self, item_id: str) -> bool:
        """Remove an item by id. Returns False if it was not present."""
        for index, item in enumerate(self._items):
            if item.id == item_id:
                del self._items[index]
                self.persist()
                return True
        return False

    def load(self) -> List[HistoryItem]:
        """Read the list from storage, replacing the in-memory list.

        Any read or parse failure is logged and yields an empty list.
        """
        try:
            raw = self.storage.get(self.key)
            if raw:
                records = json.loads(raw)
                if not isinstance(records, list):
                    raise ValueError(f"expected a JSON array, got {type(records).__name__}")
                items = [HistoryItem.from_dict(record) for record in records]
            else:
                items = []
        except (StorageError, ValueError, KeyError, TypeError, AttributeError, RecursionError) as e:
            logger.warning("[History:{}] Failed to load history from storage: {}", self.category.value, e)
            items = []
        self._items = items
        logger.debug("[History:{}] Loaded {} item(s)", self.category.value, len(items))
        return list(items)

    def persist(self) -> bool:
        """Write the whole list to storage. Returns False if the write failed."""
        try:
            payload = json.dumps([item.to_dict() for item in self._items], ensure_ascii=False)
            self.storage.set(self.key, payload)
        except (StorageError, TypeError, ValueError) as e:
            logger.warning(
                "[History:{}] Failed to save history to storage (likely quota exceeded): {}",
                self.category.value,
                e,
            )
            return False
        return True
