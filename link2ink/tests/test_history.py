# -*- coding: utf-8 -*-
"""Tests for HistoryStore persistence and ordering."""

import json
from datetime import datetime, timezone

import pytest

from link2ink.categories import TaskCategory
from link2ink.history import Citation, HistoryItem, HistoryStore, derive_title, new_item_id
from link2ink.storage import MemoryStorage


def _item(ref: str, created_at: datetime = datetime(2024, 6, 12, 10, 15, 30, 123456)) -> HistoryItem:
    return HistoryItem(
        id=new_item_id(),
        title=ref,
        source=f"https://example.com/{ref}",
        images=("aW1n",),
        citations=(Citation(uri=f"https://example.com/{ref}", title=ref),),
        created_at=created_at,
    )


def test_append_prepends_newest_first(memory_storage):
    store = HistoryStore(TaskCategory.ARTICLE, memory_storage)
    for ref in ("r1", "r2", "r3"):
        store.append(_item(ref))
    assert [item.title for item in store.items] == ["r3", "r2", "r1"]


def test_append_then_load_round_trips_head_and_timestamp(memory_storage):
    store = HistoryStore(TaskCategory.REPO, memory_storage)
    item = _item("head")
    store.append(item)

    reloaded = HistoryStore(TaskCategory.REPO, memory_storage)
    items = reloaded.load()
    assert items[0] == item
    assert isinstance(items[0].created_at, datetime)
    assert items[0].created_at == item.created_at


def test_persisted_record_shape(memory_storage):
    store = HistoryStore(TaskCategory.ARTICLE, memory_storage)
    store.append(_item("a"))
    records = json.loads(memory_storage.get("link2ink_article_history"))
    assert set(records[0]) == {"id", "title", "url", "images", "citations", "date"}
    assert records[0]["url"] == "https://example.com/a"
    assert records[0]["citations"] == [{"uri": "https://example.com/a", "title": "a"}]


def test_categories_use_separate_keys(memory_storage):
    HistoryStore(TaskCategory.ARTICLE, memory_storage).append(_item("article"))
    HistoryStore(TaskCategory.REPO, memory_storage).append(_item("repo"))
    assert "link2ink_article_history" in memory_storage
    assert "link2ink_repo_history" in memory_storage
    assert [i.title for i in HistoryStore(TaskCategory.REPO, memory_storage).load()] == ["repo"]


def test_load_with_no_stored_value_is_empty(memory_storage):
    assert HistoryStore(TaskCategory.ARTICLE, memory_storage).load() == []


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        '{"id": "x"}',
        '[{"title": "missing url and date"}]',
        '[{"id": "1", "url": "u", "date": "yesterday"}]',
        "[42]",
    ],
)
def test_corrupt_storage_loads_as_empty(raw):
    storage = MemoryStorage({"link2ink_article_history": raw})
    store = HistoryStore(TaskCategory.ARTICLE, storage)
    assert store.load() == []
    assert len(store) == 0


def test_deeply_nested_storage_loads_as_empty():
    raw = "[" * 200000 + "]" * 200000
    store = HistoryStore(TaskCategory.ARTICLE, MemoryStorage({"link2ink_article_history": raw}))
    assert store.load() == []


def test_load_accepts_utc_z_suffix():
    record = {"id": "1", "title": "t", "url": "https://example.com", "images": [], "citations": [], "date": "2024-06-12T10:15:30.000Z"}
    storage = MemoryStorage({"link2ink_article_history": json.dumps([record])})
    items = HistoryStore(TaskCategory.ARTICLE, storage).load()
    assert items[0].created_at == datetime(2024, 6, 12, 10, 15, 30, tzinfo=timezone.utc)


def test_quota_failure_keeps_item_in_memory_and_does_not_raise():
    storage = MemoryStorage(quota_bytes=10)
    store = HistoryStore(TaskCategory.ARTICLE, storage)
    item = _item("big")
    store.append(item)
    assert store.items[0] == item
    assert storage.get("link2ink_article_history") is None
    assert store.persist() is False


def test_cap_evicts_oldest(memory_storage):
    store = HistoryStore(TaskCategory.REPO, memory_storage, max_items=2)
    for ref in ("r1", "r2", "r3"):
        store.append(_item(ref))
    assert [i.title for i in store.items] == ["r3", "r2"]
    assert [i.title for i in HistoryStore(TaskCategory.REPO, memory_storage).load()] == ["r3", "r2"]


def test_invalid_cap_rejected(memory_storage):
    with pytest.raises(ValueError):
        HistoryStore(TaskCategory.REPO, memory_storage, max_items=0)


def test_ids_are_unique_for_rapid_appends(memory_storage):
    store = HistoryStore(TaskCategory.ARTICLE, memory_storage)
    ids = {store.new_item("https://example.com", ["x"]).id for _ in range(200)}
    assert len(ids) == 200


def test_remove_and_get(memory_storage):
    store = HistoryStore(TaskCategory.ARTICLE, memory_storage)
    first, second = _item("first"), _item("second")
    store.append(first)
    store.append(second)
    assert store.get(first.id) == first
    assert store.remove(first.id) is True
    assert store.remove(first.id) is False
    assert store.get(first.id) is None
    assert [i.title for i in HistoryStore(TaskCategory.ARTICLE, memory_storage).load()] == ["second"]


def test_new_item_derives_title(memory_storage):
    store = HistoryStore(TaskCategory.REPO, memory_storage)
    item = store.new_item("https://github.com/google/gemini-cli", ["x"])
    assert item.title == "google/gemini-cli"
    assert item.images == ("x",)


@pytest.mark.parametrize(
    "category,source,expected",
    [
        (TaskCategory.ARTICLE, "https://www.example.com/post/1", "www.example.com"),
        (TaskCategory.ARTICLE, "not a url", "not a url"),
        (TaskCategory.REPO, "https://github.com/owner/repo.git", "owner/repo"),
        (TaskCategory.REPO, "https://github.com/owner/repo/tree/main", "owner/repo"),
        (TaskCategory.REPO, "owner/repo", "owner/repo"),
        (TaskCategory.REPO, "just-a-name", "just-a-name"),
    ],
)
def test_derive_title(category, source, expected):
    assert derive_title(category, source) == expected


def test_citation_hostname_falls_back_to_uri():
    assert Citation(uri="https://docs.example.org/page").hostname == "docs.example.org"
    assert Citation(uri="not-a-url").hostname == "not-a-url"
