# -*- coding: utf-8 -*-
"""Tests for the key/string storage backends."""

import pytest

from link2ink.errors import StorageError
from link2ink.storage import JsonFileStorage, MemoryStorage


def test_memory_storage_get_set():
    storage = MemoryStorage()
    assert storage.get("k") is None
    storage.set("k", "v")
    assert storage.get("k") == "v"
    assert "k" in storage


def test_memory_storage_quota_counts_other_keys():
    storage = MemoryStorage(quota_bytes=8)
    storage.set("a", "1234")
    storage.set("a", "12345678")  # overwrite does not count the old value
    with pytest.raises(StorageError, match="Quota exceeded"):
        storage.set("b", "1")
    assert storage.get("b") is None


def test_json_file_storage_round_trip(tmp_path):
    storage = JsonFileStorage(tmp_path / "store")
    assert storage.get("link2ink_repo_history") is None
    storage.set("link2ink_repo_history", '[{"id": "1"}]')
    assert storage.get("link2ink_repo_history") == '[{"id": "1"}]'
    assert (tmp_path / "store" / "link2ink_repo_history.json").exists()
    assert not list((tmp_path / "store").glob("*.tmp"))


def test_json_file_storage_sanitizes_keys(tmp_path):
    storage = JsonFileStorage(tmp_path)
    storage.set("../escape/key", "x")
    assert storage.get("../escape/key") == "x"
    assert (tmp_path / ".._escape_key.json").exists()


def test_json_file_storage_quota(tmp_path):
    storage = JsonFileStorage(tmp_path, quota_bytes=5)
    storage.set("a", "123")
    with pytest.raises(StorageError):
        storage.set("b", "456")
    assert storage.get("b") is None


def test_json_file_storage_wraps_os_errors(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("file in the way", encoding="utf-8")
    storage = JsonFileStorage(blocker / "store")
    with pytest.raises(StorageError, match="Could not write"):
        storage.set("k", "v")
