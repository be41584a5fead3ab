"""
Tests for the key-value storage mediums

Tests cover:
- Round trips on every medium
- Atomic JSON file writes
- Unreadable JSON files
- Write failures surfacing as StorageError
"""

import json

import pytest

from flashdeck.services.storage import (
    JSONFileStorage,
    MemoryStorage,
    SQLiteStorage,
    StorageBackend,
    StorageError,
    create_storage,
)


@pytest.fixture(params=["memory", "json", "sqlite"])
def any_storage(request, tmp_path):
    if request.param == "json":
        return JSONFileStorage(tmp_path / "storage.json")
    if request.param == "sqlite":
        return SQLiteStorage(tmp_path / "storage.db")
    return MemoryStorage()


class TestKeyValueContract:
    """Every medium behaves like browser local storage."""

    def test_missing_key_is_none(self, any_storage):
        assert any_storage.get_item("flashcards") is None

    def test_set_then_get(self, any_storage):
        any_storage.set_item("flashcards", '[{"word": "кот"}]')
        assert any_storage.get_item("flashcards") == '[{"word": "кот"}]'

    def test_set_replaces_value(self, any_storage):
        any_storage.set_item("k", "one")
        any_storage.set_item("k", "two")
        assert any_storage.get_item("k") == "two"

    def test_remove(self, any_storage):
        any_storage.set_item("k", "v")
        any_storage.remove_item("k")
        any_storage.remove_item("k")
        assert any_storage.get_item("k") is None

    def test_keys_are_independent(self, any_storage):
        any_storage.set_item("a", "1")
        any_storage.set_item("b", "2")
        any_storage.remove_item("a")
        assert any_storage.get_item("b") == "2"


class TestJSONFileStorage:
    """File-specific behaviour."""

    def test_creates_parent_directories(self, tmp_path):
        storage = JSONFileStorage(tmp_path / "nested" / "dir" / "storage.json")
        storage.set_item("k", "v")
        assert (tmp_path / "nested" / "dir" / "storage.json").exists()

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "storage.json"
        JSONFileStorage(path).set_item("k", "v")
        assert JSONFileStorage(path).get_item("k") == "v"

    def test_leaves_no_temp_files(self, tmp_path):
        folder = tmp_path / "store"
        storage = JSONFileStorage(folder / "storage.json")
        storage.set_item("k", "v")
        storage.set_item("k", "w")
        assert [p.name for p in folder.iterdir()] == ["storage.json"]

    def test_empty_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("", encoding="utf-8")
        assert JSONFileStorage(path).get_item("k") is None

    def test_corrupt_file_raises_on_read(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            JSONFileStorage(path).get_item("k")

    def test_non_object_file_raises_on_read(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            JSONFileStorage(path).get_item("k")

    def test_corrupt_file_is_replaced_on_write(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{not json", encoding="utf-8")
        storage = JSONFileStorage(path)
        storage.set_item("k", "v")
        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}

    def test_non_string_value_is_returned_as_json(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text('{"flashcards": [{"id": "x"}]}', encoding="utf-8")
        assert json.loads(JSONFileStorage(path).get_item("flashcards")) == [{"id": "x"}]

    def test_write_failure_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        storage = JSONFileStorage(blocker / "storage.json")
        with pytest.raises(StorageError):
            storage.set_item("k", "v")


class TestCreateStorage:

    def test_backends(self, tmp_path):
        assert isinstance(create_storage("memory"), MemoryStorage)
        assert isinstance(create_storage(StorageBackend.JSON, tmp_path / "s.json"), JSONFileStorage)
        assert isinstance(create_storage("sqlite", tmp_path / "s.db"), SQLiteStorage)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_storage("redis")
