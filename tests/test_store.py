"""
Unit tests for the JSON document store
"""

import json

import pytest

from funeral_platform.core.exceptions import StorageError
from funeral_platform.core.store import JsonStore


def test_missing_file_returns_fallback(tmp_path):
    store = JsonStore()
    assert store.read(tmp_path / "missing.json", []) == []
    assert store.read(tmp_path / "missing.json", {}) == {}


def test_empty_and_corrupt_files_return_fallback(tmp_path):
    store = JsonStore()
    empty = tmp_path / "empty.json"
    empty.write_text("   \n")
    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json")

    assert store.read(empty, []) == []
    assert store.read(corrupt, {}) == {}


def test_wrong_shape_returns_fallback(tmp_path):
    store = JsonStore()
    path = tmp_path / "tenants.json"
    path.write_text(json.dumps({"slug": "grace"}))

    assert store.read(path, []) == []


def test_fallback_is_copied(tmp_path):
    store = JsonStore()
    fallback = {"grace": []}
    document = store.read(tmp_path / "missing.json", fallback)
    document["grace"].append({"id": "x"})

    assert fallback == {"grace": []}


def test_write_then_read(tmp_path):
    store = JsonStore()
    path = tmp_path / "nested" / "doc.json"
    store.write(path, [{"slug": "grace", "name": "Grâce"}])

    assert store.read(path, []) == [{"slug": "grace", "name": "Grâce"}]
    assert list(path.parent.glob("*.tmp")) == []


def test_write_failure_raises_storage_error(tmp_path):
    store = JsonStore()
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")

    with pytest.raises(StorageError):
        store.write(blocker / "doc.json", [])


def test_transaction_persists_changes(tmp_path):
    store = JsonStore()
    path = tmp_path / "doc.json"
    with store.transaction(path, {}) as document:
        document["grace"] = [1]

    assert store.read(path, {}) == {"grace": [1]}


def test_transaction_without_changes_does_not_write(tmp_path):
    store = JsonStore()
    path = tmp_path / "doc.json"
    with store.transaction(path, []):
        pass

    assert not path.exists()


def test_transaction_discards_changes_on_error(tmp_path):
    store = JsonStore()
    path = tmp_path / "doc.json"
    store.write(path, [1])

    with pytest.raises(RuntimeError):
        with store.transaction(path, []) as document:
            document.append(2)
            raise RuntimeError("boom")

    assert store.read(path, []) == [1]
