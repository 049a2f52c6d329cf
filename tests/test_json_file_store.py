"""Tests for the JSON file store."""

import json
import os

import pytest

from intake_ledger.adapters.json_file_store import JsonFileKeyValueStore
from intake_ledger.adapters.memory_store import InMemoryKeyValueStore


def test_missing_file_reads_as_empty(tmp_path) -> None:
    store = JsonFileKeyValueStore(tmp_path / "missing.json")

    assert store.get("proteinGoal") is None


def test_set_writes_whole_object(tmp_path) -> None:
    path = tmp_path / "nested" / "ledger.json"
    store = JsonFileKeyValueStore(path)

    store.set("proteinGoal", 150.0)
    store.set(
        "dailyLogs",
        [{"date": "2024-01-01", "proteinIntake": 1.0, "calorieIntake": 2.0}],
    )

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["proteinGoal"] == 150.0
    assert data["dailyLogs"][0]["date"] == "2024-01-01"
    assert list(path.parent.glob("*.tmp")) == []


def test_values_survive_new_instance(tmp_path) -> None:
    path = tmp_path / "ledger.json"
    JsonFileKeyValueStore(path).set("calorieGoal", 2000.0)

    assert JsonFileKeyValueStore(path).get("calorieGoal") == 2000.0


def test_corrupt_file_reads_as_empty(tmp_path) -> None:
    path = tmp_path / "ledger.json"
    path.write_text("{truncated", encoding="utf-8")
    store = JsonFileKeyValueStore(path)

    assert store.get("dailyLogs") is None

    store.set("proteinGoal", 90.0)
    assert json.loads(path.read_text(encoding="utf-8")) == {"proteinGoal": 90.0}


def test_memory_store_copies_values() -> None:
    store = InMemoryKeyValueStore()
    logs = [{"date": "2024-01-01"}]

    store.set("dailyLogs", logs)
    logs.append({"date": "2024-01-02"})

    assert store.get("dailyLogs") == [{"date": "2024-01-01"}]


def test_failed_write_leaves_file_and_cache_untouched(tmp_path, monkeypatch) -> None:
    path = tmp_path / "ledger.json"
    store = JsonFileKeyValueStore(path)
    store.set("proteinGoal", 150.0)
    original = path.read_text(encoding="utf-8")

    def failing_replace(src, dst) -> None:
        raise OSError("rename failed")

    monkeypatch.setattr(os, "replace", failing_replace)

    with pytest.raises(OSError, match="rename failed"):
        store.set("proteinGoal", 90.0)

    assert path.read_text(encoding="utf-8") == original
    assert list(tmp_path.glob("*.tmp")) == []
    assert store.get("proteinGoal") == 150.0
