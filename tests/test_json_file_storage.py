"""Tests for the JSON-file key/value storage."""

from pathlib import Path

from better_food_logs.adapters.json_file_storage import JsonFileStorage
from better_food_logs.services.local_store import LocalStore
from tests.conftest import make_food


def test_values_persist_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"
    JsonFileStorage(path).set_item("greeting", "hello")

    assert JsonFileStorage(path).get_item("greeting") == "hello"


def test_missing_file_reads_as_empty(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "absent.json")

    assert storage.get_item("anything") is None
    storage.remove_item("anything")
    assert not (tmp_path / "absent.json").exists()


def test_remove_item(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "storage.json")
    storage.set_item("a", "1")
    storage.set_item("b", "2")

    storage.remove_item("a")

    assert storage.get_item("a") is None
    assert storage.get_item("b") == "2"


def test_unreadable_file_is_replaced_on_write(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{broken", encoding="utf-8")
    storage = JsonFileStorage(path)

    assert storage.get_item("a") is None
    storage.set_item("a", "1")
    assert storage.get_item("a") == "1"


def test_local_store_over_file_storage(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    stored = LocalStore(JsonFileStorage(path)).add_food(make_food("f1"))

    assert LocalStore(JsonFileStorage(path)).get_foods() == [stored]
    assert list(tmp_path.iterdir()) == [path]
