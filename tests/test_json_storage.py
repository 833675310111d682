from __future__ import annotations

import json

import pytest

from marketplace.core.errors import PersistenceError
from marketplace.repositories.base import empty_state
from marketplace.repositories.json_storage import JsonStateStore
from marketplace.repositories.resource_store import ResourceStore


def test_missing_file_yields_defaults(tmp_path):
    store = JsonStateStore(tmp_path / "data")
    assert store.load("companies", empty_state()) == {"nextId": 1, "items": []}


def test_save_writes_pretty_printed_document(tmp_path):
    store = JsonStateStore(tmp_path / "data")
    state = {"nextId": 2, "items": [{"id": 1, "name": "Acme", "dateCreated": "2024-01-01T00:00:00.000Z"}]}

    store.save("companies", state)

    path = tmp_path / "data" / "companies.json"
    text = path.read_text(encoding="utf-8")
    assert json.loads(text) == state
    assert '\n  "nextId": 2' in text
    assert store.load("companies", empty_state()) == state
    assert [p.name for p in (tmp_path / "data").iterdir()] == ["companies.json"]


@pytest.mark.parametrize("content", ["{not json", '{"nextId": "x", "items": []}', '{"items": [1, 2]}', "[]"])
def test_corrupt_file_falls_back_to_defaults(tmp_path, content):
    data = tmp_path / "data"
    data.mkdir()
    (data / "vacancies.json").write_text(content, encoding="utf-8")

    store = JsonStateStore(data)
    assert store.load("vacancies", empty_state()) == {"nextId": 1, "items": []}
    # the unreadable file is left for inspection
    assert (data / "vacancies.json").read_text(encoding="utf-8") == content


def test_corrupt_file_raises_in_strict_mode(tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    (data / "vacancies.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceError):
        JsonStateStore(data, strict=True).load("vacancies", empty_state())


def test_write_failure_is_reported(tmp_path):
    blocker = tmp_path / "data"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(PersistenceError):
        JsonStateStore(blocker).save("companies", empty_state())


def test_store_round_trip_across_restart(tmp_path):
    backend = JsonStateStore(tmp_path / "data")
    store = ResourceStore("companies", backend)
    created = [store.insert({"name": n, "category": "it", "description": "d"}) for n in ("a", "b", "c")]

    restarted = ResourceStore("companies", JsonStateStore(tmp_path / "data"))

    assert restarted.find_all() == created
    assert restarted.insert({"name": "d"})["id"] == 4


def test_non_finite_numbers_are_not_written(tmp_path):
    store = ResourceStore("companies", JsonStateStore(tmp_path / "data"))
    kept = store.insert({"name": "a", "rating": 3})

    with pytest.raises(PersistenceError):
        store.insert({"name": "b", "rating": float("inf")})

    assert store.find_all() == [kept]
    assert "Infinity" not in (tmp_path / "data" / "companies.json").read_text(encoding="utf-8")
