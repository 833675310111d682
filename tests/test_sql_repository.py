"""
Smoke tests for the SQLStateStore against a temporary SQLite database.
"""
from __future__ import annotations

import importlib.util
import json
from pathlib import Path

import pytest

from marketplace.core import config as core_config
from marketplace.db import models
from marketplace.db import session as db_session
from marketplace.repositories.base import empty_state
from marketplace.repositories.resource_store import ResourceStore
from marketplace.repositories.sql_repository import SQLStateStore

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Point DATABASE_URL at a temporary SQLite file and reset cached settings/engines."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    engine = db_session.get_engine()
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    engine.dispose()
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


def test_missing_row_yields_defaults(temp_db):
    assert SQLStateStore().load("companies", empty_state()) == {"nextId": 1, "items": []}


def test_save_then_load_and_overwrite(temp_db):
    store = SQLStateStore()
    store.save("classifieds", {"nextId": 3, "items": [{"id": 1, "title": "a"}, {"id": 2, "title": "b"}]})
    store.save("classifieds", {"nextId": 3, "items": [{"id": 2, "title": "b"}]})

    assert store.load("classifieds", empty_state()) == {"nextId": 3, "items": [{"id": 2, "title": "b"}]}
    assert store.load("vacancies", empty_state()) == empty_state()


def test_resource_store_on_sql_resumes_ids(temp_db):
    store = ResourceStore("companies", SQLStateStore())
    for name in ("a", "b", "c"):
        store.insert({"name": name})

    restarted = ResourceStore("companies", SQLStateStore())
    assert [r["name"] for r in restarted.find_all()] == ["a", "b", "c"]
    assert restarted.insert({"name": "d"})["id"] == 4


def test_migrate_json_files_into_sql(temp_db, tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    state = {"nextId": 5, "items": [{"id": 4, "name": "Acme", "category": "it", "description": "d", "rating": 0}]}
    (data / "companies.json").write_text(json.dumps(state), encoding="utf-8")

    spec = importlib.util.spec_from_file_location("migrate_json_to_sql", ROOT / "scripts" / "migrate_json_to_sql.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    assert module.migrate(data) == {"companies": 1}
    assert SQLStateStore().load("companies", empty_state()) == state
