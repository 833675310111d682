#!/usr/bin/env python3
"""
One-off migration: JSON state files -> SQL backend.

Usage:
  DATABASE_URL=postgresql://... python scripts/migrate_json_to_sql.py [--data-dir data]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make the marketplace package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from marketplace.core.config import get_settings
from marketplace.core.errors import PersistenceError
from marketplace.db.create_tables import create_all
from marketplace.domain.resources import ALL_RESOURCES
from marketplace.repositories.base import empty_state
from marketplace.repositories.json_storage import JsonStateStore
from marketplace.repositories.sql_repository import SQLStateStore


def migrate(data_dir: str | Path) -> dict[str, int]:
    """Copy every resource type's state file into the SQL table; returns record counts."""
    source = JsonStateStore(data_dir, strict=True)
    target = SQLStateStore(strict=True)
    create_all()
    counts: dict[str, int] = {}
    for definition in ALL_RESOURCES:
        if not source.path_for(definition.key).exists():
            continue
        state = source.load(definition.key, empty_state())
        target.save(definition.key, state)
        counts[definition.key] = len(state["items"])
    return counts


def main() -> None:
    ap = argparse.ArgumentParser(description="Migrate JSON state files into the SQL backend")
    ap.add_argument("--data-dir", default=None, help="Directory holding <type>.json files (default: DATA_DIR)")
    args = ap.parse_args()

    data_dir = args.data_dir or get_settings().data_dir
    try:
        counts = migrate(data_dir)
    except PersistenceError as exc:
        raise SystemExit(f"Migration failed: {exc.message}") from exc
    for key, count in sorted(counts.items()):
        print(f"{key}: {count} records")
    print("JSON data migrated to SQL successfully.")


if __name__ == "__main__":
    main()
