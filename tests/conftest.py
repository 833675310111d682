from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the marketplace package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from marketplace.core.config import Settings  # noqa: E402


@pytest.fixture()
def make_settings(tmp_path):
    """Build Settings without touching the environment."""

    def _make(**overrides) -> Settings:
        values = dict(
            app_env="test",
            storage_backend="json",
            data_dir=str(tmp_path / "data"),
            database_url="",
            strict_storage=False,
            classifieds_require_auth=True,
            id_seed=1,
            log_level="WARNING",
            log_json=False,
            cors_origins=(),
        )
        values.update(overrides)
        return Settings(**values)

    return _make
