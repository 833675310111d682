"""
Configuration helpers for the marketplace backend.

Routers and services read a single Settings object instead of fetching
os.environ directly; tests reset it with ``get_settings.cache_clear()``.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

STORAGE_BACKENDS = ("memory", "json", "sql")


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    storage_backend: str
    data_dir: str
    database_url: str
    strict_storage: bool
    classifieds_require_auth: bool
    id_seed: int
    log_level: str
    log_json: bool
    cors_origins: tuple[str, ...]


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    backend = (os.getenv("STORAGE_BACKEND") or "json").strip().lower()
    if backend not in STORAGE_BACKENDS:
        raise RuntimeError(f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, got {backend!r}")
    origins = tuple(o.strip().rstrip("/") for o in (os.getenv("CORS_ORIGINS") or "").split(",") if o.strip())

    return Settings(
        app_env=app_env,
        storage_backend=backend,
        data_dir=os.getenv("DATA_DIR", "data"),
        database_url=os.getenv("DATABASE_URL", ""),
        strict_storage=_bool(os.getenv("STRICT_STORAGE"), False),
        classifieds_require_auth=_bool(os.getenv("CLASSIFIEDS_REQUIRE_AUTH"), True),
        id_seed=max(1, _int(os.getenv("ID_SEED", "1"), 1)),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_json=_bool(os.getenv("LOG_JSON"), app_env == "prod"),
        cors_origins=origins,
    )
