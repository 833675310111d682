"""Engine/session helpers for the SQL state backend."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from marketplace.core.config import get_settings

Base = declarative_base()


@lru_cache
def get_engine(url: str | None = None) -> Engine:
    """Engine for ``url``, falling back to DATABASE_URL from the environment."""
    url = (url or get_settings().database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be configured when STORAGE_BACKEND=sql.")
    connect_args = {}
    if make_url(url).get_backend_name() == "sqlite":
        # sync endpoints run in FastAPI's thread pool
        connect_args["check_same_thread"] = False
    return create_engine(url, future=True, pool_pre_ping=True, connect_args=connect_args)


@lru_cache
def _get_sessionmaker(url: str | None = None) -> sessionmaker:
    return sessionmaker(bind=get_engine(url), autoflush=False, expire_on_commit=False, future=True)


@contextmanager
def get_session(url: str | None = None) -> Iterator[Session]:
    session: Session = _get_sessionmaker(url)()
    try:
        yield session
    finally:
        session.close()
