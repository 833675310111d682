"""Create the resource_state table: ``python -m marketplace.db.create_tables``."""
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from marketplace.core.logging import get_logger

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata

log = get_logger(__name__)


def create_all(url: str | None = None) -> None:
    engine = get_engine(url)
    Base.metadata.create_all(bind=engine)
    log.info("schema_ready", tables=sorted(Base.metadata.tables), url=engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    try:
        create_all()
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
