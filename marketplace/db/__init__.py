"""SQL backend: engine/session helpers and the resource_state model."""

from .session import Base, get_engine, get_session

__all__ = ["Base", "get_engine", "get_session"]
