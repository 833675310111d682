"""Session helpers (issue tokens, resolve them from the Authorization header)."""
from __future__ import annotations

import secrets
import threading
from typing import Optional, Protocol

from marketplace.core.errors import AuthError

AUTH_HEADER_NAME = "authorization"
BEARER_PREFIX = "bearer "


class SessionRegistry(Protocol):
    """Maps opaque tokens to the username they were issued for."""

    def create(self, identity: str) -> str:
        ...

    def resolve(self, token: str) -> Optional[str]:
        ...

    def revoke(self, token: str) -> None:
        ...


class InMemorySessionRegistry:
    """Tokens live in process memory only; a restart invalidates every session."""

    def __init__(self) -> None:
        self._sessions: dict[str, str] = {}
        self._lock = threading.Lock()

    def create(self, identity: str) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._sessions[token] = identity
        return token

    def resolve(self, token: str) -> Optional[str]:
        if not token:
            return None
        return self._sessions.get(token)

    def revoke(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)


def token_from_header(value: Optional[str]) -> str:
    """Accept either the raw token or ``Bearer <token>``."""
    raw = (value or "").strip()
    if raw.lower().startswith(BEARER_PREFIX):
        raw = raw[len(BEARER_PREFIX) :].strip()
    return raw


def require_session(registry: SessionRegistry, header_value: Optional[str]) -> str:
    """Return the identity behind the Authorization header or raise AuthError."""
    token = token_from_header(header_value)
    if not token:
        raise AuthError("Authorization token required")
    identity = registry.resolve(token)
    if identity is None:
        raise AuthError("Invalid or expired token")
    return identity
