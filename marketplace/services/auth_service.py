"""
Authentication and identity related use cases.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from marketplace.core.errors import AuthError, ConflictError
from marketplace.core.logging import get_logger
from marketplace.core.security import hash_password, verify_password
from marketplace.repositories.resource_store import Record
from marketplace.services.resource_service import ResourceService, utc_timestamp
from marketplace.services.session_service import SessionRegistry, require_session, token_from_header

log = get_logger(__name__)


class AccountExistsError(ConflictError):
    pass


class InvalidCredentialsError(AuthError):
    pass


@dataclass
class LoginSuccess:
    token: str
    username: str
    role: str


def public_user(record: Record) -> dict[str, Any]:
    """User fields safe to return to clients."""
    return {"id": record["id"], "username": record["username"], "role": record["role"]}


class AuthService:
    """Handles registration, login and session lookups on top of the users store."""

    def __init__(self, users: ResourceService, sessions: SessionRegistry) -> None:
        self.users = users
        self.sessions = sessions

    def _find(self, username: str) -> Optional[Record]:
        for record in self.users.store.find_all(lambda r: r.get("username") == username):
            return record
        return None

    def register(self, payload: Any) -> Record:
        values = self.users.parse(payload)
        username = values["username"]
        if self._find(username) is not None:
            raise AccountExistsError("User already exists")
        record = {
            "id": None,
            "username": username,
            "password": hash_password(values["password"]),
            "role": values["role"],
            "dateCreated": utc_timestamp(),
        }
        stored = self.users.store.insert_unique(record, "username")
        if stored is None:
            raise AccountExistsError("User already exists")
        log.info("user_registered", id=stored["id"], username=username)
        return stored

    def login(self, payload: Any) -> LoginSuccess:
        values = self.users.parse(payload, partial=True)
        username = values.get("username") or ""
        password = values.get("password") or ""
        user = self._find(username) if username else None
        if not user or not verify_password(password, user.get("password")):
            log.info("login_failed", username=username)
            raise InvalidCredentialsError("Invalid credentials")
        token = self.sessions.create(username)
        return LoginSuccess(token=token, username=username, role=user["role"])

    def logout(self, header_value: Optional[str]) -> None:
        require_session(self.sessions, header_value)
        self.sessions.revoke(token_from_header(header_value))

    def current_user(self, header_value: Optional[str]) -> Record:
        username = require_session(self.sessions, header_value)
        user = self._find(username)
        if user is None:
            raise AuthError("Invalid or expired token")
        return user
