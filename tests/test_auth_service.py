from __future__ import annotations

import threading

import pytest

from marketplace.core.errors import AuthError, ValidationError
from marketplace.domain.resources import USERS
from marketplace.repositories.base import MemoryStateStore
from marketplace.repositories.resource_store import ResourceStore
from marketplace.services.auth_service import AccountExistsError, AuthService, InvalidCredentialsError
from marketplace.services.resource_service import ResourceService
from marketplace.services.session_service import InMemorySessionRegistry, require_session, token_from_header


@pytest.fixture()
def auth():
    users = ResourceService(USERS, ResourceStore(USERS.key, MemoryStateStore()))
    return AuthService(users, InMemorySessionRegistry())


def test_register_hashes_password_and_defaults_role(auth):
    user = auth.register({"username": "alice", "password": "pw"})

    assert user["id"] == 1
    assert user["role"] == "user"
    assert user["password"] != "pw"
    assert user["password"].startswith("argon2$")


def test_register_rejects_duplicates_and_missing_fields(auth):
    auth.register({"username": "alice", "password": "pw", "role": "admin"})
    with pytest.raises(AccountExistsError):
        auth.register({"username": "alice", "password": "other"})
    with pytest.raises(ValidationError):
        auth.register({"username": "bob"})


def test_login_issues_resolvable_token(auth):
    auth.register({"username": "alice", "password": "pw", "role": "admin"})

    result = auth.login({"username": "alice", "password": "pw"})

    assert result.token
    assert result.role == "admin"
    assert auth.sessions.resolve(result.token) == "alice"
    assert auth.current_user(f"Bearer {result.token}")["username"] == "alice"


@pytest.mark.parametrize(
    "payload",
    [{"username": "alice", "password": "nope"}, {"username": "carol", "password": "pw"}, {}],
)
def test_login_rejects_bad_credentials(auth, payload):
    auth.register({"username": "alice", "password": "pw"})
    with pytest.raises(InvalidCredentialsError):
        auth.login(payload)


def test_logout_revokes_token(auth):
    auth.register({"username": "alice", "password": "pw"})
    token = auth.login({"username": "alice", "password": "pw"}).token

    auth.logout(token)

    with pytest.raises(AuthError):
        auth.current_user(token)


def test_require_session_checks_header():
    registry = InMemorySessionRegistry()
    token = registry.create("alice")

    assert token_from_header(f"  bearer {token} ") == token
    assert require_session(registry, token) == "alice"
    with pytest.raises(AuthError):
        require_session(registry, None)
    with pytest.raises(AuthError):
        require_session(registry, "forged")


def test_concurrent_registrations_keep_usernames_unique(auth):
    workers = 4
    barrier = threading.Barrier(workers)
    outcomes = []

    def attempt() -> None:
        barrier.wait()
        try:
            auth.register({"username": "alice", "password": "pw"})
            outcomes.append("ok")
        except AccountExistsError:
            outcomes.append("exists")

    threads = [threading.Thread(target=attempt) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["exists"] * (workers - 1) + ["ok"]
    assert len(auth.users.store.find_all(lambda r: r["username"] == "alice")) == 1
