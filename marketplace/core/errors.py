"""Error taxonomy shared by services and translated to HTTP responses in app.py."""

from __future__ import annotations

from typing import Any


class MarketplaceError(Exception):
    """Base class for request-terminating errors."""

    status_code = 500

    def __init__(self, message: str, *, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": self.message}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class ValidationError(MarketplaceError):
    """Missing required field or malformed payload."""

    status_code = 400


class AuthError(MarketplaceError):
    """Missing, invalid or restart-expired session token, or bad credentials."""

    status_code = 401


class NotFoundError(MarketplaceError):
    status_code = 404


class ConflictError(MarketplaceError):
    """Duplicate username."""

    status_code = 409


class PersistenceError(MarketplaceError):
    """Durable state could not be read (strict mode) or written."""

    status_code = 500
