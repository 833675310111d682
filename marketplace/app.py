from __future__ import annotations

import dataclasses
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from marketplace.core.config import Settings, get_settings
from marketplace.core.errors import MarketplaceError
from marketplace.core.logging import configure_logging, get_logger
from marketplace.domain.resources import CLASSIFIEDS, LISTING_RESOURCES, USERS
from marketplace.repositories.base import MemoryStateStore, StateStore
from marketplace.repositories.json_storage import JsonStateStore
from marketplace.repositories.resource_store import ResourceStore
from marketplace.routers import auth as auth_router
from marketplace.routers.resources import build_router
from marketplace.services.auth_service import AuthService
from marketplace.services.resource_service import ResourceService
from marketplace.services.session_service import InMemorySessionRegistry, SessionRegistry

log = get_logger(__name__)

DEV_ORIGINS = {
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers for a JSON-only API."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("Content-Security-Policy", "default-src 'none'; frame-ancestors 'none'")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def open_state_store(settings: Settings) -> StateStore:
    """Build the persistence backend selected by STORAGE_BACKEND."""
    if settings.storage_backend == "memory":
        return MemoryStateStore()
    if settings.storage_backend == "sql":
        from marketplace.db.create_tables import create_all
        from marketplace.repositories.sql_repository import SQLStateStore

        create_all(settings.database_url or None)
        return SQLStateStore(settings.database_url, strict=settings.strict_storage)
    return JsonStateStore(settings.data_dir, strict=settings.strict_storage)


async def _marketplace_error(request: Request, exc: MarketplaceError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("request_failed", path=request.url.path, method=request.method, error=exc.message)
    return JSONResponse(exc.to_payload(), status_code=exc.status_code)


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ())), "error": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse({"message": "Invalid request body", "errors": errors}, status_code=400)


def create_app(
    settings: Optional[Settings] = None,
    *,
    state_store: Optional[StateStore] = None,
    sessions: Optional[SessionRegistry] = None,
) -> FastAPI:
    """Factory compatible with ``uvicorn marketplace.app:create_app --factory``."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_logs=settings.log_json, app_env=settings.app_env)

    backend = state_store if state_store is not None else open_state_store(settings)
    if sessions is None:
        sessions = InMemorySessionRegistry()
    definitions = [
        dataclasses.replace(d, create_requires_auth=settings.classifieds_require_auth) if d is CLASSIFIEDS else d
        for d in LISTING_RESOURCES
    ]

    users = ResourceService(USERS, ResourceStore(USERS.key, backend, seed=settings.id_seed))
    resources = {
        d.key: ResourceService(d, ResourceStore(d.key, backend, seed=settings.id_seed)) for d in definitions
    }

    app = FastAPI(title="Marketplace API")
    app.state.settings = settings
    app.state.state_store = backend
    app.state.sessions = sessions
    app.state.resources = resources
    app.state.auth_service = AuthService(users, sessions)

    allowed_cors = set(settings.cors_origins)
    if settings.app_env != "prod":
        allowed_cors.update(DEV_ORIGINS)
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    app.add_exception_handler(MarketplaceError, _marketplace_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)

    @app.get("/health")
    def health():
        return {"status": "ok", "storage": backend.name}

    app.include_router(auth_router.router)
    for definition in definitions:
        app.include_router(build_router(definition))

    log.info("app_started", env=settings.app_env, storage=backend.name, resources=sorted(resources))
    return app
