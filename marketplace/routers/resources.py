"""CRUD endpoints, one router per listing resource type."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Request

from marketplace.core.errors import NotFoundError
from marketplace.domain.resources import ResourceDefinition
from marketplace.services.resource_service import ResourceService
from marketplace.services.session_service import AUTH_HEADER_NAME, require_session


def _get_service(request: Request, definition: ResourceDefinition) -> ResourceService:
    services = getattr(getattr(request.app, "state", None), "resources", None) or {}
    svc = services.get(definition.key)
    if not svc:
        raise RuntimeError(f"ResourceService for {definition.key} not configured")
    return svc


def _parse_id(definition: ResourceDefinition, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise NotFoundError(f"{definition.label} not found") from None


def build_router(definition: ResourceDefinition) -> APIRouter:
    router = APIRouter(prefix=f"/api/{definition.path}", tags=[definition.path])

    @router.get("")
    def list_items(request: Request):
        svc = _get_service(request, definition)
        return {definition.plural: svc.list(request.query_params)}

    @router.post("", status_code=201)
    def create_item(request: Request, payload: Any = Body(None)):
        created_by = None
        if definition.create_requires_auth:
            created_by = require_session(request.app.state.sessions, request.headers.get(AUTH_HEADER_NAME))
        svc = _get_service(request, definition)
        record = svc.create(payload, created_by=created_by)
        return {"message": f"{definition.title} created", definition.singular: record}

    @router.get("/{item_id}")
    def get_item(item_id: str, request: Request):
        svc = _get_service(request, definition)
        return {definition.singular: svc.get(_parse_id(definition, item_id))}

    @router.put("/{item_id}")
    def update_item(item_id: str, request: Request, payload: Any = Body(None)):
        svc = _get_service(request, definition)
        record = svc.update(_parse_id(definition, item_id), payload)
        return {"message": f"{definition.label} updated", definition.singular: record}

    @router.delete("/{item_id}")
    def delete_item(item_id: str, request: Request):
        svc = _get_service(request, definition)
        svc.delete(_parse_id(definition, item_id))
        return {"message": f"{definition.label} deleted"}

    return router
