from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Request

from marketplace.services.auth_service import AuthService, public_user
from marketplace.services.session_service import AUTH_HEADER_NAME

router = APIRouter(prefix="/api", tags=["auth"])


def _get_auth_service(request: Request) -> AuthService:
    svc = getattr(getattr(request.app, "state", None), "auth_service", None)
    if not svc:
        raise RuntimeError("AuthService not configured")
    return svc


@router.post("/register", status_code=201)
def register(request: Request, payload: Any = Body(None)):
    user = _get_auth_service(request).register(payload)
    return {"message": "User registered successfully", "user": public_user(user)}


@router.post("/login")
def login(request: Request, payload: Any = Body(None)):
    result = _get_auth_service(request).login(payload)
    return {
        "message": "Login successful",
        "token": result.token,
        "user": {"username": result.username, "role": result.role},
    }


@router.post("/logout")
def logout(request: Request):
    _get_auth_service(request).logout(request.headers.get(AUTH_HEADER_NAME))
    return {"message": "Logged out"}


@router.get("/me")
def me(request: Request):
    user = _get_auth_service(request).current_user(request.headers.get(AUTH_HEADER_NAME))
    return {"user": public_user(user)}
