"""FastAPI dependency helpers."""

from __future__ import annotations

from fastapi import HTTPException, Request


def _service(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(status_code=500, detail=f"{name.replace('_', ' ').capitalize()} not configured")
    return service


def dispatcher(request: Request):
    return _service(request, "dispatcher")


def settings_store(request: Request):
    return _service(request, "settings_store")


def proxy(request: Request):
    return _service(request, "proxy")
