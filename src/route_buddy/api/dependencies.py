"""FastAPI dependency helpers."""

from fastapi import Request

from ..services.matrix import LocationStore


def get_store(request: Request) -> LocationStore:
    """Return the session store created by the app factory."""
    return request.app.state.store
