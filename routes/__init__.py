"""Route registration for the Eye2Gene API."""

from __future__ import annotations

from fastapi import FastAPI

from .api import api_router


def register_routes(app: FastAPI) -> None:
    app.include_router(api_router)
