"""JSON API endpoints describing the running instance."""

from __future__ import annotations

from fastapi import APIRouter, Request

from .utils import get_context, get_logger

api_router = APIRouter(prefix="/api")


@api_router.get("/health")
def health_check() -> dict:
    return {"status": "ok"}


@api_router.get("/status")
def status(request: Request) -> dict:
    context = get_context(request)
    get_logger(request).debug("Status requested from %s", request.client)
    return {
        "status": "ok",
        "version": context.version,
        "environment": context.environment.value,
        "ssl": context.ssl,
        "num_threads": context.settings.num_threads,
    }
