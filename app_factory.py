"""Application factory that wires the startup context, lifecycle hooks, and routes."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from anyio import to_thread
from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles

from bootstrap import AppContext
from routes import register_routes
from server import on_start, on_stop

logger = logging.getLogger(__name__)
request_logger = logging.getLogger("eye2gene.request")


def create_app(context: AppContext) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Sync endpoints run on anyio's worker threads.
        to_thread.current_default_thread_limiter().total_tokens = context.settings.num_threads
        on_start(context)
        try:
            yield
        finally:
            on_stop(context)

    app = FastAPI(title="Eye2Gene", version=context.version, lifespan=lifespan)
    app.state.context = context

    @app.middleware("http")
    async def inject_logger(request: Request, call_next):
        request.state.logger = request_logger
        return await call_next(request)

    register_routes(app)

    # Registered last so API routes take precedence over static files.
    app.mount(
        "/",
        StaticFiles(directory=context.public_dir, html=True, follow_symlink=True),
        name="public",
    )
    logger.debug("Serving public files from %s", context.public_dir)
    return app
