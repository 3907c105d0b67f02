"""Request helpers for reaching the startup context and the injected logger."""

from __future__ import annotations

import logging

from starlette.requests import Request

from bootstrap import AppContext


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_logger(request: Request) -> logging.Logger:
    # Set by the logger middleware; fall back for requests that bypass it.
    return getattr(request.state, "logger", logging.getLogger("eye2gene.request"))
