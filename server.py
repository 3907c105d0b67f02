"""Binding the listening socket and running uvicorn for an initialized context."""

from __future__ import annotations

import errno
import logging
import os
import shutil
import socket
import sys
import threading
import webbrowser
from typing import Mapping, Optional

import uvicorn
from fastapi import FastAPI

from bootstrap import AppContext
from config import check_host
from exceptions import PermissionDeniedOnBindError, PortInUseError

logger = logging.getLogger(__name__)

SSH_VARIABLES = ("SSH_CLIENT", "SSH_TTY", "SSH_CONNECTION")
BROWSER_DELAY_SECONDS = 1.0


def bind_socket(host: str, port: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as exc:
        sock.close()
        if exc.errno == errno.EADDRINUSE:
            raise PortInUseError(host, port) from exc
        if exc.errno == errno.EACCES:
            raise PermissionDeniedOnBindError(host, port) from exc
        raise
    sock.set_inheritable(True)
    return sock


def serve(context: AppContext, app: FastAPI) -> None:
    settings = context.settings
    check_host(settings.host)
    sock = bind_socket(settings.host, settings.port)
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level=settings.log_level.lower(),
        ssl_certfile=settings.ssl_certfile,
        ssl_keyfile=settings.ssl_keyfile,
    )
    try:
        uvicorn.Server(config).run(sockets=[sock])
    finally:
        sock.close()


def using_ssh(environ: Optional[Mapping[str, str]] = None) -> bool:
    environ = os.environ if environ is None else environ
    return any(environ.get(name) for name in SSH_VARIABLES)


def has_desktop(environ: Optional[Mapping[str, str]] = None, platform: str = sys.platform) -> bool:
    environ = os.environ if environ is None else environ
    if platform.startswith("linux"):
        has_display = bool(environ.get("DISPLAY") or environ.get("WAYLAND_DISPLAY"))
        return has_display and shutil.which("xdg-open") is not None
    return platform == "darwin"


def open_in_browser(url: str, context: AppContext) -> bool:
    """Opens ``url`` shortly after startup on a local desktop; returns whether it will."""
    if using_ssh() or context.verbose or not context.settings.open_browser:
        return False
    if not has_desktop():
        return False

    def _open() -> None:
        try:
            webbrowser.open(url)
        except webbrowser.Error as exc:
            logger.debug("Could not open a browser at %s: %s", url, exc)

    timer = threading.Timer(BROWSER_DELAY_SECONDS, _open)
    timer.daemon = True
    timer.start()
    return True


def on_start(context: AppContext) -> None:
    url = context.server_url()
    print("** Eye2Gene is ready.")
    print(f"   Go to {url} in your browser & start analysing OCT Scans!")
    print("   Press CTRL+C to quit.")
    open_in_browser(url, context)


def on_stop(context: AppContext) -> None:
    print()
    print("** Thank you for using Eye2Gene :).")
