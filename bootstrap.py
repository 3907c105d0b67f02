"""Startup sequence: validated settings, provisioned directories, immutable context."""

from __future__ import annotations

import _thread
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from config import BaseConfig, Environment, Settings, load_settings
from paths import INSTALL_ROOT, DirectoryLayout
from services.cleanup import cleanup_folder
from services.provisioning import provision
from version import __version__

logger = logging.getLogger(__name__)

LOCAL_HOSTS = {"127.0.0.1", "0.0.0.0"}


@dataclass(frozen=True)
class AppContext:
    """Everything the server and router need, built once per process."""

    settings: Settings
    layout: DirectoryLayout
    version: str = __version__

    @property
    def environment(self) -> Environment:
        return self.settings.environment

    @property
    def verbose(self) -> bool:
        return self.settings.environment is Environment.development

    @property
    def ssl(self) -> bool:
        return self.settings.ssl

    @property
    def public_dir(self) -> Path:
        return self.layout.public_dir

    @property
    def users_dir(self) -> Path:
        return self.layout.users_dir

    @property
    def tmp_dir(self) -> Path:
        return self.layout.tmp_dir

    @property
    def script_dir(self) -> Path:
        return self.layout.script_dir

    def server_url(self, initial_page: str = "/") -> str:
        host = self.settings.host
        if host in LOCAL_HOSTS:
            host = "localhost"
        elif ":" in host:
            host = f"[{host}]"
        scheme = "https" if self.ssl else "http"
        page = initial_page if initial_page.startswith("/") else f"/{initial_page}"
        return f"{scheme}://{host}:{self.settings.port}{page}"


def _abort_on_thread_exception(args: threading.ExceptHookArgs) -> None:
    if issubclass(args.exc_type, SystemExit):
        return
    thread_name = args.thread.name if args.thread else "unknown"
    logger.critical(
        "Unhandled exception in thread %s; aborting.",
        thread_name,
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
    )
    _thread.interrupt_main()


def enable_abort_on_exception() -> None:
    """Makes an uncaught exception in any thread stop the whole process."""
    threading.excepthook = _abort_on_thread_exception


def initialize(
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    config_class: Optional[type[BaseConfig]] = None,
    install_root: Path = INSTALL_ROOT,
    version: str = __version__,
) -> AppContext:
    # Settings are validated before anything touches the filesystem.
    settings = load_settings(overrides, config_class)
    if settings.environment is Environment.development:
        enable_abort_on_exception()

    layout = provision(settings, install_root=install_root, version=version)
    if settings.cleanup_tmp_on_start:
        cleanup_folder(layout.tmp_dir, settings.cleanup_max_age_minutes)

    return AppContext(settings=settings, layout=layout, version=version)
