"""Command line entry point: initialize Eye2Gene and serve it with uvicorn."""

from __future__ import annotations

import argparse
import code
import logging
from typing import Optional, Sequence

from app_factory import create_app
from bootstrap import AppContext, initialize
from config import (
    BaseConfig,
    DevelopmentConfig,
    Environment,
    ProductionConfig,
    get_config_class,
)
from exceptions import (
    FilesystemError,
    InvalidConfigError,
    PermissionDeniedOnBindError,
    PortInUseError,
)
from logging_config import configure_logging
from server import serve
from version import __version__

logger = logging.getLogger(__name__)

EXIT_BIND_FAILED = 1
EXIT_INVALID_CONFIG = 2
EXIT_FILESYSTEM = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eye2gene", description="Upload and analyse OCT scans in your browser."
    )
    parser.add_argument("-d", "--data-dir", help="Directory for public files, users and temp data")
    parser.add_argument("-n", "--num-threads", help="Number of worker threads")
    parser.add_argument("--host", help="Host to bind to")
    parser.add_argument("-p", "--port", type=int, help="Port to listen on")
    parser.add_argument("-s", "--ssl", action="store_true", default=None, help="Serve over HTTPS")
    parser.add_argument("--ssl-certfile", help="SSL certificate file")
    parser.add_argument("--ssl-keyfile", help="SSL private key file")
    parser.add_argument(
        "-e",
        "--environment",
        choices=[env.value for env in Environment],
        help="Runtime environment (defaults to APP_ENV)",
    )
    parser.add_argument(
        "--no-browser", dest="open_browser", action="store_false", default=None,
        help="Do not open a browser on startup",
    )
    parser.add_argument("--console", action="store_true", help="Start an interactive console")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _config_class_for(environment: Optional[str]) -> type[BaseConfig]:
    if environment == Environment.development.value:
        return DevelopmentConfig
    if environment == Environment.production.value:
        return ProductionConfig
    return get_config_class()


def _overrides(args: argparse.Namespace) -> dict:
    return {
        "data_dir": args.data_dir,
        "num_threads": args.num_threads,
        "host": args.host,
        "port": args.port,
        "ssl": args.ssl,
        "ssl_certfile": args.ssl_certfile,
        "ssl_keyfile": args.ssl_keyfile,
        "environment": args.environment,
        "open_browser": args.open_browser,
    }


def _print_port_in_use(context: AppContext) -> None:
    print(f"** Could not bind to port {context.settings.port}.")
    print(f"   Is Eye2Gene already accessible at {context.server_url()}?")
    print("   No? Try running Eye2Gene on another port, like so:")
    print()
    print("       eye2gene -p 4570.")


def _print_permission_denied(context: AppContext) -> None:
    print(f"** Need root privilege to bind to port {context.settings.port}.")
    print("   It is not advisable to run Eye2Gene as root.")
    print("   Please use Apache/Nginx to bind to a privileged port.")


def console(context: AppContext, app) -> None:
    code.interact(
        banner=f"Eye2Gene {context.version} console. `context` and `app` are available.",
        local={"context": context, "app": app},
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config_class = _config_class_for(args.environment)
    verbose = Environment.parse(config_class.ENV) is Environment.development
    configure_logging(config_class.LOG_LEVEL, verbose=verbose)

    try:
        context = initialize(_overrides(args), config_class=config_class)
    except InvalidConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_INVALID_CONFIG
    except FilesystemError as exc:
        logger.error("Could not set up %s: %s", exc.path, exc.reason)
        return EXIT_FILESYSTEM

    app = create_app(context)
    if args.console:
        console(context, app)
        return 0

    try:
        serve(context, app)
    except PortInUseError:
        _print_port_in_use(context)
        return EXIT_BIND_FAILED
    except PermissionDeniedOnBindError:
        _print_permission_denied(context)
        return EXIT_BIND_FAILED
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
