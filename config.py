"""Environment-driven configuration values and startup validation for Eye2Gene."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from exceptions import InvalidConfigError

if os.getenv("LOAD_DOTENV", "1").lower() == "1":
    load_dotenv(os.getenv("DOTENV_FILE") or None)

logger = logging.getLogger(__name__)

MAX_USUAL_THREADS = 256
ALL_INTERFACES = "0.0.0.0"
TRUE_VALUES = {"1", "true", "yes", "on"}


class Environment(str, Enum):
    development = "development"
    production = "production"

    @classmethod
    def parse(cls, value: Any) -> "Environment":
        if isinstance(value, cls):
            return value
        if str(value or "").strip().lower() == cls.development.value:
            return cls.development
        return cls.production


class BaseConfig:
    ENV = os.getenv("APP_ENV", "production").lower()
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    DATA_DIR = os.getenv("DATA_DIR", "~/.eye2gene")
    NUM_THREADS = os.getenv("NUM_THREADS", "1")
    HOST = os.getenv("APP_HOST", ALL_INTERFACES)
    PORT = os.getenv("APP_PORT", "4567")
    SSL = os.getenv("SSL", "false")
    SSL_CERTFILE = os.getenv("SSL_CERTFILE", "")
    SSL_KEYFILE = os.getenv("SSL_KEYFILE", "")

    OPEN_BROWSER = os.getenv("OPEN_BROWSER", "true")
    CLEANUP_TMP_ON_START = os.getenv("CLEANUP_TMP_ON_START", "false")
    CLEANUP_MAX_AGE_MINUTES = os.getenv("CLEANUP_MAX_AGE_MINUTES", "0")


class DevelopmentConfig(BaseConfig):
    ENV = "development"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()


class ProductionConfig(BaseConfig):
    ENV = "production"


class TestingConfig(BaseConfig):
    ENV = "production"
    OPEN_BROWSER = "false"


def get_config_class() -> type[BaseConfig]:
    env = os.getenv("APP_ENV", "production").lower()
    if env == "development":
        return DevelopmentConfig
    if env == "testing":
        return TestingConfig
    return ProductionConfig


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    num_threads: int
    host: str
    port: int
    ssl: bool
    environment: Environment
    log_level: str = "INFO"
    ssl_certfile: Optional[str] = None
    ssl_keyfile: Optional[str] = None
    open_browser: bool = True
    cleanup_tmp_on_start: bool = False
    cleanup_max_age_minutes: int = 0


# Settings field -> config class attribute holding its default.
_DEFAULT_KEYS = {
    "data_dir": "DATA_DIR",
    "num_threads": "NUM_THREADS",
    "host": "HOST",
    "port": "PORT",
    "ssl": "SSL",
    "environment": "ENV",
    "log_level": "LOG_LEVEL",
    "ssl_certfile": "SSL_CERTFILE",
    "ssl_keyfile": "SSL_KEYFILE",
    "open_browser": "OPEN_BROWSER",
    "cleanup_tmp_on_start": "CLEANUP_TMP_ON_START",
    "cleanup_max_age_minutes": "CLEANUP_MAX_AGE_MINUTES",
}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def _as_int(value: Any) -> int:
    # bool is an int subclass and floats truncate silently; reject both.
    if isinstance(value, bool):
        raise ValueError(f"boolean {value!r} is not an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{value!r} is not an integer")
    if isinstance(value, str):
        value = value.strip()
    return int(value)


def check_num_threads(value: Any) -> int:
    """Coerces the thread count to a positive integer.

    Raises InvalidConfigError (NUM_THREADS_INCORRECT) for anything else and
    warns, without failing, when the count is unusually high.
    """
    try:
        num_threads = _as_int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfigError(
            "NUM_THREADS_INCORRECT",
            f"Number of threads should be a positive integer, got {value!r}.",
        ) from exc
    if num_threads <= 0:
        raise InvalidConfigError(
            "NUM_THREADS_INCORRECT",
            f"Number of threads should be a positive integer, got {value!r}.",
        )

    logger.debug("Will use %d threads to run Eye2Gene.", num_threads)
    if num_threads > MAX_USUAL_THREADS:
        logger.warning("Number of threads set at %d is unusually high.", num_threads)
    return num_threads


def check_host(host: str) -> None:
    if host == ALL_INTERFACES:
        logger.warning(
            "Will listen on all interfaces (%s). Consider using 127.0.0.1 (--host option).",
            ALL_INTERFACES,
        )


def _check_port(value: Any) -> int:
    try:
        port = _as_int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfigError("PORT_INCORRECT", f"Port should be an integer, got {value!r}.") from exc
    if not 0 < port < 65536:
        raise InvalidConfigError("PORT_INCORRECT", f"Port {port} is out of range.")
    return port


def _check_max_age(value: Any) -> int:
    try:
        minutes = _as_int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfigError(
            "CLEANUP_MAX_AGE_INCORRECT", f"Cleanup age should be whole minutes, got {value!r}."
        ) from exc
    if minutes < 0:
        raise InvalidConfigError(
            "CLEANUP_MAX_AGE_INCORRECT", f"Cleanup age cannot be negative, got {minutes}."
        )
    return minutes


def load_settings(
    overrides: Optional[Mapping[str, Any]] = None,
    config_class: Optional[type[BaseConfig]] = None,
) -> Settings:
    """Merges config class defaults with overrides and validates the result."""
    app_config = config_class or get_config_class()
    values = {field: getattr(app_config, key) for field, key in _DEFAULT_KEYS.items()}
    for key, value in (overrides or {}).items():
        if key not in values:
            raise InvalidConfigError("UNKNOWN_SETTING", f"Unknown setting {key!r}.")
        if value is not None:
            values[key] = value

    ssl = _as_bool(values["ssl"])
    certfile = str(values["ssl_certfile"] or "") or None
    keyfile = str(values["ssl_keyfile"] or "") or None
    if ssl and not (certfile and keyfile):
        raise InvalidConfigError(
            "SSL_CONFIG_INCORRECT", "SSL needs both a certificate file and a key file."
        )

    max_age = _check_max_age(values["cleanup_max_age_minutes"])

    return Settings(
        data_dir=Path(str(values["data_dir"])).expanduser().resolve(),
        num_threads=check_num_threads(values["num_threads"]),
        host=str(values["host"]),
        port=_check_port(values["port"]),
        ssl=ssl,
        environment=Environment.parse(values["environment"]),
        log_level=str(values["log_level"]).upper(),
        ssl_certfile=certfile,
        ssl_keyfile=keyfile,
        open_browser=_as_bool(values["open_browser"]),
        cleanup_tmp_on_start=_as_bool(values["cleanup_tmp_on_start"]),
        cleanup_max_age_minutes=max_age,
    )
