"""Error types raised while configuring, provisioning and serving Eye2Gene."""

from __future__ import annotations

from pathlib import Path


class Eye2GeneError(Exception):
    pass


class InvalidConfigError(Eye2GeneError, ValueError):
    """A configuration value failed validation before startup."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


class FilesystemError(Eye2GeneError):
    """A provisioning step could not create, read, link or copy a path."""

    def __init__(self, step: str, path: Path, reason: str) -> None:
        super().__init__(f"Provisioning step '{step}' failed for {path}: {reason}")
        self.step = step
        self.path = path
        self.reason = reason


class BindError(Eye2GeneError):
    def __init__(self, host: str, port: int, message: str) -> None:
        super().__init__(message)
        self.host = host
        self.port = port


class PortInUseError(BindError):
    def __init__(self, host: str, port: int) -> None:
        super().__init__(host, port, f"Port {port} on {host} is already in use.")


class PermissionDeniedOnBindError(BindError):
    def __init__(self, host: str, port: int) -> None:
        super().__init__(host, port, f"Permission denied binding to {host}:{port}.")
