"""Provisions the Eye2Gene data directory without starting the server."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from config import load_settings  # noqa: E402
from exceptions import FilesystemError, InvalidConfigError  # noqa: E402
from logging_config import configure_logging  # noqa: E402
from services.provisioning import provision  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("-d", "--data-dir", help="Data directory to provision")
    parser.add_argument("-e", "--environment", choices=["development", "production"])
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every directory")
    args = parser.parse_args()

    configure_logging("DEBUG" if args.verbose else "INFO")
    try:
        settings = load_settings({"data_dir": args.data_dir, "environment": args.environment})
        layout = provision(settings)
    except (InvalidConfigError, FilesystemError) as exc:
        print(exc, file=sys.stderr)
        return 1

    for name, path in sorted(vars(layout).items()):
        print(f"{name:<26} {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
