"""Startup services: provisioning of the data directory and temp housekeeping."""

from __future__ import annotations

from .cleanup import cleanup_folder
from .provisioning import (
    AssetDeploymentStrategy,
    CopyAssets,
    SymlinkAssets,
    build_asset_strategy,
    provision,
)

__all__ = [
    "AssetDeploymentStrategy",
    "CopyAssets",
    "SymlinkAssets",
    "build_asset_strategy",
    "cleanup_folder",
    "provision",
]
