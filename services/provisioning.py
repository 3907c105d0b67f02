"""Idempotent provisioning of the data directory, public assets and default user."""

from __future__ import annotations

import errno
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Protocol

from config import Environment, Settings
from exceptions import FilesystemError
from paths import INSTALL_ROOT, DirectoryLayout, bundled_assets_dir, bundled_data_dir
from version import __version__

from .timing import log_timing

logger = logging.getLogger(__name__)


@contextmanager
def provisioning_step(step: str, path: Path) -> Iterator[None]:
    try:
        yield
    except OSError as exc:
        logger.error("Provisioning step '%s' failed for %s: %s", step, path, exc)
        raise FilesystemError(step, path, str(exc)) from exc


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def ensure_symlink(link: Path, target: Path) -> None:
    try:
        link.symlink_to(target, target_is_directory=True)
    except FileExistsError:
        logger.debug("%s was created concurrently; keeping it", link)


def remove_path(path: Path) -> None:
    """Removes a file, a directory tree or a symlink (never its target)."""
    if path.is_symlink() or path.is_file():
        path.unlink(missing_ok=True)
        return
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass


def copy_tree_into_place(source: Path, target: Path, staging_root: Path) -> None:
    """Copies ``source`` to ``target`` without ever exposing a partial tree.

    The copy is staged in a hidden directory under ``staging_root``, which must
    be on the same filesystem and outside anything served, then renamed into
    place. If another process got there first, its tree is kept and the staged
    copy dropped.
    """
    staging = Path(tempfile.mkdtemp(prefix=f".{target.name}-", dir=staging_root))
    try:
        staged = staging / target.name
        shutil.copytree(source, staged, symlinks=True)
        try:
            os.rename(staged, target)
        except OSError:
            if not target.exists():
                raise
            logger.debug("%s was deployed concurrently; discarding staged copy", target)
    finally:
        shutil.rmtree(staging, ignore_errors=True)


class AssetDeploymentStrategy(Protocol):
    name: str

    def deploy(self, source: Path, layout: DirectoryLayout, version: str) -> None:
        ...


class SymlinkAssets:
    """Development: ``assets_dir`` is a live symlink to the bundled assets."""

    name = "symlink"

    def deploy(self, source: Path, layout: DirectoryLayout, version: str) -> None:
        if not source.is_dir():
            raise FileNotFoundError(errno.ENOENT, "Bundled assets not found", str(source))
        assets = layout.assets_dir
        if assets.is_symlink():
            if Path(os.readlink(assets)) != source or not assets.exists():
                logger.debug("Replacing stale asset symlink %s", assets)
                remove_path(assets)
        elif assets.exists():
            logger.debug("Replacing copied assets at %s with a symlink", assets)
            remove_path(assets)

        if not assets.is_symlink():
            ensure_symlink(assets, source)


class CopyAssets:
    """Production: ``assets_dir`` is a real copy, redeployed when the version changes."""

    name = "copy"

    def deploy(self, source: Path, layout: DirectoryLayout, version: str) -> None:
        assets = layout.assets_dir
        stylesheet = layout.stylesheet(version)
        if assets.is_symlink() or not stylesheet.exists():
            if assets.exists() or assets.is_symlink():
                logger.info("Redeploying assets for version %s", version)
            remove_path(assets)

        if not assets.exists():
            copy_tree_into_place(source, assets, layout.data_dir)


def build_asset_strategy(environment: Environment) -> AssetDeploymentStrategy:
    if environment is Environment.development:
        return SymlinkAssets()
    return CopyAssets()


def seed_public_data(source: Path, layout: DirectoryLayout) -> None:
    # Seeded once; user content under public_data_dir is never refreshed.
    if layout.public_data_dir.exists():
        return
    copy_tree_into_place(source, layout.public_data_dir, layout.data_dir)


def link_default_user(layout: DirectoryLayout) -> None:
    ensure_dir(layout.default_user_dir)
    link = layout.default_user_public_link
    if link.exists():
        return
    if link.is_symlink():
        logger.debug("Replacing dangling default user link %s", link)
        link.unlink(missing_ok=True)
    ensure_dir(link.parent)
    ensure_symlink(link, layout.default_user_dir)


def provision(
    settings: Settings,
    *,
    install_root: Path = INSTALL_ROOT,
    version: str = __version__,
) -> DirectoryLayout:
    """Brings the on-disk layout for ``settings.data_dir`` up to date.

    Safe to run on every start and from several processes at once. Any failure
    raises FilesystemError naming the step and path; nothing is retried.
    """
    layout = DirectoryLayout.build(settings.data_dir, install_root)
    strategy = build_asset_strategy(settings.environment)
    logger.debug("Eye2Gene Directory: %s", layout.data_dir)

    with log_timing("Provisioning", logger):
        with provisioning_step("public_dir", layout.public_dir):
            logger.debug("public_dir Directory: %s", layout.public_dir)
            ensure_dir(layout.public_dir)

        with provisioning_step(f"assets ({strategy.name})", layout.assets_dir):
            strategy.deploy(bundled_assets_dir(install_root), layout, version)

        with provisioning_step("public_data_dir", layout.public_data_dir):
            seed_public_data(bundled_data_dir(install_root), layout)

        with provisioning_step("script_dir", layout.script_dir):
            logger.debug("script_dir Directory: %s", layout.script_dir)
            ensure_dir(layout.script_dir)

        with provisioning_step("tmp_dir", layout.tmp_dir):
            logger.debug("tmp_dir Directory: %s", layout.tmp_dir)
            ensure_dir(layout.tmp_dir)

        with provisioning_step("users_dir", layout.users_dir):
            logger.debug("users_dir Directory: %s", layout.users_dir)
            ensure_dir(layout.users_dir)

        with provisioning_step("default_user", layout.default_user_public_link):
            link_default_user(layout)

    return layout
