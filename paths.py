"""Filesystem paths of the install bundle and the runtime data directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

INSTALL_ROOT = Path(__file__).resolve().parent
DEFAULT_USER = "eye2gene"


def bundled_assets_dir(install_root: Path = INSTALL_ROOT) -> Path:
    return install_root / "public" / "assets"


def bundled_data_dir(install_root: Path = INSTALL_ROOT) -> Path:
    return install_root / "public" / "eye2gene"


@dataclass(frozen=True)
class DirectoryLayout:
    """Every path the server reads, derived from ``data_dir`` and the install root.

    Default locations, with ``data_dir = ~/.eye2gene``::

        ~/.eye2gene/public/           public_dir
        ~/.eye2gene/public/assets/    assets_dir
        ~/.eye2gene/public/eye2gene/  public_data_dir
        ~/.eye2gene/users/            users_dir
        ~/.eye2gene/tmp/              tmp_dir
    """

    data_dir: Path
    public_dir: Path
    tmp_dir: Path
    users_dir: Path
    script_dir: Path
    assets_dir: Path
    public_data_dir: Path
    default_user_dir: Path
    default_user_public_link: Path

    @classmethod
    def build(cls, data_dir: Path, install_root: Path = INSTALL_ROOT) -> "DirectoryLayout":
        data_dir = Path(data_dir).expanduser().resolve()
        public_dir = data_dir / "public"
        users_dir = data_dir / "users"
        public_data_dir = public_dir / "eye2gene"
        return cls(
            data_dir=data_dir,
            public_dir=public_dir,
            tmp_dir=data_dir / "tmp",
            users_dir=users_dir,
            script_dir=install_root / "scripts",
            assets_dir=public_dir / "assets",
            public_data_dir=public_data_dir,
            default_user_dir=users_dir / DEFAULT_USER,
            default_user_public_link=public_data_dir / "users" / DEFAULT_USER,
        )

    def stylesheet(self, version: str) -> Path:
        return self.assets_dir / "css" / f"style-{version}.min.css"
