import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]


def pytest_configure() -> None:
    # Ensure the top-level modules import without installing the package.
    sys.path.insert(0, str(REPO_ROOT))


def write_bundle(install_root: Path, version: str) -> Path:
    """Creates (or replaces) a minimal install bundle shipping ``version``'s stylesheet."""
    css_dir = install_root / "public" / "assets" / "css"
    css_dir.mkdir(parents=True, exist_ok=True)
    for old in css_dir.glob("style-*.min.css"):
        old.unlink()
    (css_dir / f"style-{version}.min.css").write_text(f"/* {version} */")
    users = install_root / "public" / "eye2gene" / "users"
    users.mkdir(parents=True, exist_ok=True)
    (install_root / "public" / "eye2gene" / "README.txt").write_text("seed")
    return install_root


@pytest.fixture
def install_root(tmp_path: Path) -> Path:
    return write_bundle(tmp_path / "install", "1.0.0")


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def make_settings(data_dir: Path):
    from config import TestingConfig, load_settings

    def _make(**overrides):
        values = {"data_dir": str(data_dir), "environment": "production"}
        values.update(overrides)
        return load_settings(values, config_class=TestingConfig)

    return _make
