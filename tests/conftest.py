"""Shared fixtures. Every test runs against a fake home directory under tmp_path."""

from pathlib import Path

import pytest

from safaridriver.core.safari.platform import Environment

from .helpers import make_environment


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "Users" / "tester"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def mac_env(home: Path) -> Environment:
    return make_environment(home)


@pytest.fixture
def safari_dir(home: Path) -> Path:
    """~/Library/Safari, as created by an installed Safari."""
    path = home / "Library" / "Safari"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def extensions_dir(safari_dir: Path) -> Path:
    path = safari_dir / "Extensions"
    path.mkdir()
    return path


@pytest.fixture
def override_package(tmp_path: Path) -> Path:
    path = tmp_path / "downloads" / "Custom.safariextz"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"xar!override-extension-bytes")
    return path
