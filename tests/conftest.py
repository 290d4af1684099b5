"""
Module: conftest.py

Author: Michael Economou
Date: 2026-10-19

Global pytest configuration and fixtures for the mediabox test suite.
Runs Qt headless and keeps every test's user data (settings, logs,
thumbnail cache) inside its own temporary directory.
"""

import os
import sys

# Add project root to sys.path so 'mediabox' imports without installation
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Qt image I/O only; no display needed
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest


def pytest_configure(config):
    """Configure pytest with custom settings."""
    # Add custom markers if not already added via pyproject.toml
    config.addinivalue_line(
        "markers", "xattr: test needs user.* extended attribute support on the temp filesystem"
    )
    config.addinivalue_line("markers", "qt: test renders images through Qt")
    config.addinivalue_line("markers", "slow: test waits on worker threads")


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch):
    """Point AppPaths at a per-test data directory."""
    from mediabox.utils.paths import AppPaths

    data_dir = tmp_path / "mediabox-data"
    monkeypatch.setenv("MEDIABOX_DATA_DIR", str(data_dir))
    AppPaths.reset()
    yield data_dir
    AppPaths.reset()


@pytest.fixture
def xattr_dir(tmp_path):
    """Directory on a filesystem that accepts user.* attributes."""
    from mediabox.infra.filesystem import xattr_supported

    work = tmp_path / "drive"
    work.mkdir()
    if not xattr_supported(work):
        pytest.skip("user extended attributes not supported on the temp filesystem")
    return work


@pytest.fixture
def resolver():
    """Fresh identity resolver (own regeneration counter)."""
    from mediabox.core.identity import IdentityResolver

    return IdentityResolver()


@pytest.fixture
def make_png(tmp_path):
    """Factory writing a solid-colour PNG of the given size."""
    from mediabox.core.pyqt_imports import QColor, QImage

    def _make(name="image.png", width=200, height=100, directory=None):
        target = (directory or tmp_path) / name
        image = QImage(width, height, QImage.Format_RGB32)
        image.fill(QColor(200, 40, 40))
        assert image.save(str(target), "PNG")
        return target

    return _make


@pytest.fixture
def dispatcher():
    """Callback dispatcher shut down after the test."""
    from mediabox.utils.threading import CallbackDispatcher

    instance = CallbackDispatcher()
    yield instance
    instance.shutdown(wait=True)
