"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from layergen.kernel import AssetDatabase


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project tree root with an Assets/ folder. .layergen is created under it."""
    (tmp_path / "Assets").mkdir()
    return tmp_path


@pytest.fixture
def database(project_root: Path) -> AssetDatabase:
    """Refreshed asset database over project_root."""
    db = AssetDatabase(project_root)
    db.refresh()
    return db
