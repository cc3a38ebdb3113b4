# tests/conftest.py

"""Shared pytest fixtures and builders for all storefront tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from storefront.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Keep data, logs and storage out of the working tree."""
    monkeypatch.setattr(Settings, "DATA_DIR", tmp_path / "data")
    monkeypatch.setattr(Settings, "LOGS_DIR", tmp_path / "logs")
    monkeypatch.setattr(Settings, "STORAGE_BACKEND", "memory")
    monkeypatch.setattr(Settings, "CATALOG_URL", "")
    yield
