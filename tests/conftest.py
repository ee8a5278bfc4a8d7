"""Shared fixtures for filmlink tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from filmlink.core.config import reload_settings
from filmlink.core.matching.config import reload_matching_config


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point FILMLINK_DATA_DIR at a temporary directory and reset cached settings."""
    data_dir = tmp_path / "data"
    monkeypatch.setenv("FILMLINK_DATA_DIR", str(data_dir))
    reload_settings()
    reload_matching_config()
    yield data_dir
    monkeypatch.delenv("FILMLINK_DATA_DIR", raising=False)
    reload_settings()
    reload_matching_config()
