"""Shared fixtures for EPG aggregator tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from _helpers import BASE_URL
from epg_aggregator.config import CustomSettings


@pytest.fixture
def make_settings(tmp_path: Path):
    """Return a factory for settings rooted in the test's temporary directory."""

    def _make(**overrides) -> CustomSettings:
        values = {
            "thetv_base_url": BASE_URL,
            "channels_file": str(tmp_path / "tvList.yaml"),
            "output_path": str(tmp_path / "epg.xml"),
        }
        values.update(overrides)
        return CustomSettings(**values)

    return _make
