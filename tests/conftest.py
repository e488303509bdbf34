"""Shared fixtures: every test gets its own settings and data directory."""

import pytest

from costprint.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("COSTPRINT_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("COSTPRINT_API_BASE_URL", "http://api.test")
    monkeypatch.delenv("COSTPRINT_API_TOKEN", raising=False)
    monkeypatch.delenv("COSTPRINT_DISPLAY_LOCALE", raising=False)
    monkeypatch.delenv("COSTPRINT_PERSIST_PREFERENCES", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
