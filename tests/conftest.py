import os

import pytest

from finance_planner.config import get_settings


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch, tmp_path):
    """Run every test with default settings and no stray .env file."""
    for key in list(os.environ):
        if key.startswith("FINANCE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
