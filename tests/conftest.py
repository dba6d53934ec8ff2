"""
Shared pytest fixtures and configuration.
"""

from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

import stretchcat.settings as settings_mod
from stretchcat.api.app import create_app
from stretchcat.config import Config


@pytest.fixture(autouse=True)
def tmp_settings_file(tmp_path: Path, monkeypatch):
    """
    Redirect the settings store to a fresh temp file for each test.
    Also resets the in-memory cache so each test starts clean.
    """
    fake_file = tmp_path / "settings.json"
    monkeypatch.setattr(settings_mod, "_FILE", fake_file)
    monkeypatch.setattr(settings_mod, "_current", {})
    yield fake_file


@pytest.fixture()
def test_config(tmp_path: Path) -> Config:
    """Manual focus source, no notifications, clocks too slow to fire mid-test."""
    return Config(
        data_dir=tmp_path / "data",
        focus_source="manual",
        notifications_enabled=False,
        timer_tick_s=3600.0,
        policy_interval_s=3600.0,
        mode_configurations_path=tmp_path / "missing.json",
    )


@pytest.fixture()
def app(test_config):
    return create_app(test_config)


@pytest_asyncio.fixture()
async def client(app):
    """Async HTTP client wired directly to the ASGI app (no server needed)."""
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            yield ac
