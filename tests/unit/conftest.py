"""Unit test fixtures."""

from contextlib import contextmanager
from unittest.mock import Mock

import pytest

import core.dependencies as deps_module
from config.settings import Settings
from core.telemetry import _api_stats_var


@contextmanager
def override_deps(app, overrides):
    """Set FastAPI dependency overrides and clear them on exit.

    Args:
        app: The FastAPI application.
        overrides: A dict mapping dependency functions to their replacement values.
    """

    def _make_override(val):
        return lambda: val

    for dep_fn, provider in overrides.items():
        app.dependency_overrides[dep_fn] = _make_override(provider)
    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def mock_settings(monkeypatch):
    """Settings with safe test defaults (no real tokens/DSNs)."""
    monkeypatch.setenv("APPLE_MUSIC_DEVELOPER_TOKEN", "")
    monkeypatch.setenv("APPLE_MUSIC_USER_TOKEN", "")
    monkeypatch.setenv("SENTRY_DSN", "")
    monkeypatch.setenv("POSTHOG_API_KEY", "")
    monkeypatch.setenv("ENABLE_TELEMETRY", "false")
    return Settings(
        apple_music_developer_token=None,
        apple_music_user_token=None,
        sentry_dsn=None,
        posthog_api_key=None,
        enable_telemetry=False,
    )


@pytest.fixture
def mock_posthog_client():
    """Mock PostHog client."""
    client = Mock()
    client.capture = Mock()
    client.flush = Mock()
    client.shutdown = Mock()
    return client


@pytest.fixture(autouse=True)
def reset_state():
    """Reset ContextVars and dependency singletons between tests."""
    api_stats_token = _api_stats_var.set(None)
    yield
    _api_stats_var.reset(api_stats_token)
    deps_module._catalog_client = None
    deps_module._session_state = None
    deps_module._posthog_client = None
