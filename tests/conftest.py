"""Pytest configuration and fixtures.

Provides environment isolation, settings cache resets and marker
registration. All fixtures here are autouse.
"""

from __future__ import annotations

from contextlib import suppress
import os

import pytest

from ditto.config import ENV_PREFIX, reset_settings_cache

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_ditto_env(monkeypatch):
    """Clear DITTO_* variables and cached settings around each test."""
    for key in list(os.environ.keys()):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


# =============================================================================
# Pytest Hooks
# =============================================================================


def pytest_configure(config):
    """Register custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "contract: Tests of access contracts and their violations",
        "allow_dotenv: Permit python-dotenv to load .env files",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)
