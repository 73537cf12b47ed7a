"""
Pytest configuration and fixtures for liftoff tests.
"""

import pytest
import structlog
import structlog.contextvars


@pytest.fixture(autouse=True)
def isolate_credentials(monkeypatch, tmp_path):
    """
    Keep the developer's real Heroku credentials out of every test.

    Tests that need a key or a netrc file set them up explicitly.
    """
    monkeypatch.delenv("HEROKU_API_KEY", raising=False)
    monkeypatch.delenv("LIFTOFF_API_KEY", raising=False)
    monkeypatch.setenv("LIFTOFF_NETRC_PATH", str(tmp_path / "missing-netrc"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def reset_structlog():
    """Drop logging config bound to a per-test capture stream."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
