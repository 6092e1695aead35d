"""
Shared test fixtures for the GetFresh daemon tests.

Provides environment variable fixtures for FreshSettings tests. All FRESH_*
env vars are cleaned before each test to ensure isolation.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

import pytest

# All FreshSettings environment variable names, used for cleanup.
_ALL_FRESH_ENV_VARS = (
    "FRESH_EMAIL",
    "FRESH_PASSWORD",
    "FRESH_INTERVAL",
    "FRESH_INSTANCE_ID",
    "FRESH_STATE_PATH",
    "FRESH_STATUS_PATH",
    "FRESH_REDIS_URL",
)


@pytest.fixture(autouse=True)
def _clean_fresh_env(monkeypatch: pytest.MonkeyPatch, tmp_path: str) -> None:
    """Remove all FRESH_* env vars and isolate from .env files before each test.

    Changes working directory to tmp_path so no .env file is accidentally
    loaded by Pydantic BaseSettings.
    """
    for var in _ALL_FRESH_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def env_vars_full(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set every FreshSettings environment variable.

    Returns the dict of env var names to values for assertion convenience.
    """
    env = {
        "FRESH_EMAIL": "user@example.com",
        "FRESH_PASSWORD": "hunter2",
        "FRESH_INTERVAL": "30",
        "FRESH_INSTANCE_ID": "flat-42",
        "FRESH_STATE_PATH": "/tmp/test-getfresh.db",
        "FRESH_STATUS_PATH": "/tmp/test-status.json",
        "FRESH_REDIS_URL": "redis://localhost:6379/0",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env

