"""Shared fixtures: keep global defaults and registry isolated per test."""

import pytest

import health.registry
from core.config import reset_defaults


@pytest.fixture(autouse=True)
def isolated_globals(monkeypatch):
    for var in (
        "PROBE_NAME",
        "PROBE_HEALTH_QUERY",
        "PROBE_TIMEOUT_SECONDS",
        "PROBE_FAILURE_STATUS",
        "PROBE_APPLICATION_NAME",
        "DATABASE_URL",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_defaults()
    monkeypatch.setattr(health.registry, "_registry", None)
    yield
    reset_defaults()
