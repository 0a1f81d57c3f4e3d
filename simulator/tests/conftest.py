"""
Shared test fixtures for simulator tests.

Provides environment variable fixtures for SimulatorSettings, a fixed clock
for deterministic timestamps, and the reference battery identity.
All simulator env vars are cleaned before each test to ensure isolation.

CHANGELOG:
- 2026-10-19: Initial creation (STORY-001)

TODO:
- None
"""

from __future__ import annotations

import pytest
from simulator.src.models import DeviceId

# All SimulatorSettings environment variable names, used for cleanup.
_ALL_SIMULATOR_ENV_VARS = (
    "BATTERY_MRID",
    "BATTERY_NAME",
    "BATTERY_DESCRIPTION",
    "LOGICAL_DEVICE_ID",
    "LOG_LEVEL",
)

_FIXED_MILLIS = 1_771_070_400_123
"""2026-02-14T12:00:00.123Z in epoch milliseconds."""


@pytest.fixture(autouse=True)
def _clean_simulator_env(monkeypatch: pytest.MonkeyPatch, tmp_path: str) -> None:
    """Remove all simulator env vars and isolate from .env files before each test.

    Changes working directory to tmp_path so no .env file is accidentally
    loaded by Pydantic BaseSettings.
    """
    for var in _ALL_SIMULATOR_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def fixed_clock():
    """A time source that always returns 2026-02-14T12:00:00.123Z."""
    return lambda: _FIXED_MILLIS


@pytest.fixture()
def device_id() -> DeviceId:
    return DeviceId(
        mrid="BESS-1",
        name="Battery 1",
        description="Test unit",
        logical_device_id="LD1",
    )


@pytest.fixture()
def env_vars_full(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set all environment variables for SimulatorSettings.

    Returns the dict of env var names to values for assertion convenience.
    """
    env = {
        "BATTERY_MRID": "BESS-1",
        "BATTERY_NAME": "Battery 1",
        "BATTERY_DESCRIPTION": "Test unit",
        "LOGICAL_DEVICE_ID": "LD1",
        "LOG_LEVEL": "DEBUG",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env


@pytest.fixture()
def env_vars_required_only(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set only the required environment variables (no optional ones)."""
    env = {"BATTERY_MRID": "BESS-7"}
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env
