"""
Simulator configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
The identity of the simulated battery comes from the environment or a
``.env`` file; nothing is hardcoded.

CHANGELOG:
- 2026-10-19: Initial creation (STORY-004)

TODO:
- None
"""

import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

from simulator.src.models import DeviceId

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SimulatorSettings(BaseSettings):
    """Battery simulator configuration.

    Attributes:
        battery_mrid: Master resource identifier of the battery (required).
        battery_name: Display name. Defaults to battery_mrid if not set.
        battery_description: Free-form description.
        logical_device_id: Logical device publishing the profiles. Defaults
            to battery_mrid if not set.
        log_level: Root logging level name.
    """

    battery_mrid: str
    battery_name: str = ""
    battery_description: str = ""
    logical_device_id: str = ""
    log_level: str = "INFO"

    @field_validator("battery_mrid")
    @classmethod
    def battery_mrid_must_not_be_blank(cls, v: str) -> str:
        """Reject an empty or whitespace-only mRID."""
        if not v.strip():
            raise ValueError("BATTERY_MRID must not be blank")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        """Normalize to upper case and require a standard logging level."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return level

    @model_validator(mode="after")
    def _default_from_mrid(self) -> "SimulatorSettings":
        """Default battery_name and logical_device_id to battery_mrid."""
        if not self.battery_name:
            self.battery_name = self.battery_mrid
        if not self.logical_device_id:
            self.logical_device_id = self.battery_mrid
        return self

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)

    def device_id(self) -> DeviceId:
        """Build the DeviceId of the configured battery."""
        return DeviceId(
            mrid=self.battery_mrid,
            name=self.battery_name,
            description=self.battery_description,
            logical_device_id=self.logical_device_id,
        )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}
