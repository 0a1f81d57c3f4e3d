"""
Pydantic models for the battery profile schema family.

Defines the value objects a battery storage device publishes: the system
description embedded in every profile, the reading/event/control profiles
themselves, and the nested status, set-point and system-control containers.

All models are frozen. Field names are snake_case in Python and alias to the
schema element names (``mRID``, ``logicalDeviceID``, ...), so
``model_dump_json(by_alias=True)`` yields the wire form directly and that
form validates back. Python field names are accepted on input as well.

CHANGELOG:
- 2026-10-19: Accept wire names and base64 bytes on input
- 2026-10-19: Serialize bytes as base64 so the quality flag survives JSON
- 2026-10-19: Initial creation (STORY-001)

TODO:
- None
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

GOOD_QUALITY = b"\x00\x00"
"""Two-byte all-zero quality marker: no quality issues flagged."""


class UnitSymbolKind(StrEnum):
    """Unit symbols used by readings and set points."""

    NO_UNIT = "none"
    W = "W"
    VA = "VA"
    VAR = "VAr"
    WH = "Wh"
    V = "V"
    A = "A"
    HZ = "Hz"


class UnitMultiplierKind(StrEnum):
    """SI multipliers applied to a unit symbol."""

    NO_MULTIPLIER = "none"
    MILLI = "m"
    KILO = "k"
    MEGA = "M"
    GIGA = "G"


class _SchemaModel(BaseModel):
    """Base for all schema types: immutable, camelCase on the wire."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=AliasGenerator(alias=to_camel),
        populate_by_name=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )


class DeviceId(_SchemaModel):
    """Identity of a simulated device.

    Attributes:
        mrid: Stable master resource identifier.
        name: Display name.
        description: Free-form description.
        logical_device_id: Identifier of the logical device publishing profiles.
    """

    mrid: str = Field(alias="mRID")
    name: str
    description: str
    logical_device_id: str = Field(alias="logicalDeviceID")


class BatterySystem(_SchemaModel):
    """Descriptor of the battery system, embedded in every profile."""

    mrid: str = Field(alias="mRID")
    name: str
    description: str


class Reading(_SchemaModel):
    """A single telemetry sample.

    Readings are produced elsewhere and aggregated into a
    :class:`BatteryReadingProfile` as-is.
    """

    value: float
    unit: UnitSymbolKind = UnitSymbolKind.NO_UNIT
    multiplier: UnitMultiplierKind = UnitMultiplierKind.NO_MULTIPLIER
    reading_type: str
    flow_direction: str | None = None
    timestamp: datetime | None = None


class BatteryReadingProfile(_SchemaModel):
    logical_device_id: str = Field(alias="logicalDeviceID")
    timestamp: datetime
    battery_system: BatterySystem
    readings: list[Reading] = Field(default_factory=list)


class BatteryStatus(_SchemaModel):
    """Connection, charging and state-of-charge snapshot.

    The status carries its data in the structured fields; ``value`` is always
    the empty string and ``quality_flag`` always :data:`GOOD_QUALITY`.
    """

    is_connected: bool
    is_charging: bool
    mode: str
    state_of_charge: float
    timestamp: datetime
    quality_flag: bytes = GOOD_QUALITY
    value: str = ""


class BatteryEventProfile(_SchemaModel):
    logical_device_id: str = Field(alias="logicalDeviceID")
    timestamp: datetime
    battery_system: BatterySystem
    battery_status: BatteryStatus


class SetPoint(_SchemaModel):
    """A single control set point.

    ``control_type`` is a plain tag string (``"SetRealPower"``, ``"SetMode"``).
    """

    unit: UnitSymbolKind
    multiplier: UnitMultiplierKind
    control_type: str
    value: float


class BatterySystemControl(_SchemaModel):
    is_islanded: bool
    set_points: list[SetPoint] = Field(default_factory=list)


class BatteryControlProfile(_SchemaModel):
    logical_device_id: str = Field(alias="logicalDeviceID")
    timestamp: datetime
    battery_system: BatterySystem
    battery_system_control: BatterySystemControl
