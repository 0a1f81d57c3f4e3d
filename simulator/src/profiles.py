"""
Profile builders for the simulated battery storage device.

Turns a :class:`DeviceId` plus raw readings or state into fully populated
reading, event and control profiles, ready for serialization.

These are **pure functions**: no I/O, no shared state. The only ambient
input is the clock, which is read once per call through the injected
``clock`` keyword, so every nested timestamp of one profile is identical.

Values are not validated. State of charge outside [0, 1], unknown mode codes
and oversized power set points all pass through unchanged; numeric fields
are only narrowed to the protocol's 32-bit float width.

CHANGELOG:
- 2026-10-19: Narrow ints past the double range to infinity
- 2026-10-19: Add ProfileResult / try_build for callers that prefer results
- 2026-10-19: Initial creation (STORY-003)

TODO:
- None
"""

from __future__ import annotations

import logging
import math
import struct
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, TypeVar

from simulator.src.models import (
    GOOD_QUALITY,
    BatteryControlProfile,
    BatteryEventProfile,
    BatteryReadingProfile,
    BatteryStatus,
    BatterySystem,
    BatterySystemControl,
    DeviceId,
    Reading,
    SetPoint,
    UnitMultiplierKind,
    UnitSymbolKind,
)
from simulator.src.timestamps import TimeConversionError, TimeSource, now, system_clock

logger = logging.getLogger(__name__)

CONTROL_TYPE_REAL_POWER = "SetRealPower"
CONTROL_TYPE_MODE = "SetMode"

P = TypeVar("P")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def to_float32(value: float) -> float:
    """Narrow *value* to the nearest IEEE 754 single-precision float.

    Magnitudes beyond the float32 range become a signed infinity, matching
    a plain float cast; precision loss is not an error.
    """
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except (OverflowError, struct.error):
        # ints past the double range cannot be passed to copysign either
        return math.copysign(math.inf, 1 if value > 0 else -1)


# ---------------------------------------------------------------------------
# Nested structure constructors
# ---------------------------------------------------------------------------


def build_battery_description(device_id: DeviceId) -> BatterySystem:
    """Copy mRID, name and description from *device_id* verbatim."""
    return BatterySystem(
        mrid=device_id.mrid,
        name=device_id.name,
        description=device_id.description,
    )


def build_status(
    *,
    is_connected: bool,
    is_charging: bool,
    mode: str,
    state_of_charge: float,
    timestamp: datetime,
) -> BatteryStatus:
    return BatteryStatus(
        is_connected=is_connected,
        is_charging=is_charging,
        mode=mode,
        state_of_charge=to_float32(state_of_charge),
        timestamp=timestamp,
        quality_flag=GOOD_QUALITY,
        value="",
    )


def build_set_point(
    *,
    unit: UnitSymbolKind,
    multiplier: UnitMultiplierKind,
    control_type: str,
    value: float,
) -> SetPoint:
    return SetPoint(
        unit=unit,
        multiplier=multiplier,
        control_type=control_type,
        value=to_float32(value),
    )


def build_system_control(
    *,
    is_islanded: bool,
    set_points: Iterable[SetPoint] = (),
) -> BatterySystemControl:
    return BatterySystemControl(is_islanded=is_islanded, set_points=list(set_points))


def _control_profile(
    device_id: DeviceId,
    control: BatterySystemControl,
    clock: TimeSource,
) -> BatteryControlProfile:
    profile = BatteryControlProfile(
        logical_device_id=device_id.logical_device_id,
        timestamp=now(clock),
        battery_system=build_battery_description(device_id),
        battery_system_control=control,
    )
    logger.debug(
        "Built control profile for logical_device=%s (islanded=%s, set_points=%d)",
        device_id.logical_device_id,
        control.is_islanded,
        len(control.set_points),
    )
    return profile


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_battery_read(
    device_id: DeviceId,
    readings: Iterable[Reading],
    *,
    clock: TimeSource = system_clock,
) -> BatteryReadingProfile:
    """Aggregate *readings* into a reading profile.

    Readings keep the caller's order; none are dropped, merged or inspected.
    An empty iterable yields an empty ``readings`` list.

    Raises:
        TimeConversionError: If the clock reading is not representable.
    """
    timestamp = now(clock)
    profile = BatteryReadingProfile(
        logical_device_id=device_id.logical_device_id,
        timestamp=timestamp,
        battery_system=build_battery_description(device_id),
        readings=list(readings),
    )
    logger.debug(
        "Built reading profile for logical_device=%s with %d readings",
        device_id.logical_device_id,
        len(profile.readings),
    )
    return profile


def build_battery_event(
    device_id: DeviceId,
    *,
    is_connected: bool,
    is_charging: bool,
    mode: str,
    state_of_charge: float,
    clock: TimeSource = system_clock,
) -> BatteryEventProfile:
    """Build an event profile carrying the battery's current status.

    The same timestamp is used for the profile and for its status.

    Args:
        device_id: Identity of the battery.
        is_connected: Whether the battery is connected to the grid.
        is_charging: Whether the battery is currently charging.
        mode: Free-form operating mode label.
        state_of_charge: Nominally in [0.0, 1.0]; not range-checked.
        clock: Time source, read once.

    Raises:
        TimeConversionError: If the clock reading is not representable.
    """
    timestamp = now(clock)
    profile = BatteryEventProfile(
        logical_device_id=device_id.logical_device_id,
        timestamp=timestamp,
        battery_system=build_battery_description(device_id),
        battery_status=build_status(
            is_connected=is_connected,
            is_charging=is_charging,
            mode=mode,
            state_of_charge=state_of_charge,
            timestamp=timestamp,
        ),
    )
    logger.debug(
        "Built event profile for logical_device=%s (mode=%s, soc=%s)",
        device_id.logical_device_id,
        mode,
        state_of_charge,
    )
    return profile


def build_battery_control_islanded(
    device_id: DeviceId,
    *,
    clock: TimeSource = system_clock,
) -> BatteryControlProfile:
    """Build a control profile that islands the battery (no set points)."""
    return _control_profile(
        device_id,
        build_system_control(is_islanded=True),
        clock,
    )


def build_battery_control_power_setpoint(
    device_id: DeviceId,
    power: float,
    *,
    clock: TimeSource = system_clock,
) -> BatteryControlProfile:
    """Build a control profile with a single real-power set point in kW.

    Negative values are passed through unchanged.
    """
    set_point = build_set_point(
        unit=UnitSymbolKind.W,
        multiplier=UnitMultiplierKind.KILO,
        control_type=CONTROL_TYPE_REAL_POWER,
        value=power,
    )
    return _control_profile(
        device_id,
        build_system_control(is_islanded=False, set_points=[set_point]),
        clock,
    )


def build_battery_control_mode_setpoint(
    device_id: DeviceId,
    mode: int,
    *,
    clock: TimeSource = system_clock,
) -> BatteryControlProfile:
    """Build a control profile with a single unitless mode set point.

    Any integer is accepted; mapping codes to modes is up to the receiver.
    """
    set_point = build_set_point(
        unit=UnitSymbolKind.NO_UNIT,
        multiplier=UnitMultiplierKind.NO_MULTIPLIER,
        control_type=CONTROL_TYPE_MODE,
        value=mode,
    )
    return _control_profile(
        device_id,
        build_system_control(is_islanded=False, set_points=[set_point]),
        clock,
    )


# ---------------------------------------------------------------------------
# Result form
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProfileResult(Generic[P]):
    """Outcome of a profile build: either ``profile`` or ``error`` is set."""

    profile: P | None = None
    error: TimeConversionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> P:
        """Return the profile, re-raising the captured error if there is one."""
        if self.error is not None:
            raise self.error
        return self.profile  # type: ignore[return-value]


def try_build(builder: Callable[..., P], *args: Any, **kwargs: Any) -> ProfileResult[P]:
    """Call *builder* and capture a :class:`TimeConversionError` in the result.

    Any other exception propagates.

    Example::

        result = try_build(build_battery_control_islanded, device_id)
        if result.ok:
            publish(result.profile)
    """
    try:
        return ProfileResult(profile=builder(*args, **kwargs))
    except TimeConversionError as exc:
        logger.warning("Profile build failed: %s", exc)
        return ProfileResult(error=exc)
