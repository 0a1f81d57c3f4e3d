"""
Command-line entry point for the battery profile simulator.

Builds a single profile for the configured battery and writes it to stdout
as JSON (schema element names, base64 quality flag). The battery identity
comes from :class:`SimulatorSettings`; the profile contents come from the
command line:

    battery-sim description
    battery-sim read --readings readings.json
    battery-sim event --mode standby --soc 0.8 --connected
    battery-sim islanded
    battery-sim power 7.5
    battery-sim mode 2

Structured JSON logging goes to stderr so stdout carries only the profile.

Exit codes: 0 on success, 1 when the clock reading cannot be turned into a
timestamp, 2 on configuration or argument errors.

CHANGELOG:
- 2026-10-19: Validate --log-level against the standard level names
- 2026-10-19: Initial creation (STORY-005)

TODO:
- None
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, TypeAdapter, ValidationError

from simulator.src.config import LOG_LEVELS, SimulatorSettings
from simulator.src.models import DeviceId, Reading
from simulator.src.profiles import (
    ProfileResult,
    build_battery_control_islanded,
    build_battery_control_mode_setpoint,
    build_battery_control_power_setpoint,
    build_battery_description,
    build_battery_event,
    build_battery_read,
    try_build,
)
from simulator.src.timestamps import TimeSource, system_clock

logger = logging.getLogger(__name__)

_READINGS_ADAPTER = TypeAdapter(list[Reading])


# ---------------------------------------------------------------------------
# Structured JSON logging setup
# ---------------------------------------------------------------------------


class _JsonFormatter(logging.Formatter):
    """Minimal JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure structured JSON logging on stderr for the simulator."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="battery-sim",
        description="Build a battery profile and print it as JSON.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (overrides LOG_LEVEL).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("description", help="Battery system description")

    read = subparsers.add_parser("read", help="Reading profile")
    read.add_argument(
        "--readings",
        type=Path,
        help="JSON file holding a list of readings (default: no readings).",
    )

    event = subparsers.add_parser("event", help="Event profile with battery status")
    event.add_argument("--mode", required=True, help="Operating mode label.")
    event.add_argument(
        "--soc", type=float, required=True, help="State of charge (0.0-1.0)."
    )
    event.add_argument("--connected", action="store_true", help="Battery is connected.")
    event.add_argument("--charging", action="store_true", help="Battery is charging.")

    subparsers.add_parser("islanded", help="Control profile islanding the battery")

    power = subparsers.add_parser("power", help="Control profile with a power set point")
    power.add_argument("kw", type=float, help="Real power set point in kW.")

    mode = subparsers.add_parser("mode", help="Control profile with a mode set point")
    mode.add_argument("code", type=int, help="Integer mode code.")

    return parser


def load_readings(path: Path | None) -> list[Reading]:
    """Load readings from a JSON list, or return none when *path* is None.

    Raises:
        OSError: If the file cannot be read.
        ValidationError: If the content is not a list of readings.
    """
    if path is None:
        return []
    return _READINGS_ADAPTER.validate_json(path.read_bytes())


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def _build(
    args: argparse.Namespace,
    device_id: DeviceId,
    readings: list[Reading],
    clock: TimeSource,
) -> ProfileResult[BaseModel]:
    if args.command == "read":
        return try_build(build_battery_read, device_id, readings, clock=clock)
    if args.command == "event":
        return try_build(
            build_battery_event,
            device_id,
            is_connected=args.connected,
            is_charging=args.charging,
            mode=args.mode,
            state_of_charge=args.soc,
            clock=clock,
        )
    if args.command == "islanded":
        return try_build(build_battery_control_islanded, device_id, clock=clock)
    if args.command == "power":
        return try_build(
            build_battery_control_power_setpoint, device_id, args.kw, clock=clock
        )
    return try_build(build_battery_control_mode_setpoint, device_id, args.code, clock=clock)


def _emit(profile: BaseModel) -> None:
    sys.stdout.write(profile.model_dump_json(by_alias=True, indent=2))
    sys.stdout.write("\n")


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, build the requested profile and print it."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = SimulatorSettings()
    except ValidationError as exc:
        parser.error(f"invalid configuration: {exc}")

    level = settings.log_level_value
    if args.log_level:
        level = getattr(logging, args.log_level)
    configure_logging(level)

    device_id = settings.device_id()
    logger.info(
        "Building %s profile for mrid=%s, logical_device=%s",
        args.command,
        device_id.mrid,
        device_id.logical_device_id,
    )

    if args.command == "description":
        _emit(build_battery_description(device_id))
        return 0

    readings: list[Reading] = []
    if args.command == "read":
        try:
            readings = load_readings(args.readings)
        except (OSError, ValidationError) as exc:
            parser.error(f"cannot load readings from {args.readings}: {exc}")

    result = _build(args, device_id, readings, system_clock)
    if not result.ok:
        logger.error("Cannot timestamp %s profile: %s", args.command, result.error)
        return 1

    _emit(result.profile)
    return 0


if __name__ == "__main__":
    sys.exit(main())
