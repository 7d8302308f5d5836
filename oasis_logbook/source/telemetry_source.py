################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Sources of raw telemetry samples."""

from __future__ import annotations

import json
import numbers
import os
from pathlib import Path
from typing import Any
from typing import Optional
from typing import Protocol
from typing import Sequence

from oasis_logbook.telemetry.telemetry_types import VALUE_KINDS
from oasis_logbook.telemetry.telemetry_types import TelemetrySample
from oasis_logbook.telemetry.telemetry_types import TelemetryValue
from oasis_logbook.telemetry.telemetry_types import VehicleIdentity


class TelemetryRetrievalError(Exception):
    """Raised when raw telemetry cannot be retrieved."""


class TelemetrySource(Protocol):
    """Retrieves raw telemetry samples for a vehicle."""

    def get_vehicles(self) -> list[VehicleIdentity]: ...

    def get_telemetry(
        self, vehicle: VehicleIdentity, start_ms: int, end_ms: int
    ) -> Sequence[TelemetrySample]: ...


class JsonTelemetrySource:
    """Telemetry source backed by an offline JSON dump.

    The dump has the layout::

        {
          "vehicles": [{"serial_number": "...", "name": "..."}],
          "telemetry": [
            {"vehicle": "<serial>", "time": 0, "field_code": "latitude",
             "value": {"double": 56.9}}
          ]
        }
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path: Path = Path(os.fspath(path))
        self._parsed: Optional[
            tuple[list[VehicleIdentity], dict[str, list[TelemetrySample]]]
        ] = None

    def get_vehicles(self) -> list[VehicleIdentity]:
        vehicles, _ = self._load()
        return list(vehicles)

    def find_vehicle(self, serial_number: str) -> VehicleIdentity:
        """Return the vehicle with a serial number."""
        for vehicle in self.get_vehicles():
            if vehicle.serial_number == serial_number:
                return vehicle
        raise TelemetryRetrievalError(
            f"Vehicle {serial_number} not found in {self._path}"
        )

    def get_telemetry(
        self, vehicle: VehicleIdentity, start_ms: int, end_ms: int
    ) -> list[TelemetrySample]:
        """Return the samples of a vehicle within [start_ms, end_ms]."""
        if end_ms < start_ms:
            raise TelemetryRetrievalError("end_ms must be >= start_ms")
        _, samples = self._load()
        return [
            sample
            for sample in samples.get(vehicle.serial_number, [])
            if start_ms <= sample.timestamp <= end_ms
        ]

    def _load(
        self,
    ) -> tuple[list[VehicleIdentity], dict[str, list[TelemetrySample]]]:
        if self._parsed is None:
            try:
                data: Any = json.loads(self._path.read_text(encoding="utf-8"))
                self._parsed = _parse_dump(data)
            except (OSError, ValueError) as exc:
                raise TelemetryRetrievalError(
                    f"Failed to load telemetry from {self._path}"
                ) from exc
        return self._parsed


def sample_from_dict(data: Any) -> tuple[str, TelemetrySample]:
    """Parse one dump entry into (vehicle serial, sample)."""
    entry: dict[str, Any] = _require_mapping(data, "telemetry entry")
    value_data: dict[str, Any] = _require_mapping(entry.get("value"), "value")
    if not value_data:
        raise ValueError("value must have one kind")
    unknown: set[str] = set(value_data) - set(VALUE_KINDS)
    if unknown:
        raise ValueError(f"Unknown value kinds: {', '.join(sorted(unknown))}")

    time: Any = entry.get("time")
    if isinstance(time, bool) or not isinstance(time, numbers.Integral):
        raise ValueError("time must be an integer")

    sample: TelemetrySample = TelemetrySample(
        timestamp=int(time),
        field_code=entry.get("field_code"),  # type: ignore[arg-type]
        value=TelemetryValue(
            **{f"{kind}_value": raw for kind, raw in value_data.items()}
        ),
    )
    return str(entry.get("vehicle", "")), sample


def _parse_dump(
    data: Any,
) -> tuple[list[VehicleIdentity], dict[str, list[TelemetrySample]]]:
    root: dict[str, Any] = _require_mapping(data, "dump")
    vehicles: list[VehicleIdentity] = [
        VehicleIdentity(
            serial_number=_require_mapping(item, "vehicle").get("serial_number"),
            name=item.get("name", ""),
        )
        for item in _require_list(root.get("vehicles", []), "vehicles")
    ]
    samples: dict[str, list[TelemetrySample]] = {}
    for item in _require_list(root.get("telemetry", []), "telemetry"):
        serial_number, sample = sample_from_dict(item)
        samples.setdefault(serial_number, []).append(sample)
    return vehicles, samples


def _require_mapping(value: Any, name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be a mapping")
    return value


def _require_list(value: Any, name: str) -> list[Any]:
    if not isinstance(value, list):
        raise ValueError(f"{name} must be a list")
    return value
