################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Flight segment and flight identity types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from datetime import timedelta
from datetime import tzinfo
from typing import Iterator
from typing import Optional

from oasis_logbook.processing.time_index import FieldRecord
from oasis_logbook.processing.time_index import TimeIndex
from oasis_logbook.telemetry.telemetry_types import VehicleIdentity


# Format of the start time in flight display names
FLIGHT_DISPLAY_FORMAT: str = "%Y-%m-%d %H:%M:%S"


def epoch_ms_to_datetime(epoch_ms: int, tz: Optional[tzinfo] = None) -> datetime:
    """Convert epoch milliseconds to a datetime in the given zone.

    A zone of None renders local time as a naive datetime.
    """
    seconds, millis = divmod(epoch_ms, 1000)
    return datetime.fromtimestamp(seconds, tz) + timedelta(milliseconds=millis)


@dataclass(frozen=True)
class FlightId:
    """Identity of one flight of one vehicle.

    Attributes:
        serial_number: Serial number of the vehicle
        start_ms: First timestamp of the flight in epoch milliseconds
        end_ms: Last timestamp of the flight in epoch milliseconds
        tz: Zone used for display, None for local time
    """

    serial_number: str
    start_ms: int
    end_ms: int
    tz: Optional[tzinfo] = None

    def __post_init__(self) -> None:
        """Validate flight bounds."""
        if self.end_ms < self.start_ms:
            raise ValueError("end_ms must be >= start_ms")

    def display(self) -> str:
        """Return the human-readable flight name."""
        start: datetime = epoch_ms_to_datetime(self.start_ms, self.tz)
        return f"Flight at {start.strftime(FLIGHT_DISPLAY_FORMAT)}"

    def key(self) -> str:
        """Return the machine key used to track uploaded flights."""
        return f"{self.start_ms}_{self.end_ms}_{self.serial_number}"

    def __str__(self) -> str:
        return self.display()


@dataclass(frozen=True)
class FlightSegment:
    """Maximal run of closely spaced timestamps recorded by one vehicle.

    Attributes:
        vehicle: Identity of the vehicle that flew
        records: Snapshot restricted to the flight's timestamps
    """

    vehicle: VehicleIdentity
    records: TimeIndex

    def __post_init__(self) -> None:
        """Validate that the flight spans more than one timestamp."""
        if len(self.records) < 2:
            raise ValueError("a flight segment needs at least two timestamps")

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[tuple[int, FieldRecord]]:
        return self.records.items()

    @property
    def timestamps(self) -> tuple[int, ...]:
        return self.records.timestamps

    @property
    def start_ms(self) -> int:
        return self.records.timestamps[0]

    @property
    def end_ms(self) -> int:
        return self.records.timestamps[-1]

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms

    @property
    def drone_serial_number(self) -> str:
        return self.vehicle.serial_number

    @property
    def drone_name(self) -> str:
        return self.vehicle.name

    def flight_id(self, tz: Optional[tzinfo] = None) -> FlightId:
        """Return the identity of this flight."""
        return FlightId(
            serial_number=self.vehicle.serial_number,
            start_ms=self.start_ms,
            end_ms=self.end_ms,
            tz=tz,
        )
