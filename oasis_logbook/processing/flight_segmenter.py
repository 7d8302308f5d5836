################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Split a telemetry snapshot into flights at inactivity gaps."""

from __future__ import annotations

import logging

import numpy as np

from oasis_logbook.processing.flight_types import FlightSegment
from oasis_logbook.processing.time_index import TimeIndex
from oasis_logbook.telemetry.telemetry_types import VehicleIdentity


_LOG: logging.Logger = logging.getLogger(__name__)

# Gap between consecutive timestamps that ends a flight, in milliseconds
GAP_THRESHOLD_MS: int = 10000

# Smallest number of timestamps kept as a flight
MIN_FLIGHT_TIMESTAMPS: int = 2


def segment_bounds(
    timestamps: tuple[int, ...], gap_threshold_ms: int = GAP_THRESHOLD_MS
) -> list[tuple[int, int]]:
    """Return [start, end) index ranges of runs separated by inactivity gaps.

    A gap equal to the threshold starts a new run. Runs shorter than
    MIN_FLIGHT_TIMESTAMPS are not returned.
    """
    if gap_threshold_ms <= 0:
        raise ValueError("gap_threshold_ms must be positive")

    times: np.ndarray = np.asarray(timestamps, dtype=np.int64)
    if times.size == 0:
        return []

    gaps: np.ndarray = np.diff(times)
    breaks: np.ndarray = np.flatnonzero(gaps >= gap_threshold_ms) + 1
    edges: list[int] = [0, *breaks.tolist(), int(times.size)]

    bounds: list[tuple[int, int]] = []
    for start, end in zip(edges[:-1], edges[1:]):
        if end - start < MIN_FLIGHT_TIMESTAMPS:
            _LOG.debug("Dropping isolated telemetry at %d", int(times[start]))
            continue
        bounds.append((start, end))
    return bounds


def segment_flights(
    index: TimeIndex,
    vehicle: VehicleIdentity,
    gap_threshold_ms: int = GAP_THRESHOLD_MS,
) -> list[FlightSegment]:
    """Partition a snapshot into flights owned by a vehicle."""
    timestamps: tuple[int, ...] = index.timestamps

    flights: list[FlightSegment] = []
    for start, end in segment_bounds(timestamps, gap_threshold_ms):
        flight_index: TimeIndex = index.sub_range(
            timestamps[start], timestamps[end - 1]
        )
        flights.append(FlightSegment(vehicle=vehicle, records=flight_index))

    _LOG.info(
        "Found %d flights for %s in %d timestamps",
        len(flights),
        vehicle.name or vehicle.serial_number,
        len(timestamps),
    )

    return flights
