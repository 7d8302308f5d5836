################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Snapshot merging, field catalog and flight segmentation."""

from __future__ import annotations

from oasis_logbook.processing.field_catalog import FieldCatalog
from oasis_logbook.processing.flight_segmenter import segment_flights
from oasis_logbook.processing.flight_types import FlightId
from oasis_logbook.processing.flight_types import FlightSegment
from oasis_logbook.processing.time_index import MergeConflict
from oasis_logbook.processing.time_index import MergeDiagnostics
from oasis_logbook.processing.time_index import TimeIndex
from oasis_logbook.processing.time_index import build_time_index


__all__ = [
    "FieldCatalog",
    "FlightId",
    "FlightSegment",
    "MergeConflict",
    "MergeDiagnostics",
    "TimeIndex",
    "build_time_index",
    "segment_flights",
]
