################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Telemetry sample types."""

from __future__ import annotations

from oasis_logbook.telemetry.telemetry_types import TelemetrySample
from oasis_logbook.telemetry.telemetry_types import TelemetryValue
from oasis_logbook.telemetry.telemetry_types import VehicleIdentity


__all__ = [
    "TelemetrySample",
    "TelemetryValue",
    "VehicleIdentity",
]
