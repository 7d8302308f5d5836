################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Display names for telemetry CSV columns."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping
from typing import Optional
from typing import Protocol


# Column headers for well-known telemetry field codes
DEFAULT_FIELD_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "latitude": "Latitude",
        "longitude": "Longitude",
        "altitude_agl": "Altitude AGL",
        "altitude_amsl": "Altitude AMSL",
        "altitude_raw": "Altitude Raw",
        "ground_speed": "Ground Speed",
        "air_speed": "Air Speed",
        "vertical_speed": "Vertical Speed",
        "heading": "Heading",
        "course": "Course",
        "pitch": "Pitch",
        "roll": "Roll",
        "yaw": "Yaw",
        "main_voltage": "Main Voltage",
        "main_current": "Main Current",
        "satellite_count": "Satellite Count",
        "gps_fix_type": "GPS Fix Type",
        "rc_link_quality": "RC Link Quality",
        "downlink_connected": "Downlink Connected",
        "uplink_connected": "Uplink Connected",
        "control_mode": "Control Mode",
        "flight_mode": "Flight Mode",
        "is_armed": "Armed",
    }
)


class FieldNameMapper(Protocol):
    """Translates a field code into a CSV column header."""

    def convert_type_name(self, field_code: str) -> str: ...


class TableFieldNameMapper:
    """Field name mapper backed by a lookup table.

    Field codes missing from the table are used verbatim as headers.
    """

    def __init__(self, overrides: Optional[Mapping[str, str]] = None) -> None:
        names: dict[str, str] = dict(DEFAULT_FIELD_NAMES)
        if overrides:
            names.update(overrides)
        self._names: Mapping[str, str] = MappingProxyType(names)

    def convert_type_name(self, field_code: str) -> str:
        return self._names.get(field_code, field_code)

    def __repr__(self) -> str:
        return f"TableFieldNameMapper(names={len(self._names)})"


class IdentityFieldNameMapper:
    """Field name mapper that uses field codes as headers."""

    def convert_type_name(self, field_code: str) -> str:
        return field_code
