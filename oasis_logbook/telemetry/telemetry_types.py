################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Telemetry sample types for flight logbook processing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from typing import Optional

import numpy as np


_LOG: logging.Logger = logging.getLogger(__name__)

# Value kinds in stringification priority order
VALUE_KINDS: tuple[str, ...] = ("float", "double", "int", "long", "bool", "string")


@dataclass(frozen=True)
class TelemetryValue:
    """Tagged union over the value kinds a telemetry channel can report.

    Exactly one slot is expected to be set. Producers that populate more than
    one slot are tolerated: the first set slot in VALUE_KINDS order wins.

    Attributes:
        float_value: 32-bit float value
        double_value: 64-bit float value
        int_value: 32-bit integer value
        long_value: 64-bit integer value
        bool_value: Boolean value
        string_value: String value
    """

    float_value: Optional[float] = None
    double_value: Optional[float] = None
    int_value: Optional[int] = None
    long_value: Optional[int] = None
    bool_value: Optional[bool] = None
    string_value: Optional[str] = None

    @classmethod
    def of(cls, kind: str, value: Any) -> TelemetryValue:
        """Build a value with a single slot populated."""
        if kind not in VALUE_KINDS:
            raise ValueError(f"Unknown value kind: {kind}")
        return cls(**{f"{kind}_value": value})

    def kind(self) -> Optional[str]:
        """Return the kind of the first set slot, or None if nothing is set."""
        for kind in VALUE_KINDS:
            if getattr(self, f"{kind}_value") is not None:
                return kind
        return None

    def is_set(self) -> bool:
        """Return True when at least one slot is populated."""
        return self.kind() is not None

    def to_string(self) -> str:
        """Render the value for CSV output.

        Values that cannot be rendered degrade to the empty string.
        """
        try:
            if self.float_value is not None:
                return np.format_float_positional(
                    np.float32(self.float_value), unique=True, trim="0"
                )
            if self.double_value is not None:
                return repr(float(self.double_value))
            if self.int_value is not None:
                return str(_require_integral(self.int_value))
            if self.long_value is not None:
                return str(_require_integral(self.long_value))
            if self.bool_value is not None:
                return "true" if self.bool_value else "false"
            if self.string_value is not None:
                return str(self.string_value)
        except (TypeError, ValueError, OverflowError) as exc:
            _LOG.debug("Unable to render telemetry value %r: %s", self, exc)
        return ""


@dataclass(frozen=True)
class TelemetrySample:
    """One timestamped observation of a single telemetry channel.

    Attributes:
        timestamp: Session clock time in epoch milliseconds
        field_code: Identifier of the telemetry channel, e.g. "latitude"
        value: Observed value
    """

    timestamp: int
    field_code: str
    value: TelemetryValue

    def __post_init__(self) -> None:
        """Validate sample structure."""
        if not isinstance(self.timestamp, int) or isinstance(self.timestamp, bool):
            raise ValueError("timestamp must be an int")
        if self.timestamp < 0:
            raise ValueError("timestamp must be non-negative")
        if not isinstance(self.field_code, str) or not self.field_code:
            raise ValueError("field_code must be a non-empty str")
        if not isinstance(self.value, TelemetryValue):
            raise ValueError("value must be a TelemetryValue")


@dataclass(frozen=True)
class VehicleIdentity:
    """Identity of the vehicle that owns a telemetry session.

    Attributes:
        serial_number: Vehicle serial number
        name: Human-readable vehicle name
    """

    serial_number: str
    name: str

    def __post_init__(self) -> None:
        """Validate identity fields."""
        if not isinstance(self.serial_number, str):
            raise ValueError("serial_number must be a str")
        if not isinstance(self.name, str):
            raise ValueError("name must be a str")


def _require_integral(value: Any) -> int:
    """Return an integer slot value, rejecting floats and bools."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"Expected an integer, got {type(value).__name__}")
    return int(value)
