################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Structured configuration schema for flight logbook export."""

from __future__ import annotations

import codecs
import numbers
from dataclasses import dataclass
from dataclasses import field
from dataclasses import fields
from dataclasses import replace
from datetime import tzinfo
from typing import Any
from typing import Optional
from zoneinfo import ZoneInfo
from zoneinfo import ZoneInfoNotFoundError

from oasis_logbook.processing.field_catalog import COLUMN_ORDERS


# Inactivity gap that separates flights, in milliseconds
SEGMENTATION_GAP_THRESHOLD_MS: int = 10000

# Character set of written CSV files
CSV_CHARSET: str = "utf-8"
# Column ordering policy name
CSV_COLUMN_ORDER: str = "alphabetical"
# Row terminator
CSV_LINE_TERMINATOR: str = "\n"
# IANA zone for rendered times, None for the system local zone
CSV_TIME_ZONE: Optional[str] = None

# Logbook upload endpoint
UPLOAD_SERVER_URL: Optional[str] = None
# Logbook account login
UPLOAD_LOGIN: str = ""
# Logbook password, raw or as an MD5 hex digest
UPLOAD_PASSWORD: str = ""
# Field codes included in uploaded flight files
UPLOAD_FIELD_CODES: tuple[str, ...] = (
    "latitude",
    "longitude",
    "altitude_agl",
    "ground_speed",
    "main_voltage",
    "main_current",
)
# HTTP timeout in seconds
UPLOAD_TIMEOUT_SEC: float = 30.0
# Folder, next to exported files, receiving uploaded files
UPLOAD_UPLOADED_FOLDER: str = "uploaded"
# YAML registry of uploaded flight keys, None to track in memory only
UPLOAD_REGISTRY_PATH: Optional[str] = None


class LogbookParamsError(Exception):
    """Raised when logbook parameter validation fails."""


def _require_positive(value: float, name: str) -> None:
    """Require a positive number."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise LogbookParamsError(f"{name} must be a number")
    if value <= 0:
        raise LogbookParamsError(f"{name} must be positive")


def _require_non_empty(value: str, name: str) -> None:
    """Require a non-empty string."""
    if not isinstance(value, str) or not value:
        raise LogbookParamsError(f"{name} must be a non-empty string")


@dataclass(frozen=True)
class SegmentationParams:
    """Flight segmentation parameters."""

    # Inactivity gap that separates flights, in milliseconds
    gap_threshold_ms: int = SEGMENTATION_GAP_THRESHOLD_MS


@dataclass(frozen=True)
class CsvParams:
    """CSV output parameters."""

    # Character set of written files
    charset: str = CSV_CHARSET
    # Column ordering policy name
    column_order: str = CSV_COLUMN_ORDER
    # Row terminator
    line_terminator: str = CSV_LINE_TERMINATOR
    # IANA zone for rendered times, None for local time
    time_zone: Optional[str] = CSV_TIME_ZONE
    # Column header overrides keyed by field code
    field_names: dict[str, str] = field(default_factory=dict)

    def tz(self) -> Optional[tzinfo]:
        """Return the configured zone, or None for local time."""
        if self.time_zone is None:
            return None
        try:
            return ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise LogbookParamsError(
                f"csv.time_zone is not a known zone: {self.time_zone}"
            ) from exc


@dataclass(frozen=True)
class UploadParams:
    """Logbook upload parameters."""

    # Logbook upload endpoint
    server_url: Optional[str] = UPLOAD_SERVER_URL
    # Logbook account login
    login: str = UPLOAD_LOGIN
    # Logbook password, raw or as an MD5 hex digest
    password: str = UPLOAD_PASSWORD
    # Field codes included in uploaded flight files
    field_codes: tuple[str, ...] = UPLOAD_FIELD_CODES
    # HTTP timeout in seconds
    timeout_sec: float = UPLOAD_TIMEOUT_SEC
    # Folder receiving uploaded files
    uploaded_folder: str = UPLOAD_UPLOADED_FOLDER
    # YAML registry of uploaded flight keys
    registry_path: Optional[str] = UPLOAD_REGISTRY_PATH

    def __post_init__(self) -> None:
        """Coerce field codes into a tuple."""
        object.__setattr__(self, "field_codes", tuple(self.field_codes))

    def is_configured(self) -> bool:
        """Return True when an endpoint and login are present."""
        return bool(self.server_url) and bool(self.login)


@dataclass(frozen=True)
class LogbookParams:
    """Complete configuration tree for logbook export."""

    segmentation: SegmentationParams
    csv: CsvParams
    upload: UploadParams

    @classmethod
    def defaults(cls) -> LogbookParams:
        """Return the default parameter tree."""
        return cls(
            segmentation=SegmentationParams(),
            csv=CsvParams(),
            upload=UploadParams(),
        )

    def validate(self) -> None:
        """Validate parameter invariants and constraints."""
        gap_threshold_ms: Any = self.segmentation.gap_threshold_ms
        if isinstance(gap_threshold_ms, bool) or not isinstance(gap_threshold_ms, int):
            raise LogbookParamsError("segmentation.gap_threshold_ms must be an int")
        _require_positive(gap_threshold_ms, "segmentation.gap_threshold_ms")

        _require_non_empty(self.csv.charset, "csv.charset")
        try:
            codecs.lookup(self.csv.charset)
        except LookupError as exc:
            raise LogbookParamsError(
                f"csv.charset is not a known encoding: {self.csv.charset}"
            ) from exc
        _require_non_empty(self.csv.column_order, "csv.column_order")
        if self.csv.column_order not in COLUMN_ORDERS:
            raise LogbookParamsError(
                "csv.column_order must be one of "
                f"{', '.join(sorted(COLUMN_ORDERS))}"
            )
        if self.csv.line_terminator not in ("\n", "\r\n"):
            raise LogbookParamsError("csv.line_terminator must be '\\n' or '\\r\\n'")
        if self.csv.time_zone is not None:
            _require_non_empty(self.csv.time_zone, "csv.time_zone")
        self.csv.tz()
        for code, name in self.csv.field_names.items():
            _require_non_empty(code, "csv.field_names key")
            _require_non_empty(name, f"csv.field_names.{code}")

        _require_positive(self.upload.timeout_sec, "upload.timeout_sec")
        _require_non_empty(self.upload.uploaded_folder, "upload.uploaded_folder")
        if not self.upload.field_codes:
            raise LogbookParamsError("upload.field_codes must not be empty")
        for code in self.upload.field_codes:
            _require_non_empty(code, "upload.field_codes entry")
        if len(set(self.upload.field_codes)) != len(self.upload.field_codes):
            raise LogbookParamsError("upload.field_codes must be distinct")

    def replace(self, **namespace_overrides: Any) -> LogbookParams:
        """Return a modified copy of the parameters."""
        return replace(self, **namespace_overrides)

    def as_nested_dict(self) -> dict[str, Any]:
        """Return a nested dict representation for debugging."""
        return _dataclass_to_dict(self)


def _dataclass_to_dict(value: Any) -> Any:
    """Convert dataclasses and tuples into plain Python values."""
    if hasattr(value, "__dataclass_fields__"):
        return {
            field.name: _dataclass_to_dict(getattr(value, field.name))
            for field in fields(value)
        }
    if isinstance(value, tuple):
        return list(value)
    if isinstance(value, dict):
        return dict(value)
    return value
