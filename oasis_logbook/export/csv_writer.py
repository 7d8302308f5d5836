################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Forward-filled CSV serialization of telemetry records."""

from __future__ import annotations

import csv
import logging
from datetime import tzinfo
from typing import Iterable
from typing import Mapping
from typing import Optional
from typing import Sequence
from typing import TextIO

from oasis_logbook.export.field_names import FieldNameMapper
from oasis_logbook.export.field_names import IdentityFieldNameMapper
from oasis_logbook.processing.flight_types import epoch_ms_to_datetime
from oasis_logbook.telemetry.telemetry_types import TelemetrySample


_LOG: logging.Logger = logging.getLogger(__name__)

# Header of the leading time column
TIME_COLUMN: str = "Time"

# Default row terminator
LINE_TERMINATOR: str = "\n"


def format_local_time(epoch_ms: int, tz: Optional[tzinfo] = None) -> str:
    """Render a timestamp as an ISO-8601 date-time without zone suffix."""
    moment = epoch_ms_to_datetime(epoch_ms, tz)
    return moment.replace(tzinfo=None).isoformat(timespec="milliseconds")


class TelemetryCsvWriter:
    """Writes telemetry rows with forward-filled field values.

    The column set is fixed at construction. Each printed record updates the
    current record with the fields it carries, and every row reports the
    latest known value of each column, or an empty cell if the field has not
    been seen since the last reset.
    """

    def __init__(
        self,
        stream: TextIO,
        field_codes: Sequence[str],
        *,
        name_mapper: Optional[FieldNameMapper] = None,
        tz: Optional[tzinfo] = None,
        line_terminator: str = LINE_TERMINATOR,
    ) -> None:
        if len(set(field_codes)) != len(field_codes):
            raise ValueError("field_codes must be distinct")
        self._stream: TextIO = stream
        self._field_codes: tuple[str, ...] = tuple(field_codes)
        self._name_mapper: FieldNameMapper = name_mapper or IdentityFieldNameMapper()
        self._tz: Optional[tzinfo] = tz
        self._writer = csv.writer(
            stream, quoting=csv.QUOTE_MINIMAL, lineterminator=line_terminator
        )
        self._current_record: dict[str, str] = {}
        self._row_count: int = 0

    @property
    def field_codes(self) -> tuple[str, ...]:
        return self._field_codes

    @property
    def row_count(self) -> int:
        """Return the number of data rows written since the last reset."""
        return self._row_count

    def header(self) -> list[str]:
        """Return the translated column headers."""
        return [TIME_COLUMN] + [
            self._name_mapper.convert_type_name(field_code)
            for field_code in self._field_codes
        ]

    def print_header(self) -> None:
        self._writer.writerow(self.header())

    def reset(self) -> None:
        """Forget all forward-filled values."""
        self._current_record.clear()
        self._row_count = 0

    def update(self, record: Mapping[str, TelemetrySample]) -> None:
        """Merge the non-empty values of a record into the current record."""
        for field_code, sample in record.items():
            text: str = _sample_to_string(sample)
            if text:
                self._current_record[field_code] = text

    def current_row(self, timestamp: int) -> list[str]:
        """Return the row for a timestamp from the current record."""
        return [format_local_time(timestamp, self._tz)] + [
            self._current_record.get(field_code, "")
            for field_code in self._field_codes
        ]

    def print_record(
        self, timestamp: int, record: Mapping[str, TelemetrySample]
    ) -> None:
        """Update the current record and write one row."""
        self.update(record)
        self._writer.writerow(self.current_row(timestamp))
        self._row_count += 1

    def print_records(
        self, records: Iterable[tuple[int, Mapping[str, TelemetrySample]]]
    ) -> int:
        """Write one row per (timestamp, record) pair, returning the row count."""
        for timestamp, record in records:
            self.print_record(timestamp, record)
        return self._row_count

    def flush(self) -> None:
        self._stream.flush()


def _sample_to_string(sample: object) -> str:
    """Render a sample's value, degrading malformed samples to empty."""
    if not isinstance(sample, TelemetrySample):
        _LOG.debug("Ignoring malformed telemetry record entry %r", sample)
        return ""
    return sample.value.to_string()
