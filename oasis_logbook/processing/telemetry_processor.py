################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""
Telemetry session processor with lazily built views
"""

from __future__ import annotations

import io
import logging
import os
import threading
from datetime import tzinfo
from pathlib import Path
from typing import IO
from typing import Any
from typing import Callable
from typing import Generic
from typing import Iterable
from typing import Mapping
from typing import Optional
from typing import Sequence
from typing import TypeVar

from oasis_logbook.config.logbook_params import LogbookParams
from oasis_logbook.export.csv_writer import LINE_TERMINATOR
from oasis_logbook.export.csv_writer import TelemetryCsvWriter
from oasis_logbook.export.field_names import FieldNameMapper
from oasis_logbook.export.field_names import TableFieldNameMapper
from oasis_logbook.processing.field_catalog import ColumnOrder
from oasis_logbook.processing.field_catalog import FieldCatalog
from oasis_logbook.processing.field_catalog import alphabetical_order
from oasis_logbook.processing.field_catalog import column_order_by_name
from oasis_logbook.processing.flight_segmenter import GAP_THRESHOLD_MS
from oasis_logbook.processing.flight_segmenter import segment_flights
from oasis_logbook.processing.flight_types import FlightSegment
from oasis_logbook.processing.time_index import MergeDiagnostics
from oasis_logbook.processing.time_index import TimeIndex
from oasis_logbook.processing.time_index import build_time_index
from oasis_logbook.source.telemetry_source import TelemetrySource
from oasis_logbook.telemetry.telemetry_types import TelemetrySample
from oasis_logbook.telemetry.telemetry_types import VehicleIdentity


T = TypeVar("T")

_LOG: logging.Logger = logging.getLogger(__name__)

# Character set used when the caller does not name one
DEFAULT_CHARSET: str = "utf-8"


class LazyView(Generic[T]):
    """Value computed on first access, at most once.

    Concurrent first readers block on the lock until the value is published.
    A factory that raises leaves the view unbuilt so a later call retries.
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory: Callable[[], T] = factory
        self._lock = threading.Lock()
        self._value: Optional[T] = None
        self._built: bool = False

    def is_built(self) -> bool:
        return self._built

    def get(self) -> T:
        if not self._built:
            with self._lock:
                if not self._built:
                    self._value = self._factory()
                    self._built = True
        return self._value  # type: ignore[return-value]


class TelemetryProcessor:
    """
    Processes the telemetry of one vehicle session

    The time index, field catalog and flight list are derived from the raw
    samples on first use and shared read-only afterwards.
    """

    def __init__(
        self,
        samples: Iterable[TelemetrySample],
        vehicle: Optional[VehicleIdentity] = None,
        *,
        gap_threshold_ms: int = GAP_THRESHOLD_MS,
        column_order: ColumnOrder = alphabetical_order,
        name_mapper: Optional[FieldNameMapper] = None,
        tz: Optional[tzinfo] = None,
        line_terminator: str = LINE_TERMINATOR,
        diagnostics: Optional[MergeDiagnostics] = None,
    ) -> None:
        self._samples: tuple[TelemetrySample, ...] = tuple(samples)
        self._vehicle: VehicleIdentity = vehicle or VehicleIdentity(
            serial_number="", name=""
        )
        self._gap_threshold_ms: int = gap_threshold_ms
        self._column_order: ColumnOrder = column_order
        self._name_mapper: FieldNameMapper = name_mapper or TableFieldNameMapper()
        self._tz: Optional[tzinfo] = tz
        self._line_terminator: str = line_terminator
        self._diagnostics: Optional[MergeDiagnostics] = diagnostics

        self._time_index: LazyView[TimeIndex] = LazyView(self._build_time_index)
        self._field_catalog: LazyView[FieldCatalog] = LazyView(
            self._build_field_catalog
        )
        self._flights: LazyView[tuple[FlightSegment, ...]] = LazyView(
            self._build_flights
        )

    @classmethod
    def from_params(
        cls,
        samples: Iterable[TelemetrySample],
        vehicle: Optional[VehicleIdentity],
        params: LogbookParams,
        diagnostics: Optional[MergeDiagnostics] = None,
    ) -> TelemetryProcessor:
        """Create a processor configured from logbook parameters."""
        return cls(
            samples, vehicle, diagnostics=diagnostics, **processor_options(params)
        )

    @classmethod
    def from_source(
        cls,
        source: TelemetrySource,
        vehicle: VehicleIdentity,
        start_ms: int,
        end_ms: int,
        **kwargs: Any,
    ) -> TelemetryProcessor:
        """Retrieve a vehicle's samples for a time range and wrap them.

        Retrieval errors propagate to the caller unchanged.
        """
        samples: Sequence[TelemetrySample] = source.get_telemetry(
            vehicle, start_ms, end_ms
        )
        _LOG.info(
            "Retrieved %d telemetry samples for %s between %d and %d",
            len(samples),
            vehicle.name or vehicle.serial_number,
            start_ms,
            end_ms,
        )
        return cls(samples, vehicle, **kwargs)

    @property
    def vehicle(self) -> VehicleIdentity:
        return self._vehicle

    @property
    def tz(self) -> Optional[tzinfo]:
        return self._tz

    @property
    def sample_count(self) -> int:
        return len(self._samples)

    def time_index(self) -> TimeIndex:
        """Return the merged, time-ordered snapshot of all samples."""
        return self._time_index.get()

    def field_catalog(self) -> FieldCatalog:
        """Return the field codes observed in the session."""
        return self._field_catalog.get()

    def flights(self) -> tuple[FlightSegment, ...]:
        """Return the flights found in the session."""
        return self._flights.get()

    def field_codes(self) -> tuple[str, ...]:
        """Return the catalog field codes in CSV column order."""
        return self.field_catalog().ordered(self._column_order)

    def print_as_csv(self, out: IO[Any], charset: str = DEFAULT_CHARSET) -> int:
        """Write the whole session as CSV, returning the data row count."""
        return self._print_csv(
            out, charset, self.field_codes(), self.time_index().items()
        )

    def print_flight_as_csv(
        self,
        flight: FlightSegment,
        out: IO[Any],
        charset: str = DEFAULT_CHARSET,
        field_codes: Optional[Sequence[str]] = None,
    ) -> int:
        """Write one flight as CSV, optionally restricted to given columns."""
        columns: Sequence[str] = (
            self.field_codes() if field_codes is None else tuple(field_codes)
        )
        return self._print_csv(out, charset, columns, flight.records.items())

    def write_csv(
        self, path: str | os.PathLike[str], charset: str = DEFAULT_CHARSET
    ) -> int:
        """Write the whole session to a CSV file."""
        with Path(os.fspath(path)).open("wb") as handle:
            return self.print_as_csv(handle, charset)

    def write_flight_csv(
        self,
        flight: FlightSegment,
        path: str | os.PathLike[str],
        charset: str = DEFAULT_CHARSET,
        field_codes: Optional[Sequence[str]] = None,
    ) -> int:
        """Write one flight to a CSV file."""
        with Path(os.fspath(path)).open("wb") as handle:
            return self.print_flight_as_csv(flight, handle, charset, field_codes)

    def _print_csv(
        self,
        out: IO[Any],
        charset: str,
        field_codes: Sequence[str],
        records: Iterable[tuple[int, Mapping[str, TelemetrySample]]],
    ) -> int:
        if isinstance(out, io.TextIOBase):
            return self._write_rows(out, field_codes, records)

        text_out = io.TextIOWrapper(out, encoding=charset, newline="")
        try:
            return self._write_rows(text_out, field_codes, records)
        finally:
            text_out.flush()
            text_out.detach()

    def _write_rows(
        self,
        stream: Any,
        field_codes: Sequence[str],
        records: Iterable[tuple[int, Mapping[str, TelemetrySample]]],
    ) -> int:
        writer: TelemetryCsvWriter = TelemetryCsvWriter(
            stream,
            field_codes,
            name_mapper=self._name_mapper,
            tz=self._tz,
            line_terminator=self._line_terminator,
        )
        writer.print_header()
        row_count: int = writer.print_records(records)
        writer.flush()
        _LOG.debug("Wrote %d CSV rows with %d fields", row_count, len(field_codes))
        return row_count

    def _build_time_index(self) -> TimeIndex:
        return build_time_index(self._samples, self._diagnostics)

    def _build_field_catalog(self) -> FieldCatalog:
        return FieldCatalog.from_time_index(self.time_index())

    def _build_flights(self) -> tuple[FlightSegment, ...]:
        return tuple(
            segment_flights(self.time_index(), self._vehicle, self._gap_threshold_ms)
        )


def processor_options(params: LogbookParams) -> dict[str, Any]:
    """Return the processor keyword arguments selected by logbook parameters."""
    return {
        "gap_threshold_ms": params.segmentation.gap_threshold_ms,
        "column_order": column_order_by_name(params.csv.column_order),
        "name_mapper": TableFieldNameMapper(params.csv.field_names),
        "tz": params.csv.tz(),
        "line_terminator": params.csv.line_terminator,
    }
