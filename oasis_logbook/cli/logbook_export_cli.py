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
Command-line entry point for exporting and uploading vehicle telemetry
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from oasis_logbook.config.logbook_config import LogbookConfigError
from oasis_logbook.config.logbook_config import load_logbook_params
from oasis_logbook.config.logbook_params import LogbookParams
from oasis_logbook.config.logbook_params import LogbookParamsError
from oasis_logbook.export.export_paths import ExportPathError
from oasis_logbook.export.export_paths import generate_file_name
from oasis_logbook.export.export_paths import move_uploaded_file
from oasis_logbook.processing.flight_types import FlightSegment
from oasis_logbook.processing.telemetry_processor import TelemetryProcessor
from oasis_logbook.processing.telemetry_processor import processor_options
from oasis_logbook.source.telemetry_source import JsonTelemetrySource
from oasis_logbook.source.telemetry_source import TelemetryRetrievalError
from oasis_logbook.telemetry.telemetry_types import VehicleIdentity
from oasis_logbook.upload.logbook_response import FlightUploadResponse
from oasis_logbook.upload.logbook_response import LogbookServiceError
from oasis_logbook.upload.logbook_response import LogbookUploadError
from oasis_logbook.upload.logbook_uploader import LogbookUploader
from oasis_logbook.upload.uploaded_flights import UploadedFlightsError


_LOG: logging.Logger = logging.getLogger(__name__)

# Latest timestamp accepted when no end time is given
MAX_TIMESTAMP_MS: int = 2**63 - 1

# Subdirectory of the output directory receiving per-flight files
FLIGHTS_DIR: str = "flights"

# Subdirectory of the output directory receiving files being uploaded
UPLOAD_DIR: str = "upload"

# Log record layout for console output
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="logbook_export",
        description="Export vehicle telemetry to CSV and upload flights to a logbook",
    )
    parser.add_argument(
        "--samples", required=True, help="JSON dump holding vehicles and telemetry"
    )
    parser.add_argument("--vehicle", required=True, help="Vehicle serial number")
    parser.add_argument(
        "--start", type=int, default=0, help="First timestamp in epoch milliseconds"
    )
    parser.add_argument(
        "--end",
        type=int,
        default=MAX_TIMESTAMP_MS,
        help="Last timestamp in epoch milliseconds",
    )
    parser.add_argument("--config", default=None, help="YAML parameter file")
    parser.add_argument(
        "--output-dir", default=".", help="Directory receiving the CSV files"
    )
    parser.add_argument(
        "--flights", action="store_true", help="Also write one CSV file per flight"
    )
    parser.add_argument(
        "--upload", action="store_true", help="Upload flights to the logbook"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level",
    )
    return parser


def export_session(
    processor: TelemetryProcessor,
    params: LogbookParams,
    output_dir: Path,
    start_ms: int,
) -> Path:
    """Write the whole retrieved range to one CSV file."""
    vehicle: VehicleIdentity = processor.vehicle
    timestamps: tuple[int, ...] = processor.time_index().timestamps
    first_ms: int = timestamps[0] if timestamps else start_ms

    path: Path = output_dir / generate_file_name(
        vehicle.name or vehicle.serial_number, first_ms, processor.tz
    )
    row_count: int = processor.write_csv(path, params.csv.charset)
    _LOG.info("Wrote %d rows to %s", row_count, path)
    return path


def export_flights(
    processor: TelemetryProcessor, params: LogbookParams, output_dir: Path
) -> list[Path]:
    """Write each flight to its own CSV file."""
    flights_dir: Path = output_dir / FLIGHTS_DIR
    flights_dir.mkdir(parents=True, exist_ok=True)

    paths: list[Path] = []
    for flight in processor.flights():
        path: Path = flights_dir / generate_file_name(
            flight.drone_name or flight.drone_serial_number,
            flight.start_ms,
            processor.tz,
        )
        processor.write_flight_csv(flight, path, params.csv.charset)
        _LOG.info("Wrote %s to %s", flight.flight_id(processor.tz), path)
        paths.append(path)
    return paths


def upload_flights(
    processor: TelemetryProcessor, params: LogbookParams, output_dir: Path
) -> int:
    """Upload the flights the logbook does not hold yet.

    Returns the number of flights that failed to upload. Authorization and
    connectivity failures abort the whole run.
    """
    upload_dir: Path = output_dir / UPLOAD_DIR
    upload_dir.mkdir(parents=True, exist_ok=True)

    uploader: LogbookUploader = LogbookUploader.from_params(
        params.upload, params.csv.charset, temp_dir=upload_dir
    )
    uploader.test_authorization()

    failures: int = 0
    for flight in processor.flights():
        if uploader.storage.is_uploaded(flight):
            _LOG.debug("Skipping uploaded flight %s", flight.flight_id().key())
            continue

        try:
            result: FlightUploadResponse = uploader.upload_flight(processor, flight)
        except LogbookServiceError as exc:
            _LOG.error("Failed to upload %s: %s", flight.flight_id(processor.tz), exc)
            failures += 1
            continue

        if result.is_uploaded():
            move_uploaded_file(result.csv_file, params.upload.uploaded_folder)
        else:
            _LOG.error(
                "Logbook rejected %s: %s",
                flight.flight_id(processor.tz),
                result.response.text,
            )
            failures += 1

    return failures


def run(args: argparse.Namespace) -> int:
    params: LogbookParams = load_logbook_params(args.config)
    if args.upload and not params.upload.is_configured():
        raise LogbookConfigError("upload.server_url and upload.login are required")

    output_dir: Path = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    source: JsonTelemetrySource = JsonTelemetrySource(args.samples)
    vehicle: VehicleIdentity = source.find_vehicle(args.vehicle)
    processor: TelemetryProcessor = TelemetryProcessor.from_source(
        source, vehicle, args.start, args.end, **processor_options(params)
    )

    export_session(processor, params, output_dir, args.start)

    flights: tuple[FlightSegment, ...] = processor.flights()
    _LOG.info("Found %d flights", len(flights))

    if args.flights:
        export_flights(processor, params, output_dir)

    if args.upload:
        if upload_flights(processor, params, output_dir):
            return 1

    return 0


################################################################################
# Command-line entry point
################################################################################


def main(args: Optional[list[str]] = None) -> int:
    parsed: argparse.Namespace = build_parser().parse_args(args)
    logging.basicConfig(level=parsed.log_level, format=LOG_FORMAT)

    try:
        return run(parsed)
    except (
        LogbookConfigError,
        LogbookParamsError,
        TelemetryRetrievalError,
        LogbookUploadError,
        UploadedFlightsError,
        ExportPathError,
        OSError,
    ) as exc:
        _LOG.error("%s", exc)
        return 1
