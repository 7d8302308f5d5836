################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for the logbook uploader."""

from __future__ import annotations

import dataclasses
import hashlib
from datetime import timezone
from pathlib import Path
from typing import Any
from typing import Optional

import pytest
import requests

from oasis_logbook.config.logbook_params import LogbookParams
from oasis_logbook.processing.flight_types import FlightSegment
from oasis_logbook.processing.telemetry_processor import TelemetryProcessor
from oasis_logbook.telemetry.telemetry_types import TelemetrySample
from oasis_logbook.telemetry.telemetry_types import TelemetryValue
from oasis_logbook.telemetry.telemetry_types import VehicleIdentity
from oasis_logbook.upload.logbook_response import FlightUploadResponse
from oasis_logbook.upload.logbook_response import LogbookAuthorizationError
from oasis_logbook.upload.logbook_response import LogbookResponse
from oasis_logbook.upload.logbook_response import LogbookServiceError
from oasis_logbook.upload.logbook_response import LogbookServiceUnavailable
from oasis_logbook.upload.logbook_response import LogbookUploadError
from oasis_logbook.upload.logbook_uploader import AUTHORIZATION_TEST_FILE
from oasis_logbook.upload.logbook_uploader import LogbookUploader
from oasis_logbook.upload.logbook_uploader import credential_hash
from oasis_logbook.upload.uploaded_flights import UploadedFlightsStorage


SERVER_URL: str = "https://logbook.invalid/upload"

VEHICLE: VehicleIdentity = VehicleIdentity(serial_number="SN-1", name="Hexa One")


class _FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int, text: str) -> None:
        self.status_code: int = status_code
        self.text: str = text


class _FakeSession:
    """Records posts and replies with a canned response."""

    def __init__(
        self,
        status_code: int = 200,
        text: str = "OK",
        error: Optional[Exception] = None,
    ) -> None:
        self.status_code: int = status_code
        self.text: str = text
        self.error: Optional[Exception] = error
        self.posts: list[dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> _FakeResponse:
        if self.error is not None:
            raise self.error
        files: dict[str, Any] = {}
        for name, (file_name, content, content_type) in kwargs["files"].items():
            body: bytes = content if isinstance(content, bytes) else content.read()
            files[name] = (file_name, body, content_type)
        self.posts.append({"url": url, **kwargs, "files": files})
        return _FakeResponse(self.status_code, self.text)


def _processor() -> TelemetryProcessor:
    """Create a processor holding one flight."""
    return TelemetryProcessor(
        [
            TelemetrySample(
                timestamp=0,
                field_code="latitude",
                value=TelemetryValue(double_value=56.9),
            ),
            TelemetrySample(
                timestamp=0,
                field_code="roll",
                value=TelemetryValue(double_value=0.1),
            ),
            TelemetrySample(
                timestamp=1000,
                field_code="main_voltage",
                value=TelemetryValue(float_value=12.5),
            ),
        ],
        VEHICLE,
        tz=timezone.utc,
    )


def _uploader(
    session: _FakeSession, tmp_path: Path, **kwargs: Any
) -> LogbookUploader:
    """Create an uploader posting to a fake session."""
    return LogbookUploader(
        SERVER_URL,
        "pilot",
        "secret",
        session=session,  # type: ignore[arg-type]
        temp_dir=tmp_path,
        **kwargs,
    )


def test_credential_hash() -> None:
    """Raw passwords should be hashed and digests passed through."""
    digest: str = hashlib.md5(b"secret").hexdigest()
    assert credential_hash("secret") == digest
    assert credential_hash(digest.upper()) == digest


def test_upload_flight_success(tmp_path: Path) -> None:
    """A successful upload should post the flight CSV and record it."""
    session: _FakeSession = _FakeSession(200, "OK")
    uploader: LogbookUploader = _uploader(session, tmp_path)
    processor: TelemetryProcessor = _processor()
    flight: FlightSegment = processor.flights()[0]

    result: FlightUploadResponse = uploader.upload_flight(processor, flight)

    assert result.is_uploaded()
    assert result.flight is flight
    assert result.csv_file.parent == tmp_path
    assert result.csv_file.name.startswith("Hexa_One-")
    assert uploader.storage.is_uploaded(flight)

    post: dict[str, Any] = session.posts[0]
    assert post["url"] == SERVER_URL
    assert post["data"] == {
        "login": "pilot",
        "password": hashlib.md5(b"secret").hexdigest(),
        "droneId": "SN-1",
        "droneName": "Hexa One",
    }
    assert post["headers"]["User-Agent"]
    assert post["timeout"] == 30.0

    file_name, body, content_type = post["files"]["data"]
    assert file_name == result.csv_file.name
    assert content_type == "text/csv; charset=utf-8"
    assert body.decode("utf-8").splitlines() == [
        "Time,Latitude,Longitude,Altitude AGL,Ground Speed,Main Voltage,Main Current",
        "1970-01-01T00:00:00.000,56.9,,,,,",
        "1970-01-01T00:00:01.000,56.9,,,,12.5,",
    ]
    assert result.csv_file.read_bytes() == body


def test_upload_flight_duplicate(tmp_path: Path) -> None:
    """A duplicate notice should still mark the flight as uploaded."""
    uploader: LogbookUploader = _uploader(
        _FakeSession(200, "Flight already uploaded"), tmp_path
    )
    processor: TelemetryProcessor = _processor()
    flight: FlightSegment = processor.flights()[0]

    result: FlightUploadResponse = uploader.upload_flight(processor, flight)

    assert result.response.is_flight_duplicated()
    assert result.is_uploaded()
    assert uploader.storage.is_uploaded(flight)


def test_upload_flight_rejected(tmp_path: Path) -> None:
    """An error body should leave the flight unrecorded."""
    uploader: LogbookUploader = _uploader(
        _FakeSession(200, "Error: wrong format"), tmp_path
    )
    processor: TelemetryProcessor = _processor()

    result: FlightUploadResponse = uploader.upload_flight(
        processor, processor.flights()[0]
    )

    assert not result.is_uploaded()
    assert len(uploader.storage) == 0


def test_upload_flight_status_errors(tmp_path: Path) -> None:
    """HTTP failures should raise typed errors."""
    processor: TelemetryProcessor = _processor()
    flight: FlightSegment = processor.flights()[0]

    with pytest.raises(LogbookAuthorizationError):
        _uploader(_FakeSession(401, ""), tmp_path).upload_flight(processor, flight)
    with pytest.raises(LogbookServiceError):
        _uploader(_FakeSession(500, ""), tmp_path).upload_flight(processor, flight)
    with pytest.raises(LogbookServiceError):
        _uploader(_FakeSession(404, ""), tmp_path).upload_flight(processor, flight)


def test_connection_error(tmp_path: Path) -> None:
    """Network failures should raise LogbookServiceUnavailable."""
    session: _FakeSession = _FakeSession(error=requests.ConnectionError("refused"))
    processor: TelemetryProcessor = _processor()

    with pytest.raises(LogbookServiceUnavailable):
        _uploader(session, tmp_path).upload_flight(processor, processor.flights()[0])


@pytest.mark.parametrize(
    "session",
    [
        _FakeSession(error=requests.ConnectionError("refused")),
        _FakeSession(401, ""),
        _FakeSession(500, ""),
    ],
)
def test_failed_upload_removes_temp_file(tmp_path: Path, session: _FakeSession) -> None:
    """A failed post should not leave the flight CSV in the temp directory."""
    processor: TelemetryProcessor = _processor()

    with pytest.raises(LogbookUploadError):
        _uploader(session, tmp_path).upload_flight(processor, processor.flights()[0])

    assert list(tmp_path.iterdir()) == []


def test_authorization_check(tmp_path: Path) -> None:
    """The credential check should post only credentials and a marker file."""
    session: _FakeSession = _FakeSession(200, "OK")

    response: LogbookResponse = _uploader(session, tmp_path).test_authorization()

    assert response.status_code == 200
    post: dict[str, Any] = session.posts[0]
    assert set(post["data"]) == {"login", "password"}
    assert post["files"]["file"][0] == AUTHORIZATION_TEST_FILE


def test_authorization_check_tolerates_server_error(tmp_path: Path) -> None:
    """A server error during the credential check should not raise."""
    response: LogbookResponse = _uploader(
        _FakeSession(500, ""), tmp_path
    ).test_authorization()
    assert response.status_code == 500


def test_authorization_check_rejected(tmp_path: Path) -> None:
    """Rejected credentials should raise LogbookAuthorizationError."""
    with pytest.raises(LogbookAuthorizationError):
        _uploader(_FakeSession(401, ""), tmp_path).test_authorization()


def test_from_params(tmp_path: Path) -> None:
    """Upload parameters should configure the uploader."""
    defaults: LogbookParams = LogbookParams.defaults()
    registry: Path = tmp_path / "uploaded.yaml"
    params: LogbookParams = defaults.replace(
        upload=dataclasses.replace(
            defaults.upload,
            server_url=SERVER_URL,
            login="pilot",
            password="secret",
            field_codes=("main_voltage",),
            registry_path=str(registry),
        )
    )
    session: _FakeSession = _FakeSession(200, "OK")
    uploader: LogbookUploader = LogbookUploader.from_params(
        params.upload, session=session, temp_dir=tmp_path
    )
    processor: TelemetryProcessor = _processor()

    uploader.upload_flight(processor, processor.flights()[0])

    assert uploader.storage.path == registry
    assert UploadedFlightsStorage(registry).keys() == ["0_1000_SN-1"]
    body: bytes = session.posts[0]["files"]["data"][1]
    assert body.decode("utf-8").splitlines()[0] == "Time,Main Voltage"


def test_from_params_requires_server(tmp_path: Path) -> None:
    """An uploader cannot be built without an endpoint."""
    with pytest.raises(ValueError):
        LogbookUploader.from_params(LogbookParams.defaults().upload)


def test_shared_empty_storage_is_used(tmp_path: Path) -> None:
    """An empty registry passed in should be the one that is updated."""
    storage: UploadedFlightsStorage = UploadedFlightsStorage()
    uploader: LogbookUploader = _uploader(
        _FakeSession(200, "OK"), tmp_path, storage=storage
    )
    processor: TelemetryProcessor = _processor()

    uploader.upload_flight(processor, processor.flights()[0])

    assert uploader.storage is storage
    assert len(storage) == 1
