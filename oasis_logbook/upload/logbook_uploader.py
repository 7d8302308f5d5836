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
Gateway to the drone logbook upload service
"""

from __future__ import annotations

import hashlib
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any
from typing import Optional
from typing import Sequence

import requests

from oasis_logbook.config.logbook_params import UPLOAD_FIELD_CODES
from oasis_logbook.config.logbook_params import UPLOAD_TIMEOUT_SEC
from oasis_logbook.config.logbook_params import UploadParams
from oasis_logbook.processing.flight_types import FlightSegment
from oasis_logbook.processing.telemetry_processor import DEFAULT_CHARSET
from oasis_logbook.processing.telemetry_processor import TelemetryProcessor
from oasis_logbook.upload.logbook_response import FlightUploadResponse
from oasis_logbook.upload.logbook_response import LogbookAuthorizationError
from oasis_logbook.upload.logbook_response import LogbookResponse
from oasis_logbook.upload.logbook_response import LogbookServiceError
from oasis_logbook.upload.logbook_response import LogbookServiceUnavailable
from oasis_logbook.upload.logbook_response import LogbookUploadError
from oasis_logbook.upload.uploaded_flights import UploadedFlightsStorage


_LOG: logging.Logger = logging.getLogger(__name__)

# Headers sent with every logbook request
REQUEST_HEADERS: dict[str, str] = {
    "User-Agent": "OASIS Logbook",
    "DEBUG": "UGCS",
}

# File name of the empty file part sent when testing credentials
AUTHORIZATION_TEST_FILE: str = "login_try"

_MD5_HEX: re.Pattern[str] = re.compile(r"[0-9a-fA-F]{32}")
_UNSAFE_PREFIX_CHARS: re.Pattern[str] = re.compile(r"[^A-Za-z0-9_.-]")


def credential_hash(raw_password_or_md5: str) -> str:
    """Return the MD5 hex digest sent as the logbook password.

    A value that already is a 32-digit hex digest is passed through.
    """
    if _MD5_HEX.fullmatch(raw_password_or_md5):
        return raw_password_or_md5.lower()
    return hashlib.md5(raw_password_or_md5.encode("utf-8")).hexdigest()


class LogbookUploader:
    """
    Uploads flight CSV files to the logbook service
    """

    def __init__(
        self,
        server_url: str,
        login: str,
        raw_password_or_md5: str,
        *,
        field_codes: Sequence[str] = UPLOAD_FIELD_CODES,
        charset: str = DEFAULT_CHARSET,
        timeout_sec: float = UPLOAD_TIMEOUT_SEC,
        storage: Optional[UploadedFlightsStorage] = None,
        session: Optional[requests.Session] = None,
        temp_dir: Optional[str | os.PathLike[str]] = None,
    ) -> None:
        self._server_url: str = server_url
        self._login: str = login
        self._password_hash: str = credential_hash(raw_password_or_md5)
        self._field_codes: tuple[str, ...] = tuple(field_codes)
        self._charset: str = charset
        self._timeout_sec: float = timeout_sec
        self._storage: UploadedFlightsStorage = (
            storage if storage is not None else UploadedFlightsStorage()
        )
        self._session: requests.Session = (
            session if session is not None else requests.Session()
        )
        self._temp_dir: Optional[str] = os.fspath(temp_dir) if temp_dir else None

    @classmethod
    def from_params(
        cls,
        params: UploadParams,
        charset: str = DEFAULT_CHARSET,
        **kwargs: Any,
    ) -> LogbookUploader:
        """Create an uploader from upload parameters."""
        if not params.server_url:
            raise ValueError("upload.server_url is not configured")
        kwargs.setdefault("storage", UploadedFlightsStorage(params.registry_path))
        return cls(
            params.server_url,
            params.login,
            params.password,
            field_codes=params.field_codes,
            charset=charset,
            timeout_sec=params.timeout_sec,
            **kwargs,
        )

    @property
    def storage(self) -> UploadedFlightsStorage:
        return self._storage

    def upload_flight(
        self, processor: TelemetryProcessor, flight: FlightSegment
    ) -> FlightUploadResponse:
        """Write a flight to a temporary CSV file and submit it."""
        csv_file: Path = self._write_flight_file(processor, flight)
        _LOG.info(
            "Uploading %s of %s from %s",
            flight.flight_id(processor.tz),
            flight.drone_name,
            csv_file,
        )

        data: dict[str, str] = self._credentials()
        data["droneId"] = flight.drone_serial_number
        data["droneName"] = flight.drone_name

        try:
            with csv_file.open("rb") as handle:
                files: dict[str, Any] = {
                    "data": (
                        csv_file.name,
                        handle,
                        f"text/csv; charset={self._charset}",
                    )
                }
                response: LogbookResponse = self._post(data, files)
        except LogbookUploadError:
            csv_file.unlink(missing_ok=True)
            raise

        result: FlightUploadResponse = FlightUploadResponse(
            flight=flight, csv_file=csv_file, response=response
        )
        if result.is_uploaded():
            self._storage.store_as_uploaded(flight)
        if response.is_flight_duplicated():
            _LOG.info("Flight %s was already in the logbook", flight.flight_id().key())

        return result

    def test_authorization(self) -> LogbookResponse:
        """Submit the credentials alone to check that the service accepts them."""
        files: dict[str, Any] = {"file": (AUTHORIZATION_TEST_FILE, b"", "text/plain")}
        return self._post(self._credentials(), files, authorization_test=True)

    def _credentials(self) -> dict[str, str]:
        return {"login": self._login, "password": self._password_hash}

    def _write_flight_file(
        self, processor: TelemetryProcessor, flight: FlightSegment
    ) -> Path:
        prefix: str = _UNSAFE_PREFIX_CHARS.sub("_", flight.drone_name or "flight")
        with tempfile.NamedTemporaryFile(
            prefix=f"{prefix}-",
            suffix=".csv",
            dir=self._temp_dir,
            delete=False,
        ) as handle:
            processor.print_flight_as_csv(
                flight, handle.file, self._charset, self._field_codes
            )
        return Path(handle.name)

    def _post(
        self,
        data: dict[str, str],
        files: dict[str, Any],
        authorization_test: bool = False,
    ) -> LogbookResponse:
        try:
            response: requests.Response = self._session.post(
                self._server_url,
                data=data,
                files=files,
                headers=REQUEST_HEADERS,
                timeout=self._timeout_sec,
            )
        except requests.RequestException as exc:
            raise LogbookServiceUnavailable() from exc

        status: int = response.status_code
        _LOG.debug("Logbook responded with HTTP %d", status)

        if status == requests.codes.ok:
            return LogbookResponse.from_text(status, response.text)
        if status == requests.codes.unauthorized:
            raise LogbookAuthorizationError()
        if status == requests.codes.internal_server_error and authorization_test:
            return LogbookResponse(status_code=status)
        raise LogbookServiceError()
