################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for logbook response classification."""

from __future__ import annotations

from oasis_logbook.upload.logbook_response import LogbookAuthorizationError
from oasis_logbook.upload.logbook_response import LogbookResponse
from oasis_logbook.upload.logbook_response import LogbookServiceError
from oasis_logbook.upload.logbook_response import LogbookServiceUnavailable
from oasis_logbook.upload.logbook_response import LogbookUploadError


def test_success_response() -> None:
    """A plain acknowledgement should count as a successful upload."""
    response: LogbookResponse = LogbookResponse.from_text(200, "OK\nFlight saved")
    assert response.lines == ("OK", "Flight saved")
    assert response.text == "OK\nFlight saved"
    assert response.is_upload_succeed()
    assert not response.is_flight_duplicated()


def test_duplicate_response() -> None:
    """Duplicate notices should be detected and not count as new uploads."""
    for text in (
        "Duplicate flight",
        "This flight has already been uploaded",
        "Flight already exists",
    ):
        response: LogbookResponse = LogbookResponse.from_text(200, text)
        assert response.is_flight_duplicated(), text
        assert not response.is_upload_succeed(), text


def test_failure_response() -> None:
    """Error text should not count as a successful upload."""
    response: LogbookResponse = LogbookResponse.from_text(200, "Error: bad header")
    assert not response.is_upload_succeed()
    assert not response.is_flight_duplicated()
    assert not LogbookResponse.from_text(200, "Upload failed").is_upload_succeed()


def test_error_messages() -> None:
    """Errors should share a base class and carry default messages."""
    assert isinstance(LogbookAuthorizationError(), LogbookUploadError)
    assert str(LogbookAuthorizationError()) == "LogBook authorization failed."
    assert str(LogbookServiceError()) == "Uploading data to LogBook failed."
    assert str(LogbookServiceUnavailable()) == "LogBook service unavailable."
