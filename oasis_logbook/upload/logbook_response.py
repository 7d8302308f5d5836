################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Logbook service responses and upload errors."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from oasis_logbook.processing.flight_types import FlightSegment


# Body text the logbook service returns for a flight it already holds
_DUPLICATE_PATTERN: re.Pattern[str] = re.compile(
    r"duplicat|already\s+(?:been\s+)?(?:uploaded|recorded|exists?)", re.IGNORECASE
)

# Body text the logbook service returns for a rejected file
_FAILURE_PATTERN: re.Pattern[str] = re.compile(r"\berror\b|\bfail", re.IGNORECASE)


class LogbookUploadError(Exception):
    """Base class for logbook upload failures."""


class LogbookAuthorizationError(LogbookUploadError):
    """Raised when the logbook service rejects the credentials."""

    def __init__(self, message: str = "LogBook authorization failed.") -> None:
        super().__init__(message)


class LogbookServiceError(LogbookUploadError):
    """Raised when the logbook service fails to accept an upload."""

    def __init__(self, message: str = "Uploading data to LogBook failed.") -> None:
        super().__init__(message)


class LogbookServiceUnavailable(LogbookUploadError):
    """Raised when the logbook service cannot be reached."""

    def __init__(self, message: str = "LogBook service unavailable.") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class LogbookResponse:
    """Body of a successful logbook HTTP exchange.

    Attributes:
        status_code: HTTP status returned by the service
        lines: Response body split into lines
    """

    status_code: int
    lines: tuple[str, ...] = ()

    @classmethod
    def from_text(cls, status_code: int, text: str) -> LogbookResponse:
        return cls(status_code=status_code, lines=tuple(text.splitlines()))

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def is_flight_duplicated(self) -> bool:
        """Return True when the service already holds the flight."""
        return _DUPLICATE_PATTERN.search(self.text) is not None

    def is_upload_succeed(self) -> bool:
        """Return True when the service accepted a new flight."""
        if self.is_flight_duplicated():
            return False
        return _FAILURE_PATTERN.search(self.text) is None


@dataclass(frozen=True)
class FlightUploadResponse:
    """Outcome of uploading one flight.

    Attributes:
        flight: Uploaded flight
        csv_file: CSV file that was submitted
        response: Response of the logbook service
    """

    flight: FlightSegment
    csv_file: Path
    response: LogbookResponse

    def is_uploaded(self) -> bool:
        """Return True when the logbook now holds the flight."""
        return self.response.is_upload_succeed() or self.response.is_flight_duplicated()
