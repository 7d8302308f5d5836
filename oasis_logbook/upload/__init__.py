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
Logbook upload service client
"""

from __future__ import annotations

from oasis_logbook.upload.logbook_response import FlightUploadResponse
from oasis_logbook.upload.logbook_response import LogbookAuthorizationError
from oasis_logbook.upload.logbook_response import LogbookResponse
from oasis_logbook.upload.logbook_response import LogbookServiceError
from oasis_logbook.upload.logbook_response import LogbookServiceUnavailable
from oasis_logbook.upload.logbook_response import LogbookUploadError
from oasis_logbook.upload.logbook_uploader import LogbookUploader
from oasis_logbook.upload.uploaded_flights import UploadedFlightsError
from oasis_logbook.upload.uploaded_flights import UploadedFlightsStorage


__all__ = [
    "FlightUploadResponse",
    "LogbookAuthorizationError",
    "LogbookResponse",
    "LogbookServiceError",
    "LogbookServiceUnavailable",
    "LogbookUploadError",
    "LogbookUploader",
    "UploadedFlightsError",
    "UploadedFlightsStorage",
]
