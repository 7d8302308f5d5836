################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Telemetry retrieval backends."""

from oasis_logbook.source.telemetry_source import JsonTelemetrySource
from oasis_logbook.source.telemetry_source import TelemetryRetrievalError
from oasis_logbook.source.telemetry_source import TelemetrySource


__all__ = ["JsonTelemetrySource", "TelemetryRetrievalError", "TelemetrySource"]
