################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""CSV export of merged telemetry."""

from __future__ import annotations

from oasis_logbook.export.csv_writer import TelemetryCsvWriter
from oasis_logbook.export.export_paths import ExportPathError
from oasis_logbook.export.export_paths import generate_file_name
from oasis_logbook.export.export_paths import move_uploaded_file
from oasis_logbook.export.field_names import FieldNameMapper
from oasis_logbook.export.field_names import IdentityFieldNameMapper
from oasis_logbook.export.field_names import TableFieldNameMapper


__all__ = [
    "ExportPathError",
    "FieldNameMapper",
    "IdentityFieldNameMapper",
    "TableFieldNameMapper",
    "TelemetryCsvWriter",
    "generate_file_name",
    "move_uploaded_file",
]
