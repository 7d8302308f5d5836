################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""File naming and housekeeping for exported telemetry CSV files."""

from __future__ import annotations

import os
import re
from datetime import tzinfo
from pathlib import Path
from typing import Optional

from oasis_logbook.processing.flight_types import epoch_ms_to_datetime


# Timestamp format embedded in generated file names
FILE_DATE_FORMAT: str = "%Y%m%d_%H%M%S"

# Characters that are not allowed in generated file names
_UNSAFE_CHARS: re.Pattern[str] = re.compile(r"[*/\\!|:?<>]")
_ENCODED_QUOTE: re.Pattern[str] = re.compile(r"%22")


class ExportPathError(Exception):
    """Raised when exported files cannot be moved."""


def generate_file_name(
    vehicle_name: str, start_ms: int, tz: Optional[tzinfo] = None
) -> str:
    """Return a filesystem-safe CSV file name for a vehicle and start time."""
    stamp: str = epoch_ms_to_datetime(start_ms, tz).strftime(FILE_DATE_FORMAT)
    name: str = f"{vehicle_name}-{stamp}.csv"
    name = _UNSAFE_CHARS.sub("_", name)
    return _ENCODED_QUOTE.sub("_", name)


def move_uploaded_file(
    path: str | os.PathLike[str], uploaded_folder: str = "uploaded"
) -> Path:
    """Move an uploaded file into a sibling folder, returning the new path."""
    source: Path = Path(os.fspath(path))
    target_dir: Path = source.parent / uploaded_folder
    target: Path = target_dir / source.name
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        os.replace(source, target)
    except OSError as exc:
        raise ExportPathError(f"Failed to move {source} to {target_dir}") from exc
    return target
