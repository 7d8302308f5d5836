################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Registry of flights already uploaded to the logbook."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Any
from typing import Optional

import yaml

from oasis_logbook.processing.flight_types import FlightSegment


class UploadedFlightsError(Exception):
    """Raised when the uploaded-flights registry cannot be read or written."""


class UploadedFlightsStorage:
    """Tracks uploaded flights by key, optionally persisted as YAML."""

    def __init__(self, path: Optional[str | os.PathLike[str]] = None) -> None:
        self._lock = threading.Lock()
        self._path: Optional[Path] = Path(os.fspath(path)) if path else None
        self._keys: set[str] = set()
        if self._path is not None and self._path.exists():
            self._keys = _load_keys(self._path)

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)

    def is_uploaded(self, flight: FlightSegment) -> bool:
        with self._lock:
            return flight.flight_id().key() in self._keys

    def store_as_uploaded(self, flight: FlightSegment) -> None:
        """Record a flight and persist the registry."""
        with self._lock:
            self._keys.add(flight.flight_id().key())
            if self._path is not None:
                _save_keys(self._path, self._keys)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._keys)


def _load_keys(path: Path) -> set[str]:
    try:
        loaded: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise UploadedFlightsError(
            f"Failed to load uploaded flights from {path}"
        ) from exc
    if loaded is None:
        return set()
    if not isinstance(loaded, dict) or not isinstance(loaded.get("flights"), list):
        raise UploadedFlightsError(f"{path} must hold a 'flights' list")
    return {str(key) for key in loaded["flights"]}


def _save_keys(path: Path, keys: set[str]) -> None:
    text: str = yaml.safe_dump(
        {"flights": sorted(keys)}, sort_keys=False, default_flow_style=False
    )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path: Path = path.with_name(f".{path.name}.tmp.{os.getpid()}")
        with tmp_path.open("w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except OSError as exc:
        raise UploadedFlightsError(
            f"Failed to save uploaded flights to {path}"
        ) from exc
