################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""YAML loading of logbook export configuration."""

from __future__ import annotations

import dataclasses
import logging
import os
from pathlib import Path
from typing import Any
from typing import Optional

import yaml

from oasis_logbook.config.logbook_params import CsvParams
from oasis_logbook.config.logbook_params import LogbookParams
from oasis_logbook.config.logbook_params import LogbookParamsError
from oasis_logbook.config.logbook_params import UploadParams


_LOG: logging.Logger = logging.getLogger(__name__)


class LogbookConfigError(Exception):
    """Raised when a logbook configuration file cannot be used."""


def params_from_dict(data: dict[str, Any]) -> LogbookParams:
    """Build validated parameters from a nested mapping.

    Missing namespaces and keys keep their defaults. Unknown keys are
    rejected so typos do not silently fall back to defaults.
    """
    root: dict[str, Any] = _require_mapping(data, "config")
    _reject_unknown("config", root, {"segmentation", "csv", "upload"})

    defaults: LogbookParams = LogbookParams.defaults()
    params: LogbookParams = defaults.replace(
        segmentation=_namespace(
            "segmentation", root.get("segmentation"), defaults.segmentation
        ),
        csv=_namespace("csv", root.get("csv"), defaults.csv),
        upload=_namespace("upload", root.get("upload"), defaults.upload),
    )

    try:
        params.validate()
    except LogbookParamsError as exc:
        raise LogbookConfigError(str(exc)) from exc

    return params


def loads_params(text: str) -> LogbookParams:
    """Parse parameters from YAML text."""
    try:
        loaded: Any = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise LogbookConfigError("Invalid YAML configuration") from exc
    if loaded is None:
        loaded = {}
    return params_from_dict(loaded)


def load_logbook_params(path: Optional[str | os.PathLike[str]]) -> LogbookParams:
    """Load parameters from a YAML file, or return defaults when no path."""
    if path is None:
        params: LogbookParams = LogbookParams.defaults()
        params.validate()
        return params

    path_obj: Path = Path(os.fspath(path))
    try:
        text: str = path_obj.read_text(encoding="utf-8")
    except OSError as exc:
        raise LogbookConfigError(f"Failed to read config from {path_obj}") from exc

    _LOG.info("Loading logbook config from %s", path_obj)
    return loads_params(text)


def _namespace(scope: str, value: Any, default: Any) -> Any:
    """Apply a mapping of overrides to a default namespace dataclass."""
    if value is None:
        return default
    overrides: dict[str, Any] = dict(_require_mapping(value, scope))
    known: set[str] = {field.name for field in dataclasses.fields(default)}
    _reject_unknown(scope, overrides, known)
    if isinstance(default, UploadParams) and "field_codes" in overrides:
        codes: Any = overrides["field_codes"]
        if not isinstance(codes, list):
            raise LogbookConfigError("upload.field_codes must be a list")
        overrides["field_codes"] = tuple(codes)
    if isinstance(default, CsvParams) and "field_names" in overrides:
        overrides["field_names"] = dict(
            _require_mapping(overrides["field_names"], "csv.field_names")
        )
    return dataclasses.replace(default, **overrides)


def _reject_unknown(scope: str, data: dict[str, Any], known: set[str]) -> None:
    """Ensure a mapping holds only known keys."""
    unknown: set[str] = {key for key in data.keys() if key not in known}
    if unknown:
        raise LogbookConfigError(
            f"Unexpected keys in {scope}: {', '.join(sorted(map(str, unknown)))}"
        )


def _require_mapping(value: Any, name: str) -> dict[str, Any]:
    """Ensure the value is a dictionary."""
    if not isinstance(value, dict):
        raise LogbookConfigError(f"{name} must be a mapping")
    return value
