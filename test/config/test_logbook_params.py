################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for logbook parameter defaults and validation."""

from __future__ import annotations

import dataclasses
from typing import Any

import pytest

from oasis_logbook.config.logbook_params import LogbookParams
from oasis_logbook.config.logbook_params import LogbookParamsError


def _with_csv(**overrides: Any) -> LogbookParams:
    """Return defaults with CSV overrides."""
    defaults: LogbookParams = LogbookParams.defaults()
    return defaults.replace(csv=dataclasses.replace(defaults.csv, **overrides))


def _with_upload(**overrides: Any) -> LogbookParams:
    """Return defaults with upload overrides."""
    defaults: LogbookParams = LogbookParams.defaults()
    return defaults.replace(upload=dataclasses.replace(defaults.upload, **overrides))


def test_defaults_validate() -> None:
    """Default parameters should pass validation."""
    params: LogbookParams = LogbookParams.defaults()
    params.validate()

    assert params.segmentation.gap_threshold_ms == 10000
    assert params.csv.charset == "utf-8"
    assert params.csv.column_order == "alphabetical"
    assert params.csv.tz() is None
    assert not params.upload.is_configured()


def test_as_nested_dict() -> None:
    """The nested dict should mirror the parameter tree."""
    nested: dict[str, Any] = LogbookParams.defaults().as_nested_dict()
    assert nested["segmentation"] == {"gap_threshold_ms": 10000}
    assert nested["csv"]["field_names"] == {}
    assert nested["upload"]["field_codes"][0] == "latitude"
    assert isinstance(nested["upload"]["field_codes"], list)


def test_invalid_gap_threshold() -> None:
    """The gap threshold must be a positive int."""
    defaults: LogbookParams = LogbookParams.defaults()
    for value in (0, -5, 1.5, True, "10"):
        params: LogbookParams = defaults.replace(
            segmentation=dataclasses.replace(
                defaults.segmentation, gap_threshold_ms=value
            )
        )
        with pytest.raises(LogbookParamsError):
            params.validate()


@pytest.mark.parametrize(
    "overrides",
    [
        {"charset": "no-such-charset"},
        {"charset": ""},
        {"column_order": "random"},
        {"column_order": 3},
        {"line_terminator": "\r"},
        {"time_zone": ""},
        {"time_zone": "Not/A_Zone"},
        {"field_names": {"alt": ""}},
    ],
)
def test_invalid_csv_params(overrides: dict[str, Any]) -> None:
    """Invalid CSV parameters should be rejected."""
    with pytest.raises(LogbookParamsError):
        _with_csv(**overrides).validate()


@pytest.mark.parametrize(
    "overrides",
    [
        {"timeout_sec": 0},
        {"timeout_sec": "fast"},
        {"uploaded_folder": ""},
        {"field_codes": ()},
        {"field_codes": ("alt", "alt")},
        {"field_codes": ("alt", "")},
    ],
)
def test_invalid_upload_params(overrides: dict[str, Any]) -> None:
    """Invalid upload parameters should be rejected."""
    with pytest.raises(LogbookParamsError):
        _with_upload(**overrides).validate()


def test_upload_is_configured() -> None:
    """Upload needs an endpoint and a login."""
    assert not _with_upload(server_url="https://logbook.invalid").upload.is_configured()
    assert _with_upload(
        server_url="https://logbook.invalid", login="pilot"
    ).upload.is_configured()


def test_field_codes_coerced_to_tuple() -> None:
    """Upload field codes should be stored as a tuple."""
    params: LogbookParams = _with_upload(field_codes=["alt", "speed"])
    assert params.upload.field_codes == ("alt", "speed")
