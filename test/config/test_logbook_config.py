################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for loading logbook parameters from YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from oasis_logbook.config.logbook_config import LogbookConfigError
from oasis_logbook.config.logbook_config import load_logbook_params
from oasis_logbook.config.logbook_config import loads_params
from oasis_logbook.config.logbook_config import params_from_dict
from oasis_logbook.config.logbook_params import LogbookParams


def test_no_path_returns_defaults() -> None:
    """Without a path the defaults should be returned."""
    assert load_logbook_params(None) == LogbookParams.defaults()


def test_empty_document_returns_defaults() -> None:
    """An empty YAML document should give the defaults."""
    assert loads_params("") == LogbookParams.defaults()


def test_load_from_file(tmp_path: Path) -> None:
    """A YAML file should override selected keys."""
    path: Path = tmp_path / "logbook.yaml"
    path.write_text(
        "\n".join(
            [
                "segmentation:",
                "  gap_threshold_ms: 20000",
                "csv:",
                "  column_order: discovery",
                "  field_names:",
                "    alt: Altitude",
                "upload:",
                "  server_url: https://logbook.invalid/upload",
                "  login: pilot",
                "  field_codes: [alt, speed]",
                "",
            ]
        ),
        encoding="utf-8",
    )

    params: LogbookParams = load_logbook_params(path)

    assert params.segmentation.gap_threshold_ms == 20000
    assert params.csv.column_order == "discovery"
    assert params.csv.charset == "utf-8"
    assert params.csv.field_names == {"alt": "Altitude"}
    assert params.upload.field_codes == ("alt", "speed")
    assert params.upload.is_configured()


def test_params_from_dict_does_not_mutate_input() -> None:
    """The caller's mapping should be left untouched."""
    data: dict[str, Any] = {"upload": {"field_codes": ["alt"]}}
    params_from_dict(data)
    assert data == {"upload": {"field_codes": ["alt"]}}


@pytest.mark.parametrize(
    "data",
    [
        {"segmentaton": {}},
        {"csv": {"charst": "utf-8"}},
        {"csv": "utf-8"},
        {"csv": {"field_names": ["alt"]}},
        {"upload": {"field_codes": "alt"}},
        {"segmentation": {"gap_threshold_ms": -1}},
        [],
    ],
)
def test_invalid_config(data: Any) -> None:
    """Unknown keys, bad shapes and invalid values should be rejected."""
    with pytest.raises(LogbookConfigError):
        params_from_dict(data)


def test_invalid_yaml() -> None:
    """Unparseable YAML should be rejected."""
    with pytest.raises(LogbookConfigError):
        loads_params("csv: [unclosed")


def test_missing_file(tmp_path: Path) -> None:
    """A missing file should be rejected."""
    with pytest.raises(LogbookConfigError):
        load_logbook_params(tmp_path / "missing.yaml")
