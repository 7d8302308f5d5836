################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Logbook export parameters and YAML loading."""

from __future__ import annotations

from oasis_logbook.config.logbook_config import LogbookConfigError
from oasis_logbook.config.logbook_config import load_logbook_params
from oasis_logbook.config.logbook_params import LogbookParams
from oasis_logbook.config.logbook_params import LogbookParamsError


__all__ = [
    "LogbookConfigError",
    "LogbookParams",
    "LogbookParamsError",
    "load_logbook_params",
]
