################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Field catalog and CSV column ordering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable
from typing import Sequence

from oasis_logbook.processing.time_index import TimeIndex


@dataclass(frozen=True)
class FieldCatalog:
    """Field codes observed anywhere in a snapshot.

    Attributes:
        discovered: Field codes in order of first appearance
    """

    discovered: tuple[str, ...]

    def __post_init__(self) -> None:
        """Validate that codes are distinct strings."""
        if len(set(self.discovered)) != len(self.discovered):
            raise ValueError("discovered field codes must be distinct")
        for code in self.discovered:
            if not isinstance(code, str):
                raise ValueError("field codes must be strings")

    @classmethod
    def from_time_index(cls, index: TimeIndex) -> FieldCatalog:
        """Collect the distinct field codes of a snapshot."""
        seen: dict[str, None] = {}
        for _, record in index.items():
            for field_code in record:
                seen.setdefault(field_code, None)
        return cls(discovered=tuple(seen))

    def __len__(self) -> int:
        return len(self.discovered)

    def __contains__(self, field_code: object) -> bool:
        return field_code in self.discovered

    @property
    def codes(self) -> frozenset[str]:
        """Return the unordered set of field codes."""
        return frozenset(self.discovered)

    def ordered(self, order: ColumnOrder) -> tuple[str, ...]:
        """Return the field codes arranged by a column-ordering function."""
        columns: tuple[str, ...] = tuple(order(self))
        if set(columns) != self.codes or len(columns) != len(self.discovered):
            raise ValueError("column order must be a permutation of the catalog")
        return columns


# Arranges catalog field codes into CSV column order
ColumnOrder = Callable[[FieldCatalog], Sequence[str]]


def alphabetical_order(catalog: FieldCatalog) -> Sequence[str]:
    """Order columns alphabetically by field code."""
    return sorted(catalog.discovered)


def discovery_order(catalog: FieldCatalog) -> Sequence[str]:
    """Order columns by first appearance in the snapshot."""
    return catalog.discovered


COLUMN_ORDERS: dict[str, ColumnOrder] = {
    "alphabetical": alphabetical_order,
    "discovery": discovery_order,
}


def column_order_by_name(name: str) -> ColumnOrder:
    """Look up a named column ordering."""
    try:
        return COLUMN_ORDERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown column order '{name}'. Known: {', '.join(sorted(COLUMN_ORDERS))}"
        ) from None
