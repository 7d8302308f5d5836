################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Merge raw telemetry samples into a time-indexed snapshot."""

from __future__ import annotations

import bisect
import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable
from typing import Iterator
from typing import Mapping
from typing import Optional

from oasis_logbook.telemetry.telemetry_types import TelemetrySample


_LOG: logging.Logger = logging.getLogger(__name__)

# Field mapping of one timestamp group
FieldRecord = Mapping[str, TelemetrySample]


@dataclass(frozen=True)
class MergeConflict:
    """Two samples that collided on the same (timestamp, field_code) pair.

    Attributes:
        timestamp: Shared timestamp in epoch milliseconds
        field_code: Shared field code
        kept: Sample retained in the snapshot
        discarded: Sample dropped from the snapshot
    """

    timestamp: int
    field_code: str
    kept: TelemetrySample
    discarded: TelemetrySample

    def describe(self) -> str:
        """Return a one-line description of the conflict."""
        return (
            f"Merge conflict at {self.timestamp} for '{self.field_code}': "
            f"kept {self.kept.value!r}, discarded {self.discarded.value!r}"
        )


class MergeDiagnostics:
    """Collects merge conflicts reported while building a snapshot."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._conflicts: list[MergeConflict] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._conflicts)

    def report(self, conflict: MergeConflict) -> None:
        with self._lock:
            self._conflicts.append(conflict)

    def conflicts(self) -> tuple[MergeConflict, ...]:
        with self._lock:
            return tuple(self._conflicts)


class TimeIndex:
    """Immutable mapping of timestamp to the samples observed at that time.

    Timestamps iterate in strictly increasing order. Each timestamp maps to a
    read-only mapping of field code to the surviving sample.
    """

    def __init__(
        self,
        records: Mapping[int, Mapping[str, TelemetrySample]],
        conflicts: Iterable[MergeConflict] = (),
    ) -> None:
        timestamps: list[int] = sorted(records.keys())
        self._timestamps: tuple[int, ...] = tuple(timestamps)
        self._records: Mapping[int, FieldRecord] = MappingProxyType(
            {t: MappingProxyType(dict(records[t])) for t in timestamps}
        )
        self._conflicts: tuple[MergeConflict, ...] = tuple(conflicts)

    def __len__(self) -> int:
        return len(self._timestamps)

    def __iter__(self) -> Iterator[int]:
        return iter(self._timestamps)

    def __contains__(self, timestamp: object) -> bool:
        return timestamp in self._records

    def __getitem__(self, timestamp: int) -> FieldRecord:
        return self._records[timestamp]

    def __repr__(self) -> str:
        return (
            f"TimeIndex(timestamps={len(self._timestamps)}, "
            f"conflicts={len(self._conflicts)})"
        )

    @property
    def timestamps(self) -> tuple[int, ...]:
        """Return the timestamps in increasing order."""
        return self._timestamps

    @property
    def conflicts(self) -> tuple[MergeConflict, ...]:
        """Return the conflicts resolved while merging."""
        return self._conflicts

    def is_empty(self) -> bool:
        return not self._timestamps

    def items(self) -> Iterator[tuple[int, FieldRecord]]:
        """Iterate (timestamp, record) pairs in increasing time order."""
        for timestamp in self._timestamps:
            yield timestamp, self._records[timestamp]

    def sub_range(self, start_ms: int, end_ms: int) -> TimeIndex:
        """Return the part of the index within [start_ms, end_ms]."""
        lo: int = bisect.bisect_left(self._timestamps, start_ms)
        hi: int = bisect.bisect_right(self._timestamps, end_ms)
        return TimeIndex(
            {t: self._records[t] for t in self._timestamps[lo:hi]},
            [c for c in self._conflicts if start_ms <= c.timestamp <= end_ms],
        )


def build_time_index(
    samples: Iterable[TelemetrySample],
    diagnostics: Optional[MergeDiagnostics] = None,
) -> TimeIndex:
    """Group samples by timestamp, then by field code.

    Samples are stable-sorted by timestamp so ties keep their input order.
    When two samples share a (timestamp, field_code) pair the first one wins;
    the collision is logged and reported to the diagnostics sink.

    Raises:
        ValueError: If an element is not a TelemetrySample
    """
    ordered: list[TelemetrySample] = list(samples)
    for sample in ordered:
        if not isinstance(sample, TelemetrySample):
            raise ValueError(f"Expected TelemetrySample, got {type(sample).__name__}")
    ordered.sort(key=lambda sample: sample.timestamp)

    records: dict[int, dict[str, TelemetrySample]] = {}
    conflicts: list[MergeConflict] = []

    for sample in ordered:
        group: dict[str, TelemetrySample] = records.setdefault(sample.timestamp, {})
        kept: Optional[TelemetrySample] = group.get(sample.field_code)
        if kept is None:
            group[sample.field_code] = sample
            continue

        conflict: MergeConflict = MergeConflict(
            timestamp=sample.timestamp,
            field_code=sample.field_code,
            kept=kept,
            discarded=sample,
        )
        conflicts.append(conflict)
        _LOG.warning(conflict.describe())
        if diagnostics is not None:
            diagnostics.report(conflict)

    _LOG.debug(
        "Merged %d samples into %d timestamps (%d conflicts)",
        len(ordered),
        len(records),
        len(conflicts),
    )

    return TimeIndex(records, conflicts)
