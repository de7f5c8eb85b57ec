"""Trimmed (outlier resistant) running statistics.

:class:`Truncated` keeps every sample in ascending order and maintains a
:class:`~timingrecovery.stats.Stats` over only the central part of that
ordering.  When a sample is inserted the inlier window moves by at most a
couple of positions, so the central statistics are patched by removing the
values that left the window and adding the values that entered it instead of
being recomputed.
"""

from __future__ import annotations

import math
from bisect import bisect_right
from typing import Iterable, Iterator, NamedTuple

from .constants import (
    DEFAULT_CENTRAL_FRACTION,
    MAX_CENTRAL_FRACTION,
    MIN_CENTRAL_FRACTION,
)
from .stats import Stats, StatsView


class Range(NamedTuple):
    """Half-open index range ``[start, end)``."""

    start: int
    end: int


def central_range(length: int, central_fraction: float) -> Range:
    """Return the inlier index range for ``length`` sorted samples.

    ``ceil(length * central_fraction)`` samples are kept.  The leftover count
    is split between head and tail; an odd leftover puts its extra sample at
    the head when ``leftover % 4 == 1`` and at the tail otherwise, so the
    window alternates sides as the sample set grows.
    """

    leftover = length - math.ceil(length * central_fraction)
    split, extra = divmod(leftover, 2)
    extra_to_head = leftover % 4 == 1
    below = split + (extra if extra_to_head else 0)
    above = split + (0 if extra_to_head else extra)
    return Range(below, length - above)


class Truncated:
    """Growing sorted sample set with statistics over its central values.

    Parameters
    ----------
    values:
        Optional initial samples in any order.
    central_fraction:
        Fraction of samples treated as inliers.  The absolute value is
        clamped to ``[MIN_CENTRAL_FRACTION, MAX_CENTRAL_FRACTION]``.
    """

    def __init__(
        self,
        values: Iterable[float] = (),
        central_fraction: float = DEFAULT_CENTRAL_FRACTION,
    ) -> None:
        self._values: list[float] = sorted(float(v) for v in values)
        self._all_stats = Stats(self._values)
        self._central_fraction: float = min(
            MAX_CENTRAL_FRACTION, max(MIN_CENTRAL_FRACTION, abs(central_fraction))
        )
        self._central_stats = Stats(self.truncated())

    @property
    def central_fraction(self) -> float:
        return self._central_fraction

    def central_range(self) -> Range:
        """Return the current inlier index range."""
        return central_range(len(self._values), self._central_fraction)

    def add(self, value: float) -> None:
        """Insert ``value`` and update the inlier statistics."""
        value = float(value)
        start, end = self.central_range()
        index = bisect_right(self._values, value)
        self._values.insert(index, value)
        self._all_stats.add(value)

        # Shift the previous window onto the new indices.
        if index < start:
            start += 1
            end += 1
        elif index < end:
            self._central_stats.add(value)
            end += 1
        self._adjust_central_stats(Range(start, end))

    def _adjust_central_stats(self, previous: Range) -> None:
        current = self.central_range()
        values = self._values
        stats = self._central_stats

        # head moved up: values below the new start are no longer inliers
        for i in range(previous.start, current.start):
            stats.remove(values[i])
        # head moved down
        for i in range(current.start, previous.start):
            stats.add(values[i])
        # tail moved down
        for i in range(current.end, previous.end):
            stats.remove(values[i])
        # tail moved up
        for i in range(previous.end, current.end):
            stats.add(values[i])

    def truncated(self) -> list[float]:
        """Return the current inlier values in ascending order."""
        start, end = self.central_range()
        return self._values[start:end]

    @property
    def stats(self) -> StatsView:
        """Statistics over the inlier values."""
        return self._central_stats.readonly()

    @property
    def full_stats(self) -> StatsView:
        """Statistics over every sample."""
        return self._all_stats.readonly()

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(list(self._values))

    def __repr__(self) -> str:
        return (
            f"Truncated(n={len(self._values)}, "
            f"central_fraction={self._central_fraction}, stats={self._central_stats!r})"
        )


__all__ = ["Range", "Truncated", "central_range"]
