"""Online mean and variance with support for removing samples.

:class:`Stats` implements Welford's single-pass algorithm.  Besides the
usual incremental :meth:`Stats.add` it provides the exact inverse,
:meth:`Stats.remove`, which lets a caller slide a window over a sorted
sample set without keeping the window's values around.
"""

from __future__ import annotations

import math
from typing import Iterable


class IllegalStateError(RuntimeError):
    """Raised when an operation is invalid for the current state."""


class Stats:
    """Running count, mean and population variance.

    Parameters
    ----------
    values:
        Optional initial samples, added in iteration order.
    """

    def __init__(self, values: Iterable[float] = ()) -> None:
        self._n: int = 0
        self._a: float = 0.0
        self._q: float = 0.0
        for value in values:
            self.add(value)

    def clone(self) -> "Stats":
        """Return an independent copy of this estimator."""
        clone = Stats()
        clone._n = self._n
        clone._a = self._a
        clone._q = self._q
        return clone

    def readonly(self) -> "StatsView":
        """Return a live, read-only view of this estimator."""
        return StatsView(self)

    def add(self, value: float) -> "Stats":
        """Add ``value`` to the sample set."""
        value = float(value)
        self._n += 1
        # A_k = A_k-1 + (x_k - A_k-1) / k
        delta = value - self._a
        self._a += delta / self._n
        # Q_k = Q_k-1 + (x_k - A_k-1)(x_k - A_k)
        self._q += delta * (value - self._a)
        return self

    def remove(self, value: float) -> "Stats":
        """Remove a previously added ``value`` from the sample set.

        Raises
        ------
        IllegalStateError
            If there are no samples to remove.
        """
        if self._n == 0:
            raise IllegalStateError("unable to remove value from no values")

        value = float(value)
        self._n -= 1
        if self._n == 0:
            self._a = 0.0
            self._q = 0.0
            return self

        # A_k-1 = A_k - (x_k - A_k) / (k - 1)
        new_delta = value - self._a
        self._a -= new_delta / self._n
        # Q_k-1 = Q_k - (x_k - A_k-1)(x_k - A_k)
        self._q -= (value - self._a) * new_delta
        return self

    @property
    def count(self) -> int:
        return self._n

    @property
    def mean(self) -> float:
        if self._n < 1:
            return math.nan
        return self._a

    @property
    def variance(self) -> float:
        if self._n < 1:
            return math.nan
        return self._q / self._n

    @property
    def stddev(self) -> float:
        variance = self.variance
        if math.isnan(variance):
            return math.nan
        # rounding in remove() can leave a tiny negative residue
        return math.sqrt(max(variance, 0.0))

    def __repr__(self) -> str:
        return f"Stats(count={self.count}, mean={self.mean!r}, variance={self.variance!r})"


class StatsView:
    """Read-only view delegating every accessor to a live :class:`Stats`."""

    __slots__ = ("_stats",)

    def __init__(self, stats: Stats) -> None:
        self._stats = stats

    @property
    def count(self) -> int:
        return self._stats.count

    @property
    def mean(self) -> float:
        return self._stats.mean

    @property
    def variance(self) -> float:
        return self._stats.variance

    @property
    def stddev(self) -> float:
        return self._stats.stddev

    def clone(self) -> Stats:
        """Return an independent, mutable copy of the viewed estimator."""
        return self._stats.clone()

    def __repr__(self) -> str:
        return f"StatsView({self._stats!r})"


__all__ = ["IllegalStateError", "Stats", "StatsView"]
