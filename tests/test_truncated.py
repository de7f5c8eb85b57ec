import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from timingrecovery.stats import Stats
from timingrecovery.truncated import Range, Truncated, central_range


def test_sorts_initial_values():
    assert Truncated([4, 3, 1, 5, 2], 1).truncated() == [1, 2, 3, 4, 5]


def test_sorts_later_values():
    t = Truncated([4, 5, 2], 1)
    assert t.truncated() == [2, 4, 5]
    t.add(3)
    assert t.truncated() == [2, 3, 4, 5]
    t.add(1)
    assert t.truncated() == [1, 2, 3, 4, 5]


# (inliers, mean) after adding 1, 2, ... 15 to an empty estimator
DEFAULT_TRIMMING = [
    ([1], 1),
    ([2], 2),  # 1 left over; mod 4 == 1 so the extra goes to the head
    ([2, 3], 1 + 3 / 2),
    ([2, 3], 1 + 3 / 2),  # 2 left over; split evenly
    ([2, 3, 4], 1 + 4 / 2),
    ([2, 3, 4], 1 + 4 / 2),  # 3 left over; mod 4 == 3 so the extra goes to the tail
    ([2, 3, 4, 5], 1 + 5 / 2),
    ([3, 4, 5, 6], 2 + 5 / 2),
    ([3, 4, 5, 6, 7], 2 + 6 / 2),
    ([4, 5, 6, 7, 8], 3 + 6 / 2),
    ([4, 5, 6, 7, 8, 9], 3 + 7 / 2),
    ([4, 5, 6, 7, 8, 9], 3 + 7 / 2),
    ([4, 5, 6, 7, 8, 9, 10], 3 + 8 / 2),
    ([4, 5, 6, 7, 8, 9, 10], 3 + 8 / 2),
    ([4, 5, 6, 7, 8, 9, 10, 11], 3 + 9 / 2),
]


def test_default_keeps_central_half():
    t = Truncated()
    assert t.truncated() == []
    for value, (inliers, mean) in enumerate(DEFAULT_TRIMMING, start=1):
        t.add(value)
        assert t.truncated() == inliers
        assert t.stats.count == len(inliers)
        assert t.stats.mean == pytest.approx(mean)


def test_central_range_alternates_extra_sample():
    assert central_range(0, 0.5) == Range(0, 0)
    assert central_range(2, 0.5) == Range(1, 2)
    assert central_range(6, 0.5) == Range(1, 4)
    assert central_range(10, 0.5) == Range(3, 8)


@pytest.mark.parametrize("fraction", [0.05, 0.25, 0.5, 0.8, 1.0])
def test_incremental_stats_match_fresh_computation(fraction: float) -> None:
    rng = np.random.default_rng(42)
    t = Truncated(central_fraction=fraction)
    values = rng.normal(loc=5000.0, scale=300.0, size=60)
    for value in values:
        t.add(value)
        fresh = Stats(t.truncated())
        assert t.stats.count == fresh.count
        assert t.stats.mean == pytest.approx(fresh.mean, rel=1e-9)
        assert t.stats.variance == pytest.approx(fresh.variance, rel=1e-6, abs=1e-6)


def test_duplicates_and_initial_values_are_tracked():
    t = Truncated([5, 5, 1, 9])
    for value in (5, 5, 1, 9, 5):
        t.add(value)
        assert t.stats.mean == pytest.approx(Stats(t.truncated()).mean)
    assert list(t) == sorted([5, 5, 1, 9, 5, 5, 1, 9, 5])


def test_full_stats_cover_every_sample():
    t = Truncated([10, 1, 100])
    t.add(1000)
    assert t.full_stats.count == 4
    assert t.full_stats.mean == pytest.approx((10 + 1 + 100 + 1000) / 4)
    assert len(t) == 4


def test_truncated_reflects_live_state():
    t = Truncated([1, 2, 3], 1)
    first = t.truncated()
    t.add(4)
    assert first == [1, 2, 3]
    assert t.truncated() == [1, 2, 3, 4]


@pytest.mark.parametrize(
    "requested, expected",
    [(0.0, 0.05), (-0.5, 0.5), (2.0, 1.0), (0.3, 0.3)],
)
def test_central_fraction_is_clamped(requested: float, expected: float) -> None:
    assert Truncated(central_fraction=requested).central_fraction == expected
