import math
import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from timingrecovery.stats import IllegalStateError, Stats, StatsView


def test_empty_stats_are_nan():
    s = Stats()
    assert s.count == 0
    assert math.isnan(s.mean)
    assert math.isnan(s.variance)
    assert math.isnan(s.stddev)


def test_single_sample():
    s = Stats()
    s.add(10)
    assert s.count == 1
    assert s.mean == 10
    assert s.variance == 0
    assert s.stddev == 0


def test_two_samples():
    s = Stats([10])
    s.add(20)
    assert s.count == 2
    assert s.mean == 15
    assert s.variance == 25
    assert s.stddev == 5


def test_eight_samples():
    s = Stats([2, 4, 4, 4, 5, 5, 7, 9])
    assert s.count == 8
    assert s.mean == pytest.approx(5)
    assert s.variance == pytest.approx(4)
    assert s.stddev == pytest.approx(2)


def test_removals_undo_additions():
    s6 = Stats([2, 4, 4, 5, 5, 9])
    s7 = s6.clone()
    s7.add(4)
    s = s7.clone()
    s.add(7)

    assert s6.count == 6
    assert s6.mean == pytest.approx(4 + 5 / 6)
    assert s6.variance == pytest.approx(4 + 17 / 36)
    assert s7.count == 7
    assert s7.mean == pytest.approx(4 + 5 / 7)
    assert s7.variance == pytest.approx(3 + 45 / 49)
    assert s.mean == pytest.approx(5)

    s.remove(7)
    assert s.count == 7
    assert s.mean == pytest.approx(s7.mean)
    assert s.variance == pytest.approx(s7.variance)

    s.remove(4)
    assert s.count == 6
    assert s.mean == pytest.approx(s6.mean)
    assert s.stddev == pytest.approx(s6.stddev)


def test_remove_matches_fresh_stats_for_any_position():
    rng = np.random.default_rng(7)
    values = rng.normal(loc=100.0, scale=15.0, size=40).tolist()
    for index in (0, 13, 39):
        s = Stats(values)
        s.remove(values[index])
        rest = values[:index] + values[index + 1 :]
        fresh = Stats(rest)
        assert s.count == fresh.count
        assert s.mean == pytest.approx(fresh.mean, rel=1e-9)
        assert s.variance == pytest.approx(fresh.variance, rel=1e-9)


def test_remove_last_sample_resets_exactly():
    s = Stats([3.3])
    s.remove(3.3)
    assert s.count == 0
    assert math.isnan(s.mean)
    s.add(1.0)
    assert s.mean == 1.0
    assert s.variance == 0.0


def test_remove_from_empty_raises():
    with pytest.raises(IllegalStateError):
        Stats().remove(1.0)


def test_clone_is_independent():
    original = Stats([1, 2, 3])
    copy = original.clone()
    copy.add(100)
    assert original.count == 3
    assert original.mean == 2
    assert copy.count == 4


def test_readonly_view_tracks_owner():
    s = Stats([1, 3])
    view = s.readonly()
    assert isinstance(view, StatsView)
    assert view.mean == 2
    s.add(5)
    assert view.count == 3
    assert view.mean == 3
    assert not hasattr(view, "add")
    clone = view.clone()
    clone.add(100)
    assert s.count == 3
