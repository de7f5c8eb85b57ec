"""Tunable defaults used by the timing estimators.

The values in this module configure how aggressively samples are trimmed,
how long externally supplied expectations are blended in and how much slack
is allowed when an observed gap is split into several missed cycles.
Centralising them keeps the estimators free of magic numbers.
"""

from __future__ import annotations

# ─── Trimmed statistics ─────────────────────────────────────────────────────

# Fraction of the sorted samples kept as inliers.  ``0.5`` keeps the central
# half (an interquartile mean), discarding a quarter at each end.
DEFAULT_CENTRAL_FRACTION: float = 0.5

# Bounds applied to any requested central fraction.  Below the minimum the
# inlier window would be too narrow to be meaningful.
MIN_CENTRAL_FRACTION: float = 0.05
MAX_CENTRAL_FRACTION: float = 1.0

# ─── Timing recovery ────────────────────────────────────────────────────────

# While an estimator holds fewer inlier samples than this, an expected
# period/duration (if supplied) is counted as one extra sample.  Once
# enough real samples have accrued the expectation is ignored.
EXPECTED_MAX_SAMPLES: int = 4

# Smallest relative distance from an integer multiple of the current period
# for a long gap to be treated as several missed cycles.  The effective
# tolerance grows with the relative standard deviation of the periods.
MIN_MULTIPLE_TOLERANCE: float = 0.1

# ─── Events ─────────────────────────────────────────────────────────────────

EVENT_START: str = "start"
EVENT_STOP: str = "stop"
EVENT_TYPES: tuple[str, ...] = (EVENT_START, EVENT_STOP)

__all__ = [
    "DEFAULT_CENTRAL_FRACTION",
    "MIN_CENTRAL_FRACTION",
    "MAX_CENTRAL_FRACTION",
    "EXPECTED_MAX_SAMPLES",
    "MIN_MULTIPLE_TOLERANCE",
    "EVENT_START",
    "EVENT_STOP",
    "EVENT_TYPES",
]
