"""Period and duration recovery from a noisy start/stop edge stream.

:class:`TimingRecovery` consumes :class:`~timingrecovery.events.Event`
values one at a time.  The time between consecutive ``start`` edges feeds a
trimmed period estimator and the time from a ``start`` to the following
``stop`` feeds a trimmed duration estimator.  A gap close to an integer
multiple of the current period is assumed to hide missed cycles and is split
into that many equal period samples.  Until an estimator holds a few inlier
samples an externally supplied expectation is averaged in as one extra
sample.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Iterable, Optional

from .constants import (
    DEFAULT_CENTRAL_FRACTION,
    EVENT_START,
    EVENT_STOP,
    EXPECTED_MAX_SAMPLES,
    MIN_MULTIPLE_TOLERANCE,
)
from .events import Event, EventLike, as_event
from .stats import StatsView
from .truncated import Truncated

logger = logging.getLogger(__name__)

Listener = Callable[["TimingRecovery"], None]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class TimingRecovery:
    """Estimate period, duration and the next edge of a periodic process.

    Parameters
    ----------
    events:
        Initial events, processed in order.
    expected_period:
        Optional prior for the period, blended in while few samples exist.
    expected_duration:
        Optional prior for the duration, blended in while few samples exist.
    central_fraction:
        Inlier fraction of the period and duration estimators.
    seed_sample_limit:
        Inlier sample count from which the expectations are ignored.
    min_multiple_tolerance:
        Lower bound of the relative slack allowed when splitting a long gap
        into several missed periods.
    """

    def __init__(
        self,
        events: Iterable[EventLike] = (),
        expected_period: Optional[float] = None,
        expected_duration: Optional[float] = None,
        *,
        central_fraction: float = DEFAULT_CENTRAL_FRACTION,
        seed_sample_limit: int = EXPECTED_MAX_SAMPLES,
        min_multiple_tolerance: float = MIN_MULTIPLE_TOLERANCE,
    ) -> None:
        self.expected_period: Optional[float] = expected_period
        self.expected_duration: Optional[float] = expected_duration
        self.central_fraction = central_fraction
        self.seed_sample_limit = seed_sample_limit
        self.min_multiple_tolerance = min_multiple_tolerance
        self._listeners: list[Listener] = []
        self._reset(events)

    # --------------------------------------------------------------
    def _reset(self, events: Iterable[EventLike]) -> None:
        self._last_start: Optional[float] = None
        self._periods = Truncated(central_fraction=self.central_fraction)
        self._durations = Truncated(central_fraction=self.central_fraction)
        self._events: list[Event] = [as_event(event) for event in events]
        for event in self._events:
            self._process_event(event)

    def _process_event(self, event: Event) -> None:
        if event.is_start:
            if self._last_start is not None:
                self._add_period(event.date - self._last_start)
            self._last_start = event.date
        elif event.is_stop:
            if self._last_start is not None:
                self._durations.add(event.date - self._last_start)

    def _add_period(self, period: float) -> None:
        expected = self.period
        multiplier = period / expected if expected else math.nan
        if math.isfinite(multiplier):
            multiple = max(1, _round_half_up(multiplier))
            # no spread yet: nan tolerance keeps the gap as one sample
            stddev = self._periods.stats.stddev
            tolerance = math.nan if math.isnan(stddev) else max(
                stddev / expected, self.min_multiple_tolerance
            )
            if abs(multiple - multiplier) <= tolerance:
                synthetic = period / multiple
                if multiple > 1:
                    logger.debug(
                        "Split gap %.3f into %d periods of %.3f", period, multiple, synthetic
                    )
                for _ in range(multiple):
                    self._periods.add(synthetic)
                return
            logger.debug(
                "Gap %.3f is %.3f periods of %.3f; keeping it as a single sample",
                period,
                multiplier,
                expected,
            )
        self._periods.add(period)

    # --------------------------------------------------------------
    def add_event(self, event: EventLike) -> None:
        """Append ``event`` to the log and incorporate it."""
        ours = as_event(event)
        self._events.append(ours)
        self._process_event(ours)
        self._notify()

    def set_expected(
        self,
        period: Optional[float] = None,
        duration: Optional[float] = None,
    ) -> None:
        """Replace the expected period and duration.

        Already processed events are not re-evaluated.
        """
        self.expected_period = period
        self.expected_duration = duration
        self._notify()

    def reset(self, events: Iterable[EventLike] = ()) -> None:
        """Discard all derived state and replay ``events`` from scratch."""
        self._reset(events)
        logger.debug("Reset with %d events", len(self._events))
        self._notify()

    # --------------------------------------------------------------
    def add_listener(self, listener: Listener) -> Listener:
        """Call ``listener(self)`` after every mutation.

        Returns ``listener`` so the method can be used as a decorator.
        """
        self._listeners.append(listener)
        return listener

    def remove_listener(self, listener: Listener) -> None:
        """Unregister ``listener``; raises ``ValueError`` if it was never added."""
        self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # --------------------------------------------------------------
    def _blended_mean(self, estimator: Truncated, expected: Optional[float]) -> float:
        stats = estimator.stats
        if expected is not None and stats.count < self.seed_sample_limit:
            return stats.clone().add(expected).mean
        return stats.mean

    @property
    def period(self) -> float:
        """Current period estimate, ``nan`` when unknown."""
        return self._blended_mean(self._periods, self.expected_period)

    @property
    def duration(self) -> float:
        """Current duration estimate, ``nan`` when unknown."""
        return self._blended_mean(self._durations, self.expected_duration)

    @property
    def next(self) -> Optional[Event]:
        """Predicted next edge, or ``None`` when there is not enough data."""
        if not self._events or self._last_start is None:
            return None
        previous = self._events[-1]
        if previous.is_stop:
            period = self.period
            if math.isfinite(period):
                return Event(EVENT_START, self._last_start + period)
        elif previous.is_start:
            duration = self.duration
            if math.isfinite(duration):
                return Event(EVENT_STOP, self._last_start + duration)
        return None

    @property
    def last_start(self) -> Optional[float]:
        return self._last_start

    @property
    def events(self) -> tuple[Event, ...]:
        return tuple(self._events)

    @property
    def period_stats(self) -> StatsView:
        """Inlier statistics of the recorded period samples."""
        return self._periods.stats

    @property
    def duration_stats(self) -> StatsView:
        """Inlier statistics of the recorded duration samples."""
        return self._durations.stats


__all__ = ["Listener", "TimingRecovery"]
