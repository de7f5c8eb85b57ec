"""Synthetic start/stop schedules for exercising the estimators.

:func:`events_from_timings` turns an explicit list of offsets into events,
which is handy for reproducing a particular schedule exactly.
:func:`simulate_events` produces a noisy periodic schedule with jittered
edges and randomly dropped cycles, mimicking a beep detected in noise.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from .events import Event, start as start_event, stop as stop_event


def events_from_timings(
    timings: Sequence[float],
    start: float = 0.0,
    *,
    initial_start: bool = True,
) -> list[Event]:
    """Build events from alternating duration/period offsets.

    ``timings`` is read as ``[duration, period, duration, period, ...]``:

    * ``[]`` gives a single start,
    * ``[d]`` gives start, stop,
    * ``[d, p]`` gives start, stop, start,
    * ``[d, p, d]`` gives start, stop, start, stop, and so on.

    Parameters
    ----------
    timings:
        Offsets alternating between a duration and a period.
    start:
        Timestamp of the first start.
    initial_start:
        When ``False`` the start at ``start`` is assumed to have been emitted
        already (e.g. by a previous call) and is omitted.
    """

    events: list[Event] = []
    last_start = float(start)
    if initial_start:
        events.append(start_event(last_start))
    for i in range(-1, len(timings), 2):
        if i > 0:
            last_start += float(timings[i])
            events.append(start_event(last_start))
        if i + 1 < len(timings):
            events.append(stop_event(last_start + float(timings[i + 1])))
    return events


def simulate_events(
    period: float,
    duration: float,
    cycles: int,
    *,
    jitter: float = 0.0,
    duration_jitter: Optional[float] = None,
    drop_rate: float = 0.0,
    start: float = 0.0,
    rng: Optional[np.random.Generator] = None,
) -> list[Event]:
    """Return a noisy periodic start/stop schedule.

    Cycle ``k`` nominally starts at ``start + k * period`` and stops
    ``duration`` later.  Gaussian noise with standard deviation ``jitter`` is
    added to every start and noise with ``duration_jitter`` (defaulting to
    ``jitter``) to every duration; durations never go negative.  Each cycle
    after the first is dropped with probability ``drop_rate``, removing both
    of its edges.

    Parameters
    ----------
    period:
        Nominal time between starts, must be positive.
    duration:
        Nominal time from a start to its stop, must not be negative.
    cycles:
        Number of cycles to generate before dropping.
    jitter:
        Standard deviation of the start time noise.
    duration_jitter:
        Standard deviation of the duration noise.
    drop_rate:
        Probability in ``[0, 1)`` of dropping a cycle.
    start:
        Nominal timestamp of the first start.
    rng:
        Random generator; a fresh :func:`numpy.random.default_rng` is used
        when omitted.

    Returns
    -------
    list[Event]
        Events in cycle order.
    """

    if period <= 0:
        raise ValueError(f"period must be positive, got {period}")
    if duration < 0:
        raise ValueError(f"duration must not be negative, got {duration}")
    if cycles < 0:
        raise ValueError(f"cycles must not be negative, got {cycles}")
    if not 0.0 <= drop_rate < 1.0:
        raise ValueError(f"drop_rate must be in [0, 1), got {drop_rate}")
    if duration_jitter is None:
        duration_jitter = jitter
    if jitter < 0 or duration_jitter < 0:
        raise ValueError("jitter must not be negative")

    if rng is None:
        rng = np.random.default_rng()

    nominal = start + period * np.arange(cycles, dtype=float)
    starts = nominal + rng.normal(0.0, jitter, size=cycles)
    durations = np.clip(duration + rng.normal(0.0, duration_jitter, size=cycles), 0.0, None)
    keep = rng.random(cycles) >= drop_rate
    if cycles:
        keep[0] = True

    events: list[Event] = []
    for begin, length in zip(starts[keep], durations[keep]):
        events.append(start_event(float(begin)))
        events.append(stop_event(float(begin + length)))
    return events


__all__ = ["events_from_timings", "simulate_events"]
