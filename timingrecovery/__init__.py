"""Timing recovery package."""

from .events import Event, as_event
from .recovery import TimingRecovery
from .stats import IllegalStateError, Stats, StatsView
from .truncated import Truncated

__all__ = [
    "Event",
    "as_event",
    "IllegalStateError",
    "Stats",
    "StatsView",
    "TimingRecovery",
    "Truncated",
]
