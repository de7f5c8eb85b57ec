"""Start/stop edge events consumed by :class:`~timingrecovery.recovery.TimingRecovery`."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Literal, Mapping, Union

from .constants import EVENT_START, EVENT_STOP, EVENT_TYPES

# Edge kinds produced by an upstream detector
EventType = Literal["start", "stop"]


@dataclass(frozen=True)
class Event:
    """A timestamped ``start`` or ``stop`` edge.

    ``date`` may use any time unit as long as it is used consistently,
    typically milliseconds.
    """

    type: EventType
    date: float

    def __post_init__(self) -> None:
        if self.type not in EVENT_TYPES:
            raise ValueError(f"Unknown event type: {self.type!r}")
        try:
            date = float(self.date)
        except (TypeError, ValueError):
            raise ValueError(f"Event date must be a number, got {self.date!r}") from None
        if not math.isfinite(date):
            raise ValueError(f"Event date must be finite, got {self.date!r}")
        object.__setattr__(self, "date", date)

    @property
    def is_start(self) -> bool:
        return self.type == EVENT_START

    @property
    def is_stop(self) -> bool:
        return self.type == EVENT_STOP


EventLike = Union[Event, Mapping[str, Any]]


def as_event(value: EventLike) -> Event:
    """Return ``value`` as an :class:`Event`.

    Mappings must provide ``type`` and ``date`` keys; any other keys are
    ignored.  A fresh :class:`Event` is always returned so callers never share
    instances with the event log.
    """

    if isinstance(value, Event):
        return Event(value.type, value.date)
    if isinstance(value, Mapping):
        try:
            return Event(value["type"], value["date"])
        except KeyError as exc:
            raise ValueError(f"Event mapping is missing {exc.args[0]!r}") from None
    raise ValueError(f"Cannot interpret {value!r} as an event")


def start(date: float) -> Event:
    """Shorthand for ``Event("start", date)``."""
    return Event(EVENT_START, date)


def stop(date: float) -> Event:
    """Shorthand for ``Event("stop", date)``."""
    return Event(EVENT_STOP, date)


__all__ = ["Event", "EventLike", "EventType", "as_event", "start", "stop"]
