"""Command line front end for experimenting with :class:`TimingRecovery`.

Two sources of events are supported: a simulated noisy schedule and a
JSON-lines file (one ``{"type": ..., "date": ...}`` object per line).  Each
event is fed to a :class:`~timingrecovery.recovery.TimingRecovery` and the
running estimates are printed.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Iterable, Iterator, Optional, Sequence, TextIO

import numpy as np

from .events import Event, as_event
from .recovery import TimingRecovery
from .simulation import simulate_events


class InputError(Exception):
    """Raised for malformed event input."""


def _format(value: float) -> str:
    return f"{value:12.3f}"


def _report(recovery: TimingRecovery, events: Iterable[Event], out: TextIO) -> None:
    count = 0
    for event in events:
        recovery.add_event(event)
        count += 1
        prediction = recovery.next
        predicted = (
            f"{prediction.type:<5} {_format(prediction.date)}" if prediction else "-"
        )
        print(
            f"{event.type:<5} {_format(event.date)}  "
            f"period {_format(recovery.period)}  "
            f"duration {_format(recovery.duration)}  "
            f"next {predicted}",
            file=out,
            flush=True,
        )
    print(
        f"\n{count} events: period {recovery.period:.3f}, duration {recovery.duration:.3f}",
        file=out,
        flush=True,
    )


def read_json_lines(stream: TextIO) -> Iterator[Event]:
    """Yield events from ``stream``, skipping blank lines."""
    for lineno, line in enumerate(stream, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            yield as_event(json.loads(line))
        except (json.JSONDecodeError, ValueError) as exc:
            raise InputError(f"line {lineno}: {exc}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timingrecovery",
        description="Recover period and duration from start/stop edges.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log estimator decisions at DEBUG level.",
    )
    parser.add_argument("--expected-period", type=float, default=None)
    parser.add_argument("--expected-duration", type=float, default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    sim = sub.add_parser("simulate", help="Run a simulated noisy schedule.")
    sim.add_argument("--period", type=float, default=5000.0)
    sim.add_argument("--duration", type=float, default=1000.0)
    sim.add_argument("--cycles", type=int, default=20)
    sim.add_argument("--jitter", type=float, default=50.0)
    sim.add_argument(
        "--drop-rate",
        type=float,
        default=0.1,
        help="Probability of a cycle being missed entirely.",
    )
    sim.add_argument("--seed", type=int, default=None, help="Random seed.")

    replay = sub.add_parser("replay", help="Replay events from a JSON-lines file.")
    replay.add_argument(
        "path",
        help="File with one JSON event per line, or '-' for standard input.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    recovery = TimingRecovery(
        expected_period=args.expected_period,
        expected_duration=args.expected_duration,
    )

    if args.command == "simulate":
        try:
            events = simulate_events(
                args.period,
                args.duration,
                args.cycles,
                jitter=args.jitter,
                drop_rate=args.drop_rate,
                rng=np.random.default_rng(args.seed),
            )
        except ValueError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        _report(recovery, events, sys.stdout)
        return 0

    try:
        if args.path == "-":
            _report(recovery, read_json_lines(sys.stdin), sys.stdout)
        else:
            with open(args.path, encoding="utf-8") as stream:
                _report(recovery, read_json_lines(stream), sys.stdout)
    except InputError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


__all__ = ["InputError", "build_parser", "main", "read_json_lines"]
