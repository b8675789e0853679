#!/usr/bin/env python3
"""
Readout formatting and the console UI sink.
"""

from typing import NamedTuple, Optional, TextIO
import logging
import sys

from .geometry import Position
from .sampler import Sample

logger = logging.getLogger(__name__)


class Readout(NamedTuple):
    """Formatted strings for the playback readouts."""

    elapsed: str
    coordinate: str
    speed: str
    distance: str


def format_elapsed(ms: float) -> str:
    """Format milliseconds as zero-padded HH:MM:SS (whole seconds, hours not wrapped)."""
    seconds = int(ms // 1000)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours:02d}:{minutes:02d}:{seconds % 60:02d}"


def format_coordinate(position: Position) -> str:
    return f"{position.latitude:.6f}, {position.longitude:.6f}"


def format_speed(speed_kmh: float) -> str:
    return f"{speed_kmh:.2f} km/h"


def format_distance(meters: float) -> str:
    return f"{meters:.1f} m"


def format_readout(sample: Sample) -> Readout:
    return Readout(
        elapsed=format_elapsed(sample.elapsed_ms),
        coordinate=format_coordinate(sample.coordinate),
        speed=format_speed(sample.speed_kmh),
        distance=format_distance(sample.distance_traveled),
    )


class ConsoleUiSink:
    """
    Prints readouts to a text stream.

    At most one line is printed per interval_ms of simulated time; the final
    point of the route is always printed.
    """

    def __init__(self, interval_ms: float = 1000, stream: Optional[TextIO] = None):
        self.interval_ms = interval_ms
        self.stream = stream
        self.last_readout: Optional[Readout] = None
        self._last_printed: Optional[Sample] = None

    def show(self, readout: Readout, sample: Sample) -> None:
        self.last_readout = readout

        if self._last_printed is not None:
            since = sample.elapsed_ms - self._last_printed.elapsed_ms
            if sample.segment_index is None:
                # Final point: print once
                if since == 0 and self._last_printed.segment_index is None:
                    return
            elif 0 <= since < self.interval_ms:
                return

        self._last_printed = sample
        print(
            f"{readout.elapsed}  {readout.coordinate}  {readout.speed:>12}  {readout.distance:>12}",
            file=self.stream or sys.stdout,
        )
