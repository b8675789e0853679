#!/usr/bin/env python3
"""
Route data model for trajectory playback.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from itertools import accumulate
from typing import Iterable, Iterator, List, NamedTuple, Optional, Tuple, Union
import logging
import math
import time

from .geometry import (
    Position,
    buffer_bbox,
    calculate_bbox,
    haversine_distance,
)

logger = logging.getLogger(__name__)

# Spacing between waypoints when a route has no usable timestamps
SYNTHETIC_INTERVAL_MS = 5000

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

TimestampValue = Union[str, datetime, int, float, None]


class EmptyRouteError(ValueError):
    """Raised when a route is built from zero points."""


class RouteOrderError(ValueError):
    """Raised when waypoint timestamps go backwards."""


class RoutePoint(NamedTuple):
    """A raw route record as supplied by a route source."""

    latitude: float
    longitude: float
    timestamp: TimestampValue = None


@dataclass(frozen=True)
class Waypoint:
    """A timestamped point on a route with precomputed distance and duration to the next one."""

    latitude: float
    longitude: float
    time: int
    distance_to_next: float = 0.0
    duration_to_next: int = 0

    @property
    def position(self) -> Position:
        return Position(self.latitude, self.longitude)


def _has_timestamp(value: TimestampValue) -> bool:
    return value is not None and value != ""


def parse_timestamp(value: TimestampValue) -> int:
    """
    Convert a timestamp to integer milliseconds since the Unix epoch.

    Args:
        value: ISO-8601 string (a trailing 'Z' is accepted), datetime, or a
               number already expressed in epoch milliseconds. Naive values
               are taken as UTC.

    Returns:
        Epoch milliseconds

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a timestamp: {value!r}")

    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError(f"Not a finite timestamp: {value!r}")
        return int(value)

    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Invalid ISO-8601 timestamp: {value!r}")

    if not isinstance(value, datetime):
        raise ValueError(f"Not a timestamp: {value!r}")

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)

    return (value - _EPOCH) // timedelta(milliseconds=1)


class Route:
    """Represents a recorded trajectory with precomputed per-segment distance and duration."""

    def __init__(self, waypoints: List[Waypoint], synthetic_timing: bool = False):
        """Initializes a Route object from fully resolved waypoints.

        Use Route.build() to construct a route from raw records.

        Args:
            waypoints: Waypoints with non-decreasing times and derived fields filled in.
            synthetic_timing: True when the times were generated rather than recorded.

        Raises:
            EmptyRouteError: If waypoints is empty.
        """
        if not waypoints:
            raise EmptyRouteError(
                "Route has no points; check that the route source contains at least one "
                "latitude/longitude record"
            )

        self._waypoints: Tuple[Waypoint, ...] = tuple(waypoints)
        self.synthetic_timing = synthetic_timing

        self._positions = tuple(wp.position for wp in self._waypoints)
        self._times = tuple(wp.time for wp in self._waypoints)
        self._cumulative_distances = tuple(
            accumulate((wp.distance_to_next for wp in self._waypoints[:-1]), initial=0.0)
        )
        self.total_distance: float = self._cumulative_distances[-1]
        self.total_duration: int = self._times[-1] - self._times[0]
        self.bbox = calculate_bbox(self._positions)

        logger.debug(
            f"Route with {len(self)} waypoints: {self.total_distance:.1f} m over "
            f"{self.total_duration} ms (synthetic timing: {self.synthetic_timing})"
        )

    @classmethod
    def build(
        cls,
        points: Iterable[RoutePoint],
        epoch_ms: Optional[int] = None,
        interval_ms: int = SYNTHETIC_INTERVAL_MS,
    ) -> "Route":
        """
        Build a route from raw records.

        If every record has a timestamp, the timestamps are used verbatim.
        Otherwise all of them are replaced by a synthetic timeline starting at
        epoch_ms (default: now) with interval_ms between consecutive points.

        Args:
            points: Ordered raw records
            epoch_ms: Start of the synthetic timeline
            interval_ms: Spacing of the synthetic timeline

        Returns:
            Route object

        Raises:
            EmptyRouteError: If there are no points
            RouteOrderError: If recorded timestamps decrease
            ValueError: If a recorded timestamp cannot be parsed
        """
        points = list(points)
        if not points:
            raise EmptyRouteError(
                "Route has no points; check that the route source contains at least one "
                "latitude/longitude record"
            )

        synthetic = not all(_has_timestamp(p.timestamp) for p in points)
        if synthetic:
            if epoch_ms is None:
                epoch_ms = int(time.time() * 1000)
            logger.warning(
                f"Timestamps not found for all points, using fixed {interval_ms / 1000:g}s intervals"
            )
            times = [epoch_ms + i * interval_ms for i in range(len(points))]
        else:
            times = [parse_timestamp(p.timestamp) for p in points]

        for i in range(1, len(times)):
            if times[i] < times[i - 1]:
                raise RouteOrderError(
                    f"Route timestamps go backwards between points {i - 1} and {i}"
                )

        waypoints = []
        for i, point in enumerate(points):
            if i < len(points) - 1:
                nxt = points[i + 1]
                distance = haversine_distance(
                    Position(point.latitude, point.longitude),
                    Position(nxt.latitude, nxt.longitude),
                )
                duration = times[i + 1] - times[i]
            else:
                distance, duration = 0.0, 0
            waypoints.append(
                Waypoint(
                    latitude=float(point.latitude),
                    longitude=float(point.longitude),
                    time=times[i],
                    distance_to_next=distance,
                    duration_to_next=duration,
                )
            )

        return cls(waypoints, synthetic_timing=synthetic)

    @property
    def first(self) -> Waypoint:
        return self._waypoints[0]

    @property
    def last(self) -> Waypoint:
        return self._waypoints[-1]

    @property
    def times(self) -> Tuple[int, ...]:
        """Waypoint times in epoch milliseconds, non-decreasing."""
        return self._times

    @property
    def positions(self) -> Tuple[Position, ...]:
        return self._positions

    @property
    def cumulative_distances(self) -> Tuple[float, ...]:
        """Distance in meters from the first waypoint to each waypoint."""
        return self._cumulative_distances

    def get_bbox(self, buffer: float = 0.0) -> Tuple[float, float, float, float]:
        """
        Get bounding box for this route, optionally with a buffer.

        Args:
            buffer: Buffer distance in meters (default: 0.0)

        Returns:
            Tuple of (south, west, north, east) in decimal degrees
        """
        return buffer_bbox(self.bbox, buffer)

    def __len__(self) -> int:
        """Return number of waypoints in route."""
        return len(self._waypoints)

    def __getitem__(self, index):
        """Allow indexing into waypoints."""
        return self._waypoints[index]

    def __iter__(self) -> Iterator[Waypoint]:
        """Allow iteration over waypoints."""
        return iter(self._waypoints)
