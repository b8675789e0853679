#!/usr/bin/env python3
"""
Position sampling: maps a route and a simulated time to position, speed and progress.
"""

from bisect import bisect_left
from typing import NamedTuple, Optional

from .geometry import Position
from .route import Route

# m/s to km/h
MPS_TO_KMH = 3.6

# Segments shorter than this are treated as this long when computing speed
MIN_SEGMENT_SECONDS = 1.0


class Sample(NamedTuple):
    """Interpolated vehicle state at one simulated instant."""

    coordinate: Position
    speed_kmh: float
    distance_traveled: float
    elapsed_ms: float
    segment_index: Optional[int] = None
    fraction: float = 1.0


def find_segment(route: Route, t: float) -> Optional[int]:
    """
    Locate the segment containing time t.

    Returns the first index i with route[i].time <= t <= route[i+1].time, so a
    time shared by two segments resolves to the earlier one. Returns None when
    t is at or past the last waypoint, or the route has a single point.

    Args:
        route: Route to search
        t: Simulated time in epoch milliseconds

    Returns:
        Segment index, or None for the final point
    """
    times = route.times
    if len(times) < 2 or t >= times[-1]:
        return None

    # times[j - 1] < t <= times[j], so segment j - 1 is the first match
    j = bisect_left(times, t)
    return max(j - 1, 0)


def sample_at(route: Route, t: float) -> Sample:
    """
    Sample the route at simulated time t.

    Times outside the recorded span are clamped to the first or last waypoint.

    Args:
        route: Route to sample
        t: Simulated time in epoch milliseconds

    Returns:
        Sample with interpolated coordinate, instantaneous speed (km/h),
        distance traveled (m) and elapsed time (ms)
    """
    t = min(max(t, route.first.time), route.last.time)
    elapsed_ms = t - route.first.time

    i = find_segment(route, t)
    if i is None:
        last = route.last
        return Sample(
            coordinate=last.position,
            speed_kmh=0.0,
            distance_traveled=route.total_distance,
            elapsed_ms=elapsed_ms,
        )

    p0 = route[i]
    p1 = route[i + 1]

    if p0.duration_to_next == 0:
        fraction = 1.0
    else:
        fraction = (t - p0.time) / p0.duration_to_next

    coordinate = Position(
        p0.latitude + (p1.latitude - p0.latitude) * fraction,
        p0.longitude + (p1.longitude - p0.longitude) * fraction,
    )

    duration_s = max(MIN_SEGMENT_SECONDS, p0.duration_to_next / 1000)
    speed_kmh = p0.distance_to_next / duration_s * MPS_TO_KMH

    distance_traveled = (
        route.cumulative_distances[i] + fraction * p0.distance_to_next
    )

    return Sample(
        coordinate=coordinate,
        speed_kmh=speed_kmh,
        distance_traveled=distance_traveled,
        elapsed_ms=elapsed_ms,
        segment_index=i,
        fraction=fraction,
    )
