#!/usr/bin/env python3
"""
Geographic positions and great-circle distance utilities.
"""

from typing import List, NamedTuple, Sequence, Tuple
import logging
import math

logger = logging.getLogger(__name__)

# Mean Earth radius in meters
EARTH_RADIUS = 6371000.0


class Position(NamedTuple):
    """Represents a geographic position with latitude and longitude."""

    latitude: float
    longitude: float


def haversine_distance(pos1: Position, pos2: Position) -> float:
    """
    Calculate the great-circle distance between two positions.

    Args:
        pos1: First position (degrees)
        pos2: Second position (degrees)

    Returns:
        Distance in meters
    """
    lat1, lon1 = math.radians(pos1.latitude), math.radians(pos1.longitude)
    lat2, lon2 = math.radians(pos2.latitude), math.radians(pos2.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    )
    # Rounding can push a slightly outside [0, 1] near antipodal points
    a = min(1.0, max(0.0, a))

    return 2 * EARTH_RADIUS * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def calculate_cumulative_distances(positions: Sequence[Position]) -> List[float]:
    """
    Calculate cumulative distances along a sequence of positions.

    Args:
        positions: Ordered positions

    Returns:
        List of cumulative distances in meters, with same length as positions
    """
    if not positions:
        return []

    cumulative_distances = [0.0]

    for i in range(1, len(positions)):
        segment_distance = haversine_distance(positions[i - 1], positions[i])
        cumulative_distances.append(cumulative_distances[-1] + segment_distance)

    return cumulative_distances


def calculate_bbox(
    positions: Sequence[Position],
) -> Tuple[float, float, float, float]:
    """
    Calculate the bounding box of a sequence of positions.

    Args:
        positions: Non-empty sequence of positions

    Returns:
        Tuple of (south, west, north, east) in decimal degrees

    Raises:
        ValueError: If positions is empty
    """
    if not positions:
        raise ValueError("Cannot calculate bounding box of no positions")

    latitudes = [pos.latitude for pos in positions]
    longitudes = [pos.longitude for pos in positions]

    return (min(latitudes), min(longitudes), max(latitudes), max(longitudes))


def buffer_bbox(
    bbox: Tuple[float, float, float, float], buffer: float
) -> Tuple[float, float, float, float]:
    """
    Grow a bounding box by a distance in meters.

    Args:
        bbox: Tuple of (south, west, north, east) in decimal degrees
        buffer: Buffer distance in meters

    Returns:
        Buffered (south, west, north, east), clamped to valid coordinate ranges
    """
    south, west, north, east = bbox
    if buffer == 0.0:
        return bbox

    # 1 degree latitude ≈ 111 km; longitude shrinks with the cosine of latitude
    avg_lat = (south + north) / 2
    lat_buffer = buffer / 111000.0
    lon_buffer = buffer / (111000.0 * max(abs(math.cos(math.radians(avg_lat))), 1e-6))

    return (
        max(-90.0, south - lat_buffer),
        max(-180.0, west - lon_buffer),
        min(90.0, north + lat_buffer),
        min(180.0, east + lon_buffer),
    )
