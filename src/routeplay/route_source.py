#!/usr/bin/env python3
"""
Route sources: load route records from JSON files, JSON URLs and GPX tracks.
"""

from typing import Any, List, TextIO
import json
import logging
import math

import gpxpy
import gpxpy.gpx
import requests

from .config import ReplayConfig
from .route import Route, RoutePoint, parse_timestamp

DEFAULT_API_TIMEOUT = 30

logger = logging.getLogger(__name__)


class RouteLoadError(RuntimeError):
    """Raised when a route cannot be fetched or parsed."""


def is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def parse_route_document(data: Any) -> List[RoutePoint]:
    """
    Convert a decoded JSON route document into route points.

    The document is an array of objects with "latitude", "longitude" and an
    optional "timestamp" (ISO-8601 string or null).

    Args:
        data: Decoded JSON document

    Returns:
        List of RoutePoint records in document order

    Raises:
        RouteLoadError: If the document does not have the expected shape
    """
    if not isinstance(data, list):
        raise RouteLoadError(
            f"Route document must be a JSON array of points, got {type(data).__name__}"
        )

    points = []
    for i, record in enumerate(data):
        if not isinstance(record, dict):
            raise RouteLoadError(f"Route point {i} is not a JSON object")
        try:
            latitude = float(record["latitude"])
            longitude = float(record["longitude"])
        except KeyError as e:
            raise RouteLoadError(f"Route point {i} is missing {e.args[0]!r}") from e
        except (TypeError, ValueError) as e:
            raise RouteLoadError(f"Route point {i} has a non-numeric coordinate") from e
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise RouteLoadError(f"Route point {i} has a non-finite coordinate")
        points.append(RoutePoint(latitude, longitude, record.get("timestamp")))

    logger.debug(f"Parsed {len(points)} route points from JSON document")
    return points


def parse_gpx(file_input: TextIO) -> List[RoutePoint]:
    """
    Parse a GPX file and concatenate all tracks/segments into route points.

    Args:
        file_input: File-like object containing GPX data

    Returns:
        List of RoutePoint records, using each track point's time as its timestamp

    Raises:
        gpxpy.gpx.GPXException: If GPX file is malformed.
    """
    gpx_data = gpxpy.parse(file_input)

    points = []
    for track in gpx_data.tracks:
        for segment in track.segments:
            for point in segment.points:
                points.append(RoutePoint(point.latitude, point.longitude, point.time))

    logger.debug(f"Parsed {len(points)} track points from GPX file")
    return points


def fetch_route_document(url: str, timeout: float = DEFAULT_API_TIMEOUT) -> Any:
    """
    Fetch and decode a JSON route document over HTTP. No retries.

    Raises:
        requests.exceptions.RequestException: On network or HTTP errors
        ValueError: If the response body is not valid JSON
    """
    logger.debug(f"Fetching route from {url}")
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.json()


def load_route_points(
    source: str, timeout: float = DEFAULT_API_TIMEOUT
) -> List[RoutePoint]:
    """
    Load route points from a URL, GPX file or JSON file.

    Args:
        source: http(s) URL of a JSON document, path to a .gpx file, or path to a JSON file
        timeout: HTTP timeout in seconds

    Returns:
        List of RoutePoint records

    Raises:
        RouteLoadError: On any transport or parse failure
    """
    try:
        if is_url(source):
            return parse_route_document(fetch_route_document(source, timeout))

        logger.debug(f"Reading route file: {source}")
        with open(source, "r", encoding="utf-8") as f:
            if source.lower().endswith(".gpx"):
                return parse_gpx(f)
            return parse_route_document(json.load(f))

    except FileNotFoundError as e:
        raise RouteLoadError(
            f"Route file not found: {source}. Check the path and try again."
        ) from e
    except PermissionError as e:
        raise RouteLoadError(
            f"Cannot read route file (permission denied): {source}"
        ) from e
    except requests.exceptions.HTTPError as e:
        status_code = e.response.status_code if e.response is not None else "unknown"
        raise RouteLoadError(
            f"Failed to load {source} (HTTP {status_code}). "
            f"Check that the URL is correct and the server is reachable."
        ) from e
    except requests.exceptions.JSONDecodeError as e:
        raise RouteLoadError(f"Malformed route document from {source}: {e}") from e
    except requests.exceptions.RequestException as e:
        raise RouteLoadError(
            f"Failed to load {source}: {e}. "
            f"Check your network connection or serve the route file over HTTP."
        ) from e
    except gpxpy.gpx.GPXException as e:
        raise RouteLoadError(f"Invalid GPX file {source}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
        raise RouteLoadError(f"Malformed route document {source}: {e}") from e


def load_route(source: str, config: ReplayConfig) -> Route:
    """
    Load a route from a source and build the Route model.

    Args:
        source: URL or file path (see load_route_points)
        config: ReplayConfig with timeout and synthetic timeline interval

    Returns:
        Route object

    Raises:
        RouteLoadError: On transport or parse failure, including unparseable timestamps
        EmptyRouteError: If the source contains no points
        RouteOrderError: If recorded timestamps go backwards
    """
    points = load_route_points(source, config.timeout)

    # Recorded timestamps are only used when every point has one
    if all(p.timestamp not in (None, "") for p in points):
        for i, point in enumerate(points):
            try:
                parse_timestamp(point.timestamp)
            except ValueError as e:
                raise RouteLoadError(f"Route point {i} in {source}: {e}") from e

    route = Route.build(points, interval_ms=config.synthetic_interval_ms)
    logger.info(f"Loaded route with {len(route)} points from {source}")
    return route
