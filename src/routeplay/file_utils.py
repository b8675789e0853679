#!/usr/bin/env python3
"""
Filename utilities for generating output filenames.
"""

from urllib.parse import urlparse
import os
import logging

logger = logging.getLogger(__name__)

MAX_NUMBERED_ATTEMPTS = 99

_ROUTE_EXTENSIONS = (".json", ".geojson", ".gpx")


def _base_name(source: str) -> str:
    """Return the route name used to derive the output filename."""
    if source.lower().startswith(("http://", "https://")):
        path = urlparse(source).path.rstrip("/")
        name = os.path.basename(path) or "route"
        return name
    return source


def generate_output_filename(source: str) -> str:
    """
    Generates an output HTML filename and reserves it by creating an empty file.

    Strategy:
    1. Drop a .json/.geojson/.gpx extension (case-insensitive)
    2. Append " replay.html"
    3. If the file exists, try " replay (1).html", " replay (2).html", etc.
    4. Use exclusive open (`open(path, 'x')`) to reserve the name.

    URL sources are named after the last component of the URL path and
    written to the current directory.

    Args:
        source: Path or URL of the route

    Returns:
        Output filename that has been created as an empty file

    Raises:
        RuntimeError: If no available filename is found
        ValueError: If a file cannot be created (permissions, invalid name)
    """
    base = _base_name(source)
    input_dir = os.path.dirname(base)
    input_base = os.path.basename(base)

    for ext in _ROUTE_EXTENSIONS:
        if input_base.lower().endswith(ext):
            input_base = input_base[: -len(ext)]
            break

    base_output = input_base + " replay"

    candidates = [os.path.join(input_dir, base_output + ".html")] + [
        os.path.join(input_dir, f"{base_output} ({i}).html")
        for i in range(1, MAX_NUMBERED_ATTEMPTS + 1)
    ]

    for candidate in candidates:
        try:
            with open(candidate, "x"):
                pass
            return candidate
        except FileExistsError:
            continue
        except OSError as e:
            logger.error(f"Cannot create file {candidate}: {e}")
            raise ValueError(f"Cannot create file: {e}")

    logger.error(
        f"Could not find an available filename after {len(candidates)} attempts. "
        f"Please clean up your output directory or specify --output explicitly."
    )
    raise RuntimeError(
        f"No available filename found after {len(candidates)} attempts"
    )
