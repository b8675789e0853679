#!/usr/bin/env python3
"""
Route replay tool.
This script loads a recorded vehicle trajectory, replays it at a chosen speed
while printing elapsed time, position, speed and distance, and writes an
interactive HTML map of the route and the traveled path.

Requirements:
    pip install gpxpy folium requests

"""

from typing import NamedTuple, Optional
import webbrowser
import argparse
import logging
import sys
import os

from . import __version__
from .clock import PlaybackClock
from .config import ReplayConfig
from .controls import SPEED_CHOICES, InvalidSpeedError, PlaybackControls
from .driver import AnimationDriver, FrameLoop
from .file_utils import generate_output_filename
from .formatting import ConsoleUiSink
from .route import EmptyRouteError, Route, RouteOrderError
from .route_source import RouteLoadError, load_route
from .visualization import FoliumRenderSink

# Configure logging
logger = logging.getLogger("routeplay")


class ReplaySession(NamedTuple):
    """The playback objects wired together for one route."""

    route: Route
    clock: PlaybackClock
    driver: AnimationDriver
    controls: PlaybackControls
    render_sink: FoliumRenderSink
    ui_sink: ConsoleUiSink


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Recorded route replay tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "source",
        type=str,
        nargs="?",
        help="Route to replay: JSON file, GPX file, or http(s) URL of a JSON route",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output HTML map file (default: auto-generated based on the route name)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help=f"Playback speed multiplier, e.g. {', '.join(str(s) for s in SPEED_CHOICES)} (default: 1)",
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=60.0,
        help="Frames per second (default: 60)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="HTTP timeout in seconds when loading a route from a URL (default: 30)",
    )
    parser.add_argument(
        "--readout-interval",
        type=float,
        default=1000.0,
        help="Simulated milliseconds between printed readouts (default: 1000)",
    )
    parser.add_argument(
        "--map-buffer",
        type=float,
        default=50.0,
        help="Map margin around the route in meters (default: 50)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--no-open",
        action="store_true",
        help="Don't automatically open the HTML file in browser",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"routeplay {__version__}",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> ReplayConfig:
    return ReplayConfig(
        speed=args.speed,
        fps=args.fps,
        timeout=args.timeout,
        map_buffer=args.map_buffer,
        readout_interval_ms=args.readout_interval,
        log_level=args.log_level,
        open_browser=not args.no_open,
        output=args.output,
    )


def setup_logging(config: ReplayConfig) -> None:
    """Setup logging configuration."""
    level = getattr(logging, config.log_level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure the root logger so all modules inherit the configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # Suppress overly verbose third-party logging
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def determine_output_filename(source: str, output_arg: Optional[str]) -> str:
    """
    Determine the output filename to use.

    Args:
        source: Route path or URL
        output_arg: Value from --output argument (None if not specified)

    Returns:
        Output filename to use

    Raises:
        RuntimeError: If auto-generation fails
        ValueError: If constructed filename would be illegal
    """
    if output_arg is not None:
        return output_arg

    try:
        return generate_output_filename(source)
    except (RuntimeError, ValueError) as e:
        logger.error(f"Failed to generate output filename: {e}")
        raise


def open_file_in_browser(filename: str) -> None:
    """
    Open the specified file in the default browser.

    Args:
        filename: Path to the file to open
    """
    abs_path = os.path.abspath(filename)
    try:
        webbrowser.open(f"file://{abs_path}")
        logger.debug(f"Opening {abs_path} in your default browser...")
    except webbrowser.Error as e:
        logger.warning(f"Could not automatically open browser: {e}")
        logger.warning(f"Please manually open {abs_path}")


def create_session(route: Route, config: ReplayConfig) -> ReplaySession:
    """
    Wire clock, driver, sinks and controls together for a route.

    Raises:
        InvalidSpeedError: If config.speed is not a valid multiplier
    """
    clock = PlaybackClock(route)
    render_sink = FoliumRenderSink(route, map_buffer=config.map_buffer)
    ui_sink = ConsoleUiSink(interval_ms=config.readout_interval_ms)
    driver = AnimationDriver(route, clock, render_sink, ui_sink)
    controls = PlaybackControls(clock, driver)
    controls.set_speed(config.speed)
    return ReplaySession(route, clock, driver, controls, render_sink, ui_sink)


def replay(session: ReplaySession, frames: FrameLoop) -> None:
    """Play the route from the start until it reaches the end or is interrupted."""
    session.driver.refresh()
    session.controls.toggle_play()
    logger.info(
        f"Replaying {session.route.total_duration / 1000:.1f}s of route at "
        f"{session.clock.speed_multiplier}x"
    )
    with frames.subscribe(session.driver.on_frame):
        frames.run(until=lambda: not session.clock.is_playing)


def main():
    """
    Parses command-line arguments, loads the route, replays it,
    and writes an interactive map.
    """
    parser = create_argument_parser()
    args = parser.parse_args()

    if not args.source:
        parser.print_help()
        sys.exit(1)

    config = config_from_args(args)
    setup_logging(config)

    if config.fps <= 0:
        logger.error(f"Frame rate must be positive, got {config.fps}")
        sys.exit(1)

    with FrameLoop(fps=config.fps) as frames:
        try:
            route = load_route(args.source, config)
        except RouteLoadError as e:
            logger.error(f"Error loading route: {e}")
            sys.exit(1)
        except (EmptyRouteError, RouteOrderError) as e:
            logger.error(f"Invalid route: {e}")
            sys.exit(1)

        logger.info(f"Total route distance: {route.total_distance / 1000:.2f} km")

        try:
            session = create_session(route, config)
        except InvalidSpeedError as e:
            logger.error(str(e))
            sys.exit(1)

        try:
            output_filename = determine_output_filename(args.source, config.output)
            logger.debug(f"Output filename: {output_filename}")
        except (RuntimeError, ValueError):
            sys.exit(1)

        try:
            replay(session, frames)
        except KeyboardInterrupt:
            logger.warning("Playback interrupted")

    try:
        session.render_sink.save(output_filename, session.ui_sink.last_readout)
    except OSError as e:
        logger.error(f"Failed to create map: {e}")
        sys.exit(1)

    if config.open_browser:
        open_file_in_browser(output_filename)


if __name__ == "__main__":
    main()
