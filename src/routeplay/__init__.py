#!/usr/bin/env python3
"""
Routeplay - replay recorded vehicle routes as time-scaled animations.

This package turns a sequence of timestamped waypoints into a continuous
function of simulated time and drives it frame by frame, reporting the
interpolated position, instantaneous speed, elapsed time and distance traveled.
"""
import importlib.metadata

__version__ = importlib.metadata.version("routeplay")

# Import main classes for public API
from .geometry import Position, haversine_distance
from .route import EmptyRouteError, Route, RouteOrderError, RoutePoint, Waypoint
from .clock import PlaybackClock, PlaybackState
from .sampler import Sample, sample_at
from .driver import AnimationDriver, FrameLoop, RenderFrame
from .controls import InvalidSpeedError, PlaybackControls
from .route_source import RouteLoadError, load_route

__all__ = [
    "Position",
    "haversine_distance",
    "EmptyRouteError",
    "Route",
    "RouteOrderError",
    "RoutePoint",
    "Waypoint",
    "PlaybackClock",
    "PlaybackState",
    "Sample",
    "sample_at",
    "AnimationDriver",
    "FrameLoop",
    "RenderFrame",
    "InvalidSpeedError",
    "PlaybackControls",
    "RouteLoadError",
    "load_route",
]
