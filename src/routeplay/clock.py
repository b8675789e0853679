#!/usr/bin/env python3
"""
Playback clock: simulated time, play/pause state and speed multiplier.
"""

from typing import NamedTuple
import logging

from .route import Route

logger = logging.getLogger(__name__)


class PlaybackState(NamedTuple):
    """Snapshot of the playback clock."""

    simulated_time: float
    is_playing: bool
    speed_multiplier: float


class PlaybackClock:
    """
    Tracks simulated time over a route's recorded span.

    simulated_time always stays within [route.first.time, route.last.time].
    The clock does not validate its inputs; speed multipliers are checked by
    the playback controls before they reach it.
    """

    def __init__(self, route: Route):
        self.route = route
        self.simulated_time: float = route.first.time
        self.is_playing = False
        self.speed_multiplier = 1.0
        self._resync = False

    @property
    def start_time(self) -> int:
        return self.route.first.time

    @property
    def end_time(self) -> int:
        return self.route.last.time

    @property
    def at_end(self) -> bool:
        return self.simulated_time >= self.end_time

    @property
    def state(self) -> PlaybackState:
        return PlaybackState(
            simulated_time=self.simulated_time,
            is_playing=self.is_playing,
            speed_multiplier=self.speed_multiplier,
        )

    def toggle_play(self) -> bool:
        """
        Flip between playing and paused.

        Resuming arms a resync so the next real-time delta counts as zero
        instead of the whole time spent paused.

        Returns:
            The new is_playing value
        """
        self.is_playing = not self.is_playing
        if self.is_playing:
            self._resync = True
        logger.debug(f"Playback {'started' if self.is_playing else 'paused'}")
        return self.is_playing

    def consume_resync(self) -> bool:
        """Return whether a resync is pending and clear it."""
        pending = self._resync
        self._resync = False
        return pending

    def set_speed(self, multiplier: float) -> None:
        self.speed_multiplier = multiplier
        logger.debug(f"Speed multiplier set to {multiplier}x")

    def restart(self) -> None:
        """Rewind simulated time to the start of the route."""
        self.simulated_time = self.start_time

    def advance(self, real_delta_ms: float) -> None:
        """
        Advance simulated time by a real-time delta scaled by the speed multiplier.

        Does nothing while paused. Reaching the end of the route clamps the
        time to the last waypoint and stops playback.

        Args:
            real_delta_ms: Real time elapsed since the previous frame, >= 0
        """
        if not self.is_playing:
            return

        self.simulated_time += real_delta_ms * self.speed_multiplier
        if self.simulated_time >= self.end_time:
            self.simulated_time = self.end_time
            self.is_playing = False
            logger.info("Reached end of route, playback stopped")
