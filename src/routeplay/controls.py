#!/usr/bin/env python3
"""
Playback controls: the command boundary in front of the playback clock.
"""

import logging
import math

from .clock import PlaybackClock
from .driver import AnimationDriver

logger = logging.getLogger(__name__)

# Multipliers offered by the command line help
SPEED_CHOICES = (0.5, 1, 2, 4, 8)

TOGGLE_PLAY = "toggle-play"
SET_SPEED = "set-speed"
RESTART = "restart"


class InvalidSpeedError(ValueError):
    """Raised when a speed multiplier is not a finite number greater than zero."""


def validate_speed(multiplier) -> float:
    """
    Check a speed multiplier.

    Args:
        multiplier: Requested multiplier

    Returns:
        The multiplier as a float

    Raises:
        InvalidSpeedError: If the multiplier is not a finite number > 0
    """
    try:
        value = float(multiplier)
    except (TypeError, ValueError):
        raise InvalidSpeedError(f"Speed multiplier must be a number, got {multiplier!r}")

    if isinstance(multiplier, bool) or not math.isfinite(value) or value <= 0:
        raise InvalidSpeedError(
            f"Speed multiplier must be greater than zero, got {multiplier!r}"
        )
    return value


class PlaybackControls:
    """Applies toggle-play, set-speed and restart commands between frames."""

    def __init__(self, clock: PlaybackClock, driver: AnimationDriver):
        self.clock = clock
        self.driver = driver

    def toggle_play(self) -> bool:
        return self.clock.toggle_play()

    def set_speed(self, multiplier) -> None:
        self.clock.set_speed(validate_speed(multiplier))

    def restart(self) -> None:
        """Rewind to the start; refresh observers right away if playback is paused."""
        self.clock.restart()
        self.driver.reset_traveled_path()
        if not self.clock.is_playing:
            self.driver.refresh()

    def dispatch(self, command: str, *args) -> None:
        """
        Apply a control command by name.

        Args:
            command: One of "toggle-play", "set-speed", "restart"
            args: Command arguments (the multiplier for "set-speed")

        Raises:
            ValueError: If the command is unknown or has the wrong arguments
            InvalidSpeedError: If set-speed gets an invalid multiplier
        """
        logger.debug(f"Control command: {command} {args}")
        if command == TOGGLE_PLAY and not args:
            self.toggle_play()
        elif command == SET_SPEED and len(args) == 1:
            self.set_speed(args[0])
        elif command == RESTART and not args:
            self.restart()
        else:
            raise ValueError(f"Unknown control command: {command} {args}")
