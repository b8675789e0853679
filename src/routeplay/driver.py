#!/usr/bin/env python3
"""
Frame scheduling: the frame loop and the driver that sequences clock, sampler and sinks.
"""

from typing import Callable, List, NamedTuple, Optional
import logging
import time

from .clock import PlaybackClock
from .formatting import Readout, format_readout
from .geometry import Position
from .route import Route
from .sampler import Sample, sample_at

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class RenderFrame(NamedTuple):
    """What the render sink needs to draw one frame."""

    coordinate: Position
    full_path: List[Position]
    traveled_append: Optional[Position]


class AnimationDriver:
    """
    Runs one playback tick per frame: advance the clock, sample the route, emit.

    The render sink must provide render(frame: RenderFrame) and
    reset(start: Position); the UI sink must provide
    show(readout: Readout, sample: Sample).
    """

    def __init__(self, route: Route, clock: PlaybackClock, render_sink, ui_sink):
        self.route = route
        self.clock = clock
        self.render_sink = render_sink
        self.ui_sink = ui_sink
        self._full_path = list(route.positions)
        self._last_frame_ms: Optional[float] = None
        self._last_emitted: Optional[Position] = None
        self.last_sample: Optional[Sample] = None

    def on_frame(self, timestamp_ms: float) -> Sample:
        """
        Handle one frame from the host frame loop.

        Args:
            timestamp_ms: Monotonic timestamp of this frame in milliseconds

        Returns:
            The sample emitted for this frame
        """
        resync = self.clock.consume_resync()
        if self._last_frame_ms is None or resync:
            real_delta_ms = 0.0
        else:
            real_delta_ms = max(0.0, timestamp_ms - self._last_frame_ms)
        self._last_frame_ms = timestamp_ms

        self.clock.advance(real_delta_ms)
        return self.refresh()

    def refresh(self) -> Sample:
        """Sample the route at the current simulated time and emit it without advancing."""
        sample = sample_at(self.route, self.clock.simulated_time)
        self._emit(sample)
        return sample

    def reset_traveled_path(self) -> None:
        """Clear the traveled path back to the first waypoint."""
        start = self.route.first.position
        self.render_sink.reset(start)
        self._last_emitted = start

    def _emit(self, sample: Sample) -> None:
        coordinate = sample.coordinate
        traveled_append = None if coordinate == self._last_emitted else coordinate
        self._last_emitted = coordinate

        self.render_sink.render(
            RenderFrame(
                coordinate=coordinate,
                full_path=self._full_path,
                traveled_append=traveled_append,
            )
        )
        readout: Readout = format_readout(sample)
        self.ui_sink.show(readout, sample)
        self.last_sample = sample


class Subscription:
    """Handle returned by FrameLoop.subscribe()."""

    def __init__(self, loop: "FrameLoop", callback: FrameCallback):
        self._loop = loop
        self.callback = callback

    def cancel(self) -> None:
        self._loop.unsubscribe(self.callback)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()


class FrameLoop:
    """
    Repeating frame source that calls subscribers with a monotonic timestamp in ms.

    Use as a context manager: leaving the block cancels the loop and drops all
    subscriptions, so no callback fires afterwards.
    """

    def __init__(
        self,
        fps: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if fps <= 0:
            raise ValueError(f"Frame rate must be positive, got {fps}")
        self.frame_interval = 1.0 / fps
        self._clock = clock
        self._sleep = sleep
        self._callbacks: List[FrameCallback] = []
        self.cancelled = False
        self.frame_count = 0

    def subscribe(self, callback: FrameCallback) -> Subscription:
        if self.cancelled:
            raise RuntimeError("Cannot subscribe to a cancelled frame loop")
        self._callbacks.append(callback)
        return Subscription(self, callback)

    def unsubscribe(self, callback: FrameCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def cancel(self) -> None:
        if not self.cancelled:
            logger.debug(f"Frame loop cancelled after {self.frame_count} frames")
        self.cancelled = True
        self._callbacks.clear()

    def tick(self) -> None:
        """Deliver one frame to every subscriber."""
        timestamp_ms = self._clock() * 1000.0
        for callback in list(self._callbacks):
            if self.cancelled:
                return
            callback(timestamp_ms)
        self.frame_count += 1

    def run(self, until: Optional[Callable[[], bool]] = None) -> None:
        """
        Deliver frames until cancelled or until() returns True.

        Args:
            until: Optional stop predicate checked after every frame
        """
        while not self.cancelled:
            self.tick()
            if until is not None and until():
                break
            self._sleep(self.frame_interval)

    def __enter__(self) -> "FrameLoop":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()
