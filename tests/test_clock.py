import pytest

from routeplay.clock import PlaybackClock, PlaybackState
from routeplay.route import Route, RoutePoint


@pytest.fixture
def route():
    """Route spanning t=0 to t=500."""
    return Route.build([RoutePoint(0.0, 0.0, 0), RoutePoint(0.0, 0.001, 500)])


def test_initial_state(route):
    clock = PlaybackClock(route)
    assert clock.state == PlaybackState(
        simulated_time=0, is_playing=False, speed_multiplier=1.0
    )
    assert not clock.at_end


def test_advance_is_noop_while_paused(route):
    clock = PlaybackClock(route)
    clock.advance(100)
    assert clock.simulated_time == 0


def test_advance_scales_by_speed_multiplier(route):
    clock = PlaybackClock(route)
    clock.toggle_play()
    clock.set_speed(2)
    clock.advance(100)
    assert clock.simulated_time == 200
    assert clock.is_playing


def test_advance_clamps_at_end_and_stops(route):
    clock = PlaybackClock(route)
    clock.set_speed(2)
    clock.toggle_play()
    clock.advance(1000)
    assert clock.simulated_time == 500
    assert clock.is_playing is False
    assert clock.at_end


def test_reaching_end_exactly_stops_playback(route):
    clock = PlaybackClock(route)
    clock.toggle_play()
    clock.advance(500)
    assert clock.simulated_time == 500
    assert not clock.is_playing


def test_advance_after_end_does_not_loop(route):
    clock = PlaybackClock(route)
    clock.toggle_play()
    clock.advance(1000)
    clock.toggle_play()
    clock.advance(1000)
    assert clock.simulated_time == 500


def test_toggle_play_arms_resync_only_when_starting(route):
    clock = PlaybackClock(route)
    assert clock.consume_resync() is False
    assert clock.toggle_play() is True
    assert clock.consume_resync() is True
    assert clock.consume_resync() is False
    assert clock.toggle_play() is False
    assert clock.consume_resync() is False


def test_restart_rewinds_and_is_idempotent(route):
    clock = PlaybackClock(route)
    clock.toggle_play()
    clock.advance(300)
    clock.restart()
    assert clock.simulated_time == 0
    assert clock.is_playing
    state = clock.state
    clock.restart()
    assert clock.state == state


def test_speed_change_takes_effect_on_next_advance(route):
    clock = PlaybackClock(route)
    clock.toggle_play()
    clock.advance(100)
    clock.set_speed(0.5)
    assert clock.simulated_time == 100
    clock.advance(100)
    assert clock.simulated_time == 150


def test_single_point_route_clock():
    route = Route.build([RoutePoint(1.0, 2.0, 42)])
    clock = PlaybackClock(route)
    assert clock.simulated_time == 42
    assert clock.at_end
    clock.toggle_play()
    clock.advance(10)
    assert clock.simulated_time == 42
    assert not clock.is_playing
