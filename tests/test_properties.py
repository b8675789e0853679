from hypothesis import given, strategies as st, assume
from routeplay.clock import PlaybackClock
from routeplay.geometry import Position, haversine_distance
from routeplay.route import Route, RoutePoint
from routeplay.sampler import sample_at

# Strategy for valid GPS coordinates
valid_lat = st.floats(-90.0, 90.0)
valid_lon = st.floats(-180.0, 180.0)
valid_position = st.builds(Position, latitude=valid_lat, longitude=valid_lon)

# Non-decreasing timestamps built from non-negative gaps
gaps = st.lists(st.integers(0, 60000), min_size=1, max_size=20)
deltas = st.lists(st.floats(0.0, 5000.0), min_size=1, max_size=50)
speeds = st.floats(0.1, 64.0)


def build_route(gap_list, start=1_700_000_000_000):
    times = [start]
    for gap in gap_list:
        times.append(times[-1] + gap)
    points = [
        RoutePoint(latitude=0.001 * i, longitude=0.002 * i, timestamp=t)
        for i, t in enumerate(times)
    ]
    return Route.build(points)


class TestDistanceProperties:

    @given(valid_position, valid_position)
    def test_distance_is_non_negative(self, pos1, pos2):
        """Distance between any two points is always non-negative."""
        assert haversine_distance(pos1, pos2) >= 0

    @given(valid_position)
    def test_distance_to_self_is_zero(self, pos):
        """Distance from a point to itself is always zero."""
        assert haversine_distance(pos, pos) == 0

    @given(valid_position, valid_position)
    def test_distance_is_symmetric(self, pos1, pos2):
        """Distance from A to B equals distance from B to A."""
        dist_ab = haversine_distance(pos1, pos2)
        dist_ba = haversine_distance(pos2, pos1)
        assert abs(dist_ab - dist_ba) < 1e-6

    @given(valid_position, valid_position, valid_position)
    def test_triangle_inequality(self, pos1, pos2, pos3):
        """For any triangle, sum of two sides >= third side."""
        d12 = haversine_distance(pos1, pos2)
        d23 = haversine_distance(pos2, pos3)
        d13 = haversine_distance(pos1, pos3)
        # Loose tolerance for rounding near antipodal points
        assert d12 + d23 >= d13 - 1.0


class TestClockProperties:

    @given(gaps, deltas, speeds)
    def test_simulated_time_stays_within_route_span(self, gap_list, delta_list, speed):
        """No sequence of advances moves the clock outside the recorded span."""
        route = build_route(gap_list)
        clock = PlaybackClock(route)
        clock.set_speed(speed)
        clock.toggle_play()
        for delta in delta_list:
            clock.advance(delta)
            assert route.first.time <= clock.simulated_time <= route.last.time

    @given(gaps, deltas, speeds)
    def test_simulated_time_is_monotonic_while_playing(self, gap_list, delta_list, speed):
        """Repeated positive advances never move simulated time backwards."""
        route = build_route(gap_list)
        clock = PlaybackClock(route)
        clock.set_speed(speed)
        clock.toggle_play()
        previous = clock.simulated_time
        for delta in delta_list:
            clock.advance(delta)
            assert clock.simulated_time >= previous
            previous = clock.simulated_time

    @given(gaps, deltas)
    def test_restart_is_idempotent(self, gap_list, delta_list):
        route = build_route(gap_list)
        clock = PlaybackClock(route)
        clock.toggle_play()
        for delta in delta_list:
            clock.advance(delta)
        clock.restart()
        once = clock.state
        clock.restart()
        assert clock.state == once


class TestSamplerProperties:

    @given(gaps, st.floats(0.0, 1.0))
    def test_distance_traveled_within_route_total(self, gap_list, position):
        route = build_route(gap_list)
        t = route.first.time + position * route.total_duration
        sample = sample_at(route, t)
        assert -1e-6 <= sample.distance_traveled <= route.total_distance + 1e-6
        assert sample.speed_kmh >= 0

    @given(gaps, st.floats(0.0, 1.0), st.floats(0.0, 1.0))
    def test_distance_traveled_is_monotonic_in_time(self, gap_list, a, b):
        route = build_route(gap_list)
        assume(a != b)
        early, late = sorted([a, b])
        d_early = sample_at(route, route.first.time + early * route.total_duration)
        d_late = sample_at(route, route.first.time + late * route.total_duration)
        assert d_early.distance_traveled <= d_late.distance_traveled + 1e-6

    @given(gaps)
    def test_final_point_boundary(self, gap_list):
        route = build_route(gap_list)
        sample = sample_at(route, route.last.time)
        assert sample.coordinate == route.last.position
        assert sample.speed_kmh == 0.0
        assert sample.distance_traveled == route.total_distance
