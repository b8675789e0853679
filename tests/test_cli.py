#!/usr/bin/env python3
"""
Tests for the routeplay command line.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from routeplay import cli
from routeplay.config import ReplayConfig
from routeplay.driver import FrameLoop
from routeplay.route_source import load_route

FIXTURES = Path(__file__).parent / "fixtures"


class FakeTime:
    def __init__(self):
        self.now = 0.0

    def clock(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds


def fast_frame_loop(fps=60.0):
    fake = FakeTime()
    return FrameLoop(fps=fps, clock=fake.clock, sleep=fake.sleep)


def test_parser_defaults():
    args = cli.create_argument_parser().parse_args(["route.json"])
    config = cli.config_from_args(args)
    assert config == ReplayConfig(output=None)
    assert args.source == "route.json"


def test_parser_options():
    args = cli.create_argument_parser().parse_args(
        ["route.gpx", "--speed", "4", "--no-open", "--output", "out.html", "--fps", "30"]
    )
    config = cli.config_from_args(args)
    assert config.speed == 4.0
    assert config.fps == 30.0
    assert config.open_browser is False
    assert config.output == "out.html"


def test_create_session_rejects_invalid_speed():
    route = load_route(str(FIXTURES / "dummy-route.json"), ReplayConfig())
    with pytest.raises(cli.InvalidSpeedError):
        cli.create_session(route, ReplayConfig(speed=0))


def test_replay_runs_to_the_end(capsys):
    route = load_route(str(FIXTURES / "dummy-route.json"), ReplayConfig())
    session = cli.create_session(route, ReplayConfig(speed=8))
    with fast_frame_loop() as frames:
        cli.replay(session, frames)

    assert session.clock.at_end
    assert not session.clock.is_playing
    assert session.ui_sink.last_readout.elapsed == "00:00:30"
    assert session.ui_sink.last_readout.speed == "0.00 km/h"
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("00:00:00  17.385044, 78.486671")
    assert lines[-1].startswith("00:00:30  17.387000, 78.490000")


def test_main_writes_map(tmp_path, monkeypatch):
    output = tmp_path / "out.html"
    monkeypatch.setattr(
        "sys.argv",
        ["routeplay", str(FIXTURES / "dummy-route.json"), "--speed", "8", "--no-open", "--output", str(output)],
    )
    with patch("routeplay.cli.FrameLoop", side_effect=fast_frame_loop), patch(
        "routeplay.cli.open_file_in_browser"
    ) as mock_open:
        cli.main()
    assert output.exists()
    assert "replay-legend" in output.read_text(encoding="utf-8")
    mock_open.assert_not_called()


def test_main_exits_on_load_error(tmp_path, monkeypatch):
    monkeypatch.setattr("sys.argv", ["routeplay", str(tmp_path / "missing.json"), "--no-open"])
    loops = []

    def tracking_loop(fps=60.0):
        loop = fast_frame_loop(fps)
        loops.append(loop)
        return loop

    with patch("routeplay.cli.FrameLoop", side_effect=tracking_loop):
        with pytest.raises(SystemExit) as exc_info:
            cli.main()
    assert exc_info.value.code == 1
    # The frame loop is released even though loading failed
    assert loops and loops[0].cancelled


def test_main_exits_on_invalid_speed(monkeypatch):
    monkeypatch.setattr(
        "sys.argv", ["routeplay", str(FIXTURES / "dummy-route.json"), "--speed", "-2", "--no-open"]
    )
    with patch("routeplay.cli.FrameLoop", side_effect=fast_frame_loop):
        with pytest.raises(SystemExit) as exc_info:
            cli.main()
    assert exc_info.value.code == 1


def test_main_exits_on_non_positive_fps(monkeypatch):
    monkeypatch.setattr(
        "sys.argv", ["routeplay", str(FIXTURES / "dummy-route.json"), "--fps", "0", "--no-open"]
    )
    with patch("routeplay.cli.FrameLoop") as mock_frame_loop:
        with pytest.raises(SystemExit) as exc_info:
            cli.main()
    assert exc_info.value.code == 1
    mock_frame_loop.assert_not_called()


def test_main_without_source_prints_help(monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["routeplay"])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    assert exc_info.value.code == 1
    assert "usage" in capsys.readouterr().out.lower()
