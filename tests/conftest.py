#!/usr/bin/env python3
"""
Shared fixtures: sinks that record what the animation driver emits.
"""

import pytest


class RecordingRenderSink:
    def __init__(self):
        self.frames = []
        self.resets = []

    def render(self, frame):
        self.frames.append(frame)

    def reset(self, start):
        self.resets.append(start)


class RecordingUiSink:
    def __init__(self):
        self.readouts = []
        self.samples = []

    def show(self, readout, sample):
        self.readouts.append(readout)
        self.samples.append(sample)


@pytest.fixture
def render_sink():
    return RecordingRenderSink()


@pytest.fixture
def ui_sink():
    return RecordingUiSink()
