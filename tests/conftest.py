"""Shared fixtures: landmark builders and a deterministic engine."""

import itertools

import pytest

from Posture_Engine.core.engine import PostureAnalysisEngine
from Posture_Engine.core.landmarks import BodyPosition


def sitting_position(head=(0.5, 0.15), neck=(0.5, 0.25), left_shoulder=(0.35, 0.35),
                     right_shoulder=(0.65, 0.35), spine=(0.5, 0.5), hips=(0.5, 0.65),
                     **extra) -> BodyPosition:
    points = dict(head=head, neck=neck, left_shoulder=left_shoulder,
                  right_shoulder=right_shoulder, spine=spine, hips=hips, **extra)
    return BodyPosition.from_dict({k: v for k, v in points.items() if v is not None})


def squat_position(head=(0.5, 0.3), left_shoulder=(0.4, 0.45), right_shoulder=(0.6, 0.45),
                   hips=(0.5, 0.7), left_knee=(0.42, 0.7), right_knee=(0.58, 0.7),
                   left_ankle=(0.4, 0.9), right_ankle=(0.6, 0.9), **extra) -> BodyPosition:
    points = dict(head=head, left_shoulder=left_shoulder, right_shoulder=right_shoulder,
                  hips=hips, left_knee=left_knee, right_knee=right_knee,
                  left_ankle=left_ankle, right_ankle=right_ankle, **extra)
    return BodyPosition.from_dict({k: v for k, v in points.items() if v is not None})


@pytest.fixture
def clock():
    """Monotonic fake clock: 1000.0, 1001.0, ..."""
    counter = itertools.count(1000)
    return lambda: float(next(counter))


@pytest.fixture
def engine(clock):
    return PostureAnalysisEngine(clock=clock)
