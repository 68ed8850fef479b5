"""
Simulated Landmark Sources

Synthetic sinusoidal body motion standing in for a pose detector. Time is
derived from the frame number (frame_number * tick_s), never the wall clock,
and noise comes from a seeded generator, so runs are reproducible.
"""

import math
import numpy as np
from typing import Optional, List, Union, Dict

from .base import LandmarkSource
from ..core.landmarks import BodyPosition, Landmark, PostureMode


def video_sample_times(duration_s: float, max_samples: int = 100,
                       min_interval_s: float = 0.5) -> List[float]:
    """
    Timestamps at which an uploaded clip is analyzed.

    interval = max(min_interval_s, duration / max_samples); samples at
    i * interval for i < floor(duration / interval).
    """
    if duration_s <= 0:
        raise ValueError(f"video duration must be positive, got {duration_s}")
    interval = max(min_interval_s, duration_s / max_samples)
    total = int(math.floor(duration_s / interval))
    return [i * interval for i in range(total)]


class SimulatedLandmarkSource(LandmarkSource):
    """
    Live-camera stand-in.

    Sitting: head and spine drift forward and back over `period_s`.
    Squat: hips, shoulders and knees follow a squat cycle of `period_s`,
    knees drifting inward at the bottom.
    """

    def __init__(self, mode: Union[PostureMode, str], period_s: float = None,
                 tick_s: float = 3.0, noise: float = 0.01, seed: Optional[int] = None,
                 frames: Optional[int] = None):
        super().__init__(mode, frames)
        if period_s is None:
            period_s = 30.0 if self.mode is PostureMode.SITTING else 12.0
        self.period_s = period_s
        self.tick_s = tick_s
        self.noise = noise
        self._rng = np.random.default_rng(seed)

    def _jitter(self) -> float:
        return float(self._rng.normal(0.0, self.noise)) if self.noise > 0 else 0.0

    def _point(self, x: float, y: float) -> Landmark:
        return Landmark(float(np.clip(x + self._jitter(), 0, 1)),
                        float(np.clip(y + self._jitter(), 0, 1)))

    def phase(self, frame_number: int) -> float:
        return math.sin(2 * math.pi * frame_number * self.tick_s / self.period_s)

    def next_position(self, frame_number: int) -> BodyPosition:
        t = frame_number * self.tick_s
        phase = self.phase(frame_number)
        if self.mode is PostureMode.SITTING:
            points = self._sitting(phase)
        else:
            points = self._squat(phase)
        return BodyPosition(points, timestamp=t)

    def _sitting(self, phase: float) -> Dict[str, Landmark]:
        lean = abs(phase) * 0.1
        return {
            'head': self._point(0.5 + lean * 1.2, 0.15 + lean * 0.3),
            'neck': self._point(0.5 + lean * 0.4, 0.25),
            'left_shoulder': self._point(0.35 + lean * 0.2, 0.35),
            'right_shoulder': self._point(0.65 + lean * 0.2, 0.35 + lean * 0.1),
            'spine': self._point(0.5 + lean * 2.5, 0.5),
            'hips': self._point(0.5, 0.65),
        }

    def _squat(self, phase: float) -> Dict[str, Landmark]:
        depth = (phase + 1) / 2   # 0 standing .. 1 bottom
        drop = depth * 0.15
        cave = depth * 0.05
        return {
            'head': self._point(0.5 + depth * 0.05, 0.2 + drop),
            'left_shoulder': self._point(0.4 + depth * 0.08, 0.35 + drop),
            'right_shoulder': self._point(0.6 + depth * 0.08, 0.35 + drop),
            'hips': self._point(0.5 - depth * 0.05, 0.55 + drop),
            'left_knee': self._point(0.42 + cave, 0.7),
            'right_knee': self._point(0.58 - cave, 0.7),
            'left_ankle': self._point(0.4, 0.9),
            'right_ankle': self._point(0.6, 0.9),
        }


class VideoLandmarkSource(SimulatedLandmarkSource):
    """
    Uploaded-clip stand-in.

    Positions are sampled at `video_sample_times(duration_s)`; form degrades
    linearly over the clip to mimic fatigue.
    """

    def __init__(self, mode: Union[PostureMode, str], duration_s: float,
                 cycles: int = 3, noise: float = 0.005, seed: Optional[int] = None):
        self.sample_times = video_sample_times(duration_s)
        self.duration_s = duration_s
        super().__init__(mode, period_s=duration_s / cycles, tick_s=0.0, noise=noise,
                         seed=seed, frames=len(self.sample_times))

    def timestamp(self, frame_number: int) -> float:
        return self.sample_times[frame_number - 1]

    def phase(self, frame_number: int) -> float:
        return math.sin(2 * math.pi * self.timestamp(frame_number) / self.period_s)

    def next_position(self, frame_number: int) -> BodyPosition:
        t = self.timestamp(frame_number)
        fatigue = t / self.duration_s
        base = super().next_position(frame_number)
        points = dict(base.landmarks)
        if self.mode is PostureMode.SITTING:
            points['head'] = Landmark(min(1.0, points['head'].x + fatigue * 0.12), points['head'].y)
            points['spine'] = Landmark(min(1.0, points['spine'].x + fatigue * 0.3), points['spine'].y)
        else:
            drift = fatigue * 0.06
            points['left_knee'] = Landmark(points['left_knee'].x + drift, points['left_knee'].y)
            points['right_knee'] = Landmark(points['right_knee'].x - drift, points['right_knee'].y)
        return BodyPosition(points, timestamp=t)
