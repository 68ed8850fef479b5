"""Kalman smoothing for noisy landmark sources."""

from typing import Dict

from .base import LandmarkSource
from ..core.landmarks import BodyPosition, Landmark
from ..utils.kalman_filter import KalmanFilter2D


class SmoothedLandmarkSource(LandmarkSource):
    """Wraps a source and filters every landmark's (x, y) independently."""

    def __init__(self, source: LandmarkSource, process_variance: float = 1e-4,
                 measurement_variance: float = 1e-2):
        super().__init__(source.mode, source.frames)
        self.source = source
        self.process_variance = process_variance
        self.measurement_variance = measurement_variance
        self._filters: Dict[str, KalmanFilter2D] = {}

    def _filter(self, name: str) -> KalmanFilter2D:
        if name not in self._filters:
            self._filters[name] = KalmanFilter2D(self.process_variance, self.measurement_variance)
        return self._filters[name]

    def next_position(self, frame_number: int) -> BodyPosition:
        raw = self.source.next_position(frame_number)
        smoothed = {}
        for name, lm in raw.landmarks.items():
            x, y = self._filter(name).update(lm.x, lm.y)
            smoothed[name] = Landmark(x, y, lm.z, lm.visibility)
        return BodyPosition(smoothed, timestamp=raw.timestamp)

    def reset(self):
        for f in self._filters.values():
            f.reset()
